"""Event service — customer-owned events, role-scoped reads.

Event status is descriptive: any authorised editor may set any value.
The owning customer profile is fixed at creation and never patched.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from marketplace.errors import NotFoundError, ValidationError
from marketplace.models.account import AccountRole
from marketplace.models.event import Event, EventStatus
from marketplace.services import activity_service, policy
from marketplace.services.policy import Action, Resource
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = ("id", "customer_profile_id", "created_at", "updated_at")
_REQUIRED_FIELDS = ("name", "start_at", "end_at", "status")


def event_resource(event: Event) -> Resource:
    return Resource(customer_profile_id=event.customer_profile_id)


def _event_snapshot(event: Event) -> dict[str, Any]:
    """JSON-safe view of an event for the activity payload."""
    return {
        "name": event.name,
        "start_at": event.start_at.isoformat() if event.start_at else None,
        "end_at": event.end_at.isoformat() if event.end_at else None,
        "location": event.location,
        "status": event.status.value if event.status else None,
        "budget": event.budget,
    }


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat those as UTC so comparisons work."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _check_window(start_at: datetime, end_at: datetime) -> None:
    if as_utc(end_at) < as_utc(start_at):
        raise ValidationError("Event end must not be before its start")


def load_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def get_event(db: Session, ctx: AuthenticatedContext, event_id: int) -> Event:
    event = load_event(db, event_id)
    policy.require(ctx, Action.event_read, event_resource(event))
    return event


def list_events(
    db: Session,
    ctx: AuthenticatedContext,
    statuses: Optional[list[EventStatus]] = None,
) -> list[Event]:
    """Customers see their own events; staff see all."""
    policy.require(ctx, Action.event_list)
    query = db.query(Event)
    if ctx.role == AccountRole.customer:
        query = query.filter(Event.customer_profile_id == ctx.profile_id)
    if statuses:
        query = query.filter(Event.status.in_(statuses))
    return query.order_by(Event.start_at).all()


def create_event(db: Session, ctx: AuthenticatedContext, data: dict[str, Any]) -> Event:
    policy.require(ctx, Action.event_create)
    _check_window(data["start_at"], data["end_at"])

    event = Event(customer_profile_id=ctx.profile_id, status=EventStatus.pending, **data)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) for customer profile %s", event.name, event.id, ctx.profile_id)

    activity_service.record(
        db, ctx.account_id, "event_create", f"New event created: {event.name}",
        entity_type="event", entity_id=event.id, payload=_event_snapshot(event),
    )
    return event


def update_event(db: Session, ctx: AuthenticatedContext, event_id: int, updates: dict[str, Any]) -> Event:
    event = load_event(db, event_id)
    policy.require(ctx, Action.event_update, event_resource(event))

    updates = {k: v for k, v in updates.items() if hasattr(event, k) and k not in _IMMUTABLE_FIELDS}
    missing = [k for k in _REQUIRED_FIELDS if k in updates and updates[k] is None]
    if missing:
        raise ValidationError(f"Fields cannot be cleared: {', '.join(missing)}")
    _check_window(updates.get("start_at", event.start_at), updates.get("end_at", event.end_at))

    before = _event_snapshot(event)
    for field, value in updates.items():
        setattr(event, field, value)

    db.commit()
    db.refresh(event)
    logger.info("Updated event %s", event_id)

    activity_service.record(
        db, ctx.account_id, "event_update", f"Event updated: {event.name}",
        entity_type="event", entity_id=event.id,
        payload={"before": before, "after": _event_snapshot(event)},
    )
    return event
