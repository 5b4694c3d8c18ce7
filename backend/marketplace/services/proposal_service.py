"""Proposal workflow — draft → pending → accepted | rejected | expired.

Money is handled in integer minor units. ``total_price`` is always
recomputed from the line items; a caller-supplied total that disagrees is
ignored (and logged), never trusted.

Expiry is evaluated lazily: any read of a ``pending`` proposal whose
``valid_until`` day has ended in the business timezone persists the
``pending → expired`` transition before returning it.
"""
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

import pytz
from sqlalchemy.orm import Session

from marketplace.config import settings
from marketplace.errors import ConflictError, NotFoundError, ValidationError
from marketplace.models.account import AccountRole, STAFF_ROLES
from marketplace.models.event import Event
from marketplace.models.proposal import Proposal, ProposalStatus
from marketplace.services import activity_service, notification_service, policy, profile_service, transitions
from marketplace.services.event_service import load_event
from marketplace.services.notification_service import NotificationIntent
from marketplace.services.policy import Action, Resource
from marketplace.services.context import AuthenticatedContext
from marketplace.services.transitions import PROPOSAL_TRANSITIONS, ProposalTrigger

logger = logging.getLogger(__name__)

_OUTCOME_TRIGGERS = {
    ProposalStatus.accepted: ProposalTrigger.accept,
    ProposalStatus.rejected: ProposalTrigger.reject,
}


# ── Money ──────────────────────────────────────────────────────────

def _as_int(value: Any, field: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer number of minor currency units")
    if value < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return value


def price_items(items: list[dict[str, Any]]) -> tuple[list[dict[str, Any]], int]:
    """Validate line items and return them normalised together with their total."""
    normalised = []
    total = 0
    for index, item in enumerate(items):
        name = str(item.get("name") or "").strip()
        if not name:
            raise ValidationError(f"Item {index + 1} needs a name")
        unit_price = _as_int(item.get("unit_price"), f"Item {index + 1} unit_price", 0)
        quantity = _as_int(item.get("quantity"), f"Item {index + 1} quantity", 1)
        normalised.append({"name": name, "unit_price": unit_price, "quantity": quantity})
        total += unit_price * quantity
    return normalised, total


def _reconcile_total(items: list[dict[str, Any]], supplied_total: Optional[int]) -> tuple[list[dict[str, Any]], int]:
    normalised, total = price_items(items)
    if supplied_total is not None and supplied_total != total:
        logger.warning("Ignoring supplied proposal total %s; line items sum to %s", supplied_total, total)
    return normalised, total


# ── Expiry ─────────────────────────────────────────────────────────

def expires_at(valid_until: date) -> datetime:
    """End of the ``valid_until`` day in the business timezone, as UTC."""
    tz = pytz.timezone(settings.BUSINESS_TIMEZONE)
    local_end = tz.localize(datetime.combine(valid_until, time.max))
    return local_end.astimezone(timezone.utc)


def is_past_validity(proposal: Proposal, now: Optional[datetime] = None) -> bool:
    if proposal.valid_until is None:
        return False
    return (now or datetime.now(timezone.utc)) > expires_at(proposal.valid_until)


def _expire_if_due(db: Session, proposal: Proposal) -> Proposal:
    if proposal.status != ProposalStatus.pending or not is_past_validity(proposal):
        return proposal
    try:
        transitions.apply(db, Proposal, proposal.id, ProposalStatus.pending, ProposalStatus.expired)
    except ConflictError:
        # Someone else moved it first (decided or expired); their write stands.
        db.refresh(proposal)
        return proposal
    db.refresh(proposal)
    activity_service.record(
        db, None, "proposal_expired", f"Proposal \"{proposal.title}\" expired",
        entity_type="proposal", entity_id=proposal.id,
        payload={"valid_until": proposal.valid_until.isoformat()},
    )
    return proposal


# ── Reads ──────────────────────────────────────────────────────────

def proposal_resource(proposal: Proposal, event: Event) -> Resource:
    return Resource(
        customer_profile_id=event.customer_profile_id,
        author_role=proposal.author_role,
        author_profile_id=proposal.author_profile_id,
        is_draft=proposal.status == ProposalStatus.draft,
    )


def _load(db: Session, proposal_id: int) -> tuple[Proposal, Event]:
    proposal = db.get(Proposal, proposal_id)
    if not proposal:
        raise NotFoundError("Proposal not found")
    return _expire_if_due(db, proposal), load_event(db, proposal.event_id)


def get_proposal(db: Session, ctx: AuthenticatedContext, proposal_id: int) -> Proposal:
    proposal, event = _load(db, proposal_id)
    policy.require(ctx, Action.proposal_read, proposal_resource(proposal, event))
    return proposal


def list_event_proposals(db: Session, ctx: AuthenticatedContext, event_id: int) -> list[Proposal]:
    event = load_event(db, event_id)
    policy.require(ctx, Action.proposal_list, Resource(customer_profile_id=event.customer_profile_id))

    query = db.query(Proposal).filter(Proposal.event_id == event_id)
    if ctx.role not in STAFF_ROLES:
        query = query.filter(Proposal.status != ProposalStatus.draft)
    return [_expire_if_due(db, p) for p in query.order_by(Proposal.id).all()]


def list_proposals(
    db: Session, ctx: AuthenticatedContext, status: Optional[ProposalStatus] = None,
) -> list[Proposal]:
    """Staff-wide listing across all events."""
    policy.require(ctx, Action.proposal_list)
    query = db.query(Proposal)
    if status is not None:
        # a lapsed pending row is reported as expired once this read persists it
        wanted = {status, ProposalStatus.pending} if status == ProposalStatus.expired else {status}
        query = query.filter(Proposal.status.in_(wanted))
    proposals = [
        _expire_if_due(db, p) if p.status == ProposalStatus.pending else p
        for p in query.order_by(Proposal.id.desc()).all()
    ]
    if status is not None:
        proposals = [p for p in proposals if p.status == status]
    return proposals


# ── Mutations ──────────────────────────────────────────────────────

def create_proposal(
    db: Session,
    ctx: AuthenticatedContext,
    event_id: int,
    title: str,
    description: str = "",
    items: Optional[list[dict[str, Any]]] = None,
    total_price: Optional[int] = None,
    valid_until: Optional[date] = None,
) -> Proposal:
    policy.require(ctx, Action.proposal_create)
    event = load_event(db, event_id)
    normalised, total = _reconcile_total(items or [], total_price)

    proposal = Proposal(
        event_id=event.id,
        author_role=ctx.role,
        author_profile_id=ctx.profile_id,
        title=title,
        description=description,
        items=normalised,
        total_price=total,
        status=ProposalStatus.draft,
        valid_until=valid_until,
    )
    db.add(proposal)
    db.commit()
    db.refresh(proposal)
    logger.info("Created proposal %s for event %s (total %s)", proposal.id, event.id, total)

    activity_service.record(
        db, ctx.account_id, "proposal_create", f"Proposal created for event {event.name}",
        entity_type="proposal", entity_id=proposal.id, payload={"total_price": total},
    )
    return proposal


_EDITABLE_FIELDS = ("title", "description", "items", "total_price", "valid_until")


def edit_proposal(db: Session, ctx: AuthenticatedContext, proposal_id: int, patch: dict[str, Any]) -> Proposal:
    """Patch a draft. Items and total are re-priced together on every edit."""
    proposal, event = _load(db, proposal_id)
    policy.require(ctx, Action.proposal_edit, proposal_resource(proposal, event))
    if proposal.status != ProposalStatus.draft:
        raise ConflictError(f"Cannot edit a proposal that is {proposal.status.value}")

    values = {k: v for k, v in patch.items() if k in _EDITABLE_FIELDS}
    if "title" in values and not (values["title"] or "").strip():
        raise ValidationError("Title cannot be empty")
    if "description" in values and values["description"] is None:
        values["description"] = ""
    items = values.pop("items", None)
    supplied_total = values.pop("total_price", None)
    values["items"], values["total_price"] = _reconcile_total(
        items if items is not None else proposal.items, supplied_total,
    )

    transitions.update_in_state(db, Proposal, proposal.id, ProposalStatus.draft, **values)
    db.refresh(proposal)
    logger.info("Edited proposal %s (total %s)", proposal.id, proposal.total_price)

    activity_service.record(
        db, ctx.account_id, "proposal_update", f"Proposal updated for event {event.name}",
        entity_type="proposal", entity_id=proposal.id, payload={"total_price": proposal.total_price},
    )
    return proposal


def send_proposal(db: Session, ctx: AuthenticatedContext, proposal_id: int) -> Proposal:
    """draft → pending; notifies the event's customer."""
    proposal, event = _load(db, proposal_id)
    policy.require(ctx, Action.proposal_send, proposal_resource(proposal, event))
    target = transitions.next_state(PROPOSAL_TRANSITIONS, proposal.status, ProposalTrigger.send)

    values: dict[str, Any] = {}
    if proposal.valid_until is None:
        values["valid_until"] = datetime.now(timezone.utc).date() + timedelta(days=settings.PROPOSAL_VALIDITY_DAYS)
    transitions.apply(db, Proposal, proposal.id, proposal.status, target, **values)
    db.refresh(proposal)

    activity_service.record(
        db, ctx.account_id, "proposal_send", f"Proposal \"{proposal.title}\" sent to customer",
        entity_type="proposal", entity_id=proposal.id,
    )
    notification_service.emit(db, NotificationIntent(
        recipient_account_id=profile_service.account_id_for_profile(db, AccountRole.customer, event.customer_profile_id),
        kind="proposal_received",
        title="New Proposal Available",
        message=f"A new proposal for \"{event.name}\" is ready for your review.",
        entity_type="proposal",
        entity_id=proposal.id,
    ))
    return proposal


def decide_proposal(
    db: Session,
    ctx: AuthenticatedContext,
    proposal_id: int,
    outcome: ProposalStatus,
    feedback: Optional[str] = None,
) -> Proposal:
    """pending → accepted | rejected by the event's customer; notifies the author."""
    trigger = _OUTCOME_TRIGGERS.get(outcome)
    if trigger is None:
        raise ValidationError("Outcome must be 'accepted' or 'rejected'")

    proposal, event = _load(db, proposal_id)
    policy.require(ctx, Action.proposal_decide, proposal_resource(proposal, event))
    target = transitions.next_state(PROPOSAL_TRANSITIONS, proposal.status, trigger)

    feedback = (feedback or "").strip() or None
    if outcome == ProposalStatus.rejected and not feedback:
        raise ValidationError("Feedback is required when rejecting a proposal")

    transitions.apply(db, Proposal, proposal.id, proposal.status, target, feedback=feedback)
    db.refresh(proposal)

    activity_service.record(
        db, ctx.account_id, "proposal_decide", f"Proposal \"{proposal.title}\" {outcome.value}",
        entity_type="proposal", entity_id=proposal.id, payload={"feedback": feedback},
    )
    notification_service.emit(db, NotificationIntent(
        recipient_account_id=profile_service.account_id_for_profile(db, proposal.author_role, proposal.author_profile_id),
        kind=f"proposal_{outcome.value}",
        title=f"Proposal {outcome.value.capitalize()}",
        message=f"The customer {outcome.value} \"{proposal.title}\" for \"{event.name}\".",
        entity_type="proposal",
        entity_id=proposal.id,
    ))
    return proposal
