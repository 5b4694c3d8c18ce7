"""Booking workflow — pending → confirmed | declined, confirmed → completed | cancelled.

Completion is an explicit staff action; nothing completes a booking
automatically when its window elapses.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from marketplace.errors import ConflictError, NotFoundError, ValidationError
from marketplace.models.account import AccountRole
from marketplace.models.booking import Booking, BookingStatus
from marketplace.services import activity_service, notification_service, policy, profile_service, transitions
from marketplace.services.catalog_service import load_service
from marketplace.services.event_service import as_utc, load_event
from marketplace.services.notification_service import NotificationIntent
from marketplace.services.policy import Action, Resource
from marketplace.services.context import AuthenticatedContext
from marketplace.services.transitions import BOOKING_TRANSITIONS, BookingTrigger

logger = logging.getLogger(__name__)

_RESPONSE_TRIGGERS = {
    BookingStatus.confirmed: BookingTrigger.confirm,
    BookingStatus.declined: BookingTrigger.decline,
}


def booking_resource(booking: Booking) -> Resource:
    return Resource(
        customer_profile_id=booking.customer_profile_id,
        provider_profile_id=booking.provider_profile_id,
    )


def _customer_account(db: Session, booking: Booking) -> Optional[int]:
    return profile_service.account_id_for_profile(db, AccountRole.customer, booking.customer_profile_id)


def _provider_account(db: Session, booking: Booking) -> Optional[int]:
    return profile_service.account_id_for_profile(db, AccountRole.provider, booking.provider_profile_id)


def _load(db: Session, booking_id: int) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def get_booking(db: Session, ctx: AuthenticatedContext, booking_id: int) -> Booking:
    booking = _load(db, booking_id)
    policy.require(ctx, Action.booking_read, booking_resource(booking))
    return booking


def list_bookings(
    db: Session, ctx: AuthenticatedContext, status: Optional[BookingStatus] = None,
) -> list[Booking]:
    """Customers and providers see their own side; staff see everything."""
    policy.require(ctx, Action.booking_list)
    query = db.query(Booking)
    if ctx.role == AccountRole.customer:
        query = query.filter(Booking.customer_profile_id == ctx.profile_id)
    elif ctx.role == AccountRole.provider:
        query = query.filter(Booking.provider_profile_id == ctx.profile_id)
    if status is not None:
        query = query.filter(Booking.status == status)
    return query.order_by(Booking.id.desc()).all()


def request_booking(
    db: Session,
    ctx: AuthenticatedContext,
    event_id: int,
    service_id: int,
    start_at: Optional[datetime] = None,
    end_at: Optional[datetime] = None,
    price: Optional[int] = None,
    special_requirements: Optional[str] = None,
) -> Booking:
    """Customer books a provider's service for one of their own events."""
    event = load_event(db, event_id)
    policy.require(ctx, Action.booking_request, Resource(customer_profile_id=event.customer_profile_id))
    service = load_service(db, service_id)
    if not service.is_available:
        raise ConflictError("Service is not available for booking")

    start_at = start_at or event.start_at
    end_at = end_at or event.end_at
    if as_utc(end_at) < as_utc(start_at):
        raise ValidationError("Booking end must not be before its start")
    if price is not None and price < 0:
        raise ValidationError("Price cannot be negative")

    booking = Booking(
        event_id=event.id,
        customer_profile_id=ctx.profile_id,
        provider_profile_id=service.provider_profile_id,
        service_id=service.id,
        start_at=start_at,
        end_at=end_at,
        price=service.base_price if price is None else price,
        status=BookingStatus.pending,
        special_requirements=special_requirements,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s requested for service %s on event %s", booking.id, service.id, event.id)

    activity_service.record(
        db, ctx.account_id, "booking_request", f"Booking requested for \"{service.title}\"",
        entity_type="booking", entity_id=booking.id, payload={"price": booking.price},
    )
    notification_service.emit(db, NotificationIntent(
        recipient_account_id=_provider_account(db, booking),
        kind="booking_requested",
        title="New Booking Request",
        message=f"You have a new booking request for \"{service.title}\" at event \"{event.name}\".",
        entity_type="booking",
        entity_id=booking.id,
    ))
    return booking


def respond_booking(db: Session, ctx: AuthenticatedContext, booking_id: int, outcome: BookingStatus) -> Booking:
    """Provider confirms or declines a pending booking; notifies the customer."""
    trigger = _RESPONSE_TRIGGERS.get(outcome)
    if trigger is None:
        raise ValidationError("Outcome must be 'confirmed' or 'declined'")

    booking = _load(db, booking_id)
    policy.require(ctx, Action.booking_respond, booking_resource(booking))
    target = transitions.next_state(BOOKING_TRANSITIONS, booking.status, trigger)
    transitions.apply(db, Booking, booking.id, booking.status, target)
    db.refresh(booking)

    activity_service.record(
        db, ctx.account_id, f"booking_{outcome.value}", f"Booking {outcome.value} by provider",
        entity_type="booking", entity_id=booking.id,
    )
    notification_service.emit(db, NotificationIntent(
        recipient_account_id=_customer_account(db, booking),
        kind=f"booking_{outcome.value}",
        title=f"Booking {outcome.value.capitalize()}",
        message=f"Your booking #{booking.id} has been {outcome.value} by the provider.",
        entity_type="booking",
        entity_id=booking.id,
    ))
    return booking


def cancel_booking(db: Session, ctx: AuthenticatedContext, booking_id: int, reason: str) -> Booking:
    """Either party cancels a confirmed booking; the other party is notified."""
    booking = _load(db, booking_id)
    policy.require(ctx, Action.booking_cancel, booking_resource(booking))
    target = transitions.next_state(BOOKING_TRANSITIONS, booking.status, BookingTrigger.cancel)

    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A cancellation reason is required")

    transitions.apply(db, Booking, booking.id, booking.status, target, cancel_reason=reason)
    db.refresh(booking)

    activity_service.record(
        db, ctx.account_id, "booking_cancelled", f"Booking cancelled by {ctx.role.value}",
        entity_type="booking", entity_id=booking.id, payload={"reason": reason},
    )
    if ctx.role == AccountRole.customer:
        counterparty = _provider_account(db, booking)
    else:
        counterparty = _customer_account(db, booking)
    notification_service.emit(db, NotificationIntent(
        recipient_account_id=counterparty,
        kind="booking_cancelled",
        title="Booking Cancelled",
        message=f"Booking #{booking.id} was cancelled by the {ctx.role.value}: {reason}",
        entity_type="booking",
        entity_id=booking.id,
    ))
    return booking


def complete_booking(db: Session, ctx: AuthenticatedContext, booking_id: int) -> Booking:
    """Staff mark a confirmed booking as delivered; both parties are notified."""
    booking = _load(db, booking_id)
    policy.require(ctx, Action.booking_complete, booking_resource(booking))
    target = transitions.next_state(BOOKING_TRANSITIONS, booking.status, BookingTrigger.complete)
    transitions.apply(db, Booking, booking.id, booking.status, target)
    db.refresh(booking)

    activity_service.record(
        db, ctx.account_id, "booking_completed", f"Booking #{booking.id} marked completed",
        entity_type="booking", entity_id=booking.id,
    )
    for recipient in (_customer_account(db, booking), _provider_account(db, booking)):
        notification_service.emit(db, NotificationIntent(
            recipient_account_id=recipient,
            kind="booking_completed",
            title="Booking Completed",
            message=f"Booking #{booking.id} has been marked completed.",
            entity_type="booking",
            entity_id=booking.id,
        ))
    return booking
