"""Transition tables and the conditional update every workflow goes through.

A transition is legal only if ``(current_state, trigger)`` is in the table.
Applying it is a single ``UPDATE ... WHERE id = :id AND status = :expected``;
if another request moved the row first, zero rows match and the caller gets
the same ConflictError as for an illegal transition.
"""
import enum
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, TypeVar

from sqlalchemy.orm import Session

from marketplace.errors import ConflictError
from marketplace.models.booking import BookingStatus
from marketplace.models.proposal import ProposalStatus

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=enum.Enum)


class ProposalTrigger(str, enum.Enum):
    send = "send"
    accept = "accept"
    reject = "reject"
    expire = "expire"


class BookingTrigger(str, enum.Enum):
    confirm = "confirm"
    decline = "decline"
    cancel = "cancel"
    complete = "complete"


PROPOSAL_TRANSITIONS: Mapping[tuple[ProposalStatus, ProposalTrigger], ProposalStatus] = {
    (ProposalStatus.draft, ProposalTrigger.send): ProposalStatus.pending,
    (ProposalStatus.pending, ProposalTrigger.accept): ProposalStatus.accepted,
    (ProposalStatus.pending, ProposalTrigger.reject): ProposalStatus.rejected,
    (ProposalStatus.pending, ProposalTrigger.expire): ProposalStatus.expired,
}

BOOKING_TRANSITIONS: Mapping[tuple[BookingStatus, BookingTrigger], BookingStatus] = {
    (BookingStatus.pending, BookingTrigger.confirm): BookingStatus.confirmed,
    (BookingStatus.pending, BookingTrigger.decline): BookingStatus.declined,
    (BookingStatus.confirmed, BookingTrigger.cancel): BookingStatus.cancelled,
    (BookingStatus.confirmed, BookingTrigger.complete): BookingStatus.completed,
}


def next_state(table: Mapping[tuple[S, Any], S], current: S, trigger: enum.Enum) -> S:
    target = table.get((current, trigger))
    if target is None:
        raise ConflictError(f"Cannot {trigger.value} when status is {current.value}")
    return target


def is_terminal(table: Mapping[tuple[S, Any], S], state: S) -> bool:
    return not any(source == state for source, _ in table)


def update_in_state(db: Session, model, entity_id: int, expected: S, **values: Any) -> None:
    """Write ``values`` to row ``entity_id`` only if its status is still ``expected``, then commit."""
    values["updated_at"] = datetime.now(timezone.utc)
    updated = (
        db.query(model)
        .filter(model.id == entity_id, model.status == expected)
        .update(values, synchronize_session=False)
    )
    if updated != 1:
        db.rollback()
        logger.info("Stale write on %s %s (row no longer %s)", model.__tablename__, entity_id, expected.value)
        raise ConflictError(f"{model.__name__} {entity_id} is no longer {expected.value}")
    db.commit()


def apply(db: Session, model, entity_id: int, expected: S, target: S, **values: Any) -> None:
    """Conditionally move row ``entity_id`` from ``expected`` to ``target``."""
    update_in_state(db, model, entity_id, expected, status=target, **values)
    logger.info("%s %s: %s -> %s", model.__tablename__, entity_id, expected.value, target.value)
