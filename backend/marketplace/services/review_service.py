"""Customer reviews — one rating per completed booking.

Only the booking's own customer may review it, and only once the booking
has reached ``completed``. Unpublished reviews are visible to their
provider alone.
"""
import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.errors import ConflictError, NotFoundError
from marketplace.models.account import AccountRole
from marketplace.models.booking import Booking, BookingStatus
from marketplace.models.review import Review
from marketplace.services import activity_service, notification_service, policy, profile_service
from marketplace.services.booking_service import booking_resource
from marketplace.services.notification_service import NotificationIntent
from marketplace.services.policy import Action
from marketplace.services.portfolio_service import target_provider
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)


def list_reviews(
    db: Session, ctx: AuthenticatedContext, provider_profile_id: Optional[int] = None,
) -> list[Review]:
    """Newest first."""
    policy.require(ctx, Action.review_list)
    provider_id = target_provider(ctx, provider_profile_id)
    query = db.query(Review).filter(Review.provider_profile_id == provider_id)
    if not (ctx.role == AccountRole.provider and ctx.profile_id == provider_id):
        query = query.filter(Review.published.is_(True))
    return query.order_by(Review.created_at.desc(), Review.id.desc()).all()


def create_review(db: Session, ctx: AuthenticatedContext, data: dict[str, Any]) -> Review:
    booking = db.get(Booking, data["booking_id"])
    if not booking:
        raise NotFoundError("Booking not found")
    policy.require(ctx, Action.review_create, booking_resource(booking))
    if booking.status != BookingStatus.completed:
        raise ConflictError("Only completed bookings can be reviewed")

    review = Review(
        customer_profile_id=booking.customer_profile_id,
        provider_profile_id=booking.provider_profile_id,
        **data,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("This booking has already been reviewed")
    db.refresh(review)
    logger.info("Customer profile %s reviewed booking %s (%s/5)", ctx.profile_id, booking.id, review.rating)

    activity_service.record(
        db, ctx.account_id, "review_create", f"Review posted for booking #{booking.id}",
        entity_type="review", entity_id=review.id, payload={"rating": review.rating},
    )
    notification_service.emit(db, NotificationIntent(
        recipient_account_id=profile_service.account_id_for_profile(
            db, AccountRole.provider, booking.provider_profile_id,
        ),
        kind="review_received",
        title="New review",
        message=f"You received a {review.rating}/5 review for booking #{booking.id}",
        entity_type="review",
        entity_id=review.id,
    ))
    return review
