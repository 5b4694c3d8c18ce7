"""Notification emitter — workflows hand over intents, this persists them.

Delivery (email, push) is someone else's job; the ``notifications`` table
is the boundary. Like activity recording, emission is best-effort.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.errors import NotFoundError
from marketplace.models.notification import Notification
from marketplace.services import policy
from marketplace.services.policy import Action, Resource
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationIntent:
    recipient_account_id: Optional[int]
    kind: str
    title: str
    message: str
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None


def emit(db: Session, intent: NotificationIntent) -> Optional[Notification]:
    if intent.recipient_account_id is None:
        logger.warning("Dropping '%s' notification with no recipient", intent.kind)
        return None

    notification = Notification(
        recipient_account_id=intent.recipient_account_id,
        kind=intent.kind,
        title=intent.title,
        message=intent.message,
        entity_type=intent.entity_type,
        entity_id=intent.entity_id,
    )
    try:
        db.add(notification)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to emit '%s' notification to account %s", intent.kind, intent.recipient_account_id)
        return None
    logger.info("Notification '%s' queued for account %s", intent.kind, intent.recipient_account_id)
    return notification


def list_for(db: Session, ctx: AuthenticatedContext, unread_only: bool = False) -> list[Notification]:
    query = db.query(Notification).filter(Notification.recipient_account_id == ctx.account_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.id.desc()).all()


def mark_read(db: Session, ctx: AuthenticatedContext, notification_id: int) -> Notification:
    notification = db.get(Notification, notification_id)
    if not notification:
        raise NotFoundError("Notification not found")
    policy.require(ctx, Action.notification_read, Resource(account_id=notification.recipient_account_id))

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)
    return notification
