"""Activity feed and notification inbox routes."""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.schemas.activity import ActivityOut, NotificationOut
from marketplace.services import activity_service, notification_service
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/activities", response_model=list[ActivityOut])
def list_activities(
    limit: int = Query(20, ge=1, le=200),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Recent activity across the marketplace, newest first."""
    return activity_service.list_activities(db, ctx, limit=limit)


@router.get("/notifications", response_model=list[NotificationOut])
def list_notifications(
    unread: bool = Query(False),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return notification_service.list_for(db, ctx, unread_only=unread)


@router.post("/notifications/{notification_id}/read", response_model=NotificationOut)
def mark_notification_read(
    notification_id: int,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return notification_service.mark_read(db, ctx, notification_id)
