"""Activity recorder — append-only audit trail.

Recording is best-effort: the caller's state change is already committed
when ``record`` runs, and a failure here is logged and rolled back on its
own without undoing that change.
"""
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.models.activity import Activity
from marketplace.services import policy
from marketplace.services.context import AuthenticatedContext
from marketplace.services.policy import Action

logger = logging.getLogger(__name__)


def record(
    db: Session,
    actor_account_id: Optional[int],
    action: str,
    description: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    payload: Optional[dict[str, Any]] = None,
) -> Optional[Activity]:
    """Append one activity row. Returns None if the write failed."""
    activity = Activity(
        actor_account_id=actor_account_id,
        action=action,
        description=description,
        entity_type=entity_type,
        entity_id=entity_id,
        payload=payload,
    )
    try:
        db.add(activity)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record activity '%s' for %s %s", action, entity_type, entity_id)
        return None
    return activity


def list_activities(db: Session, ctx: AuthenticatedContext, limit: int = 20) -> list[Activity]:
    """Most recent first. Staff only."""
    policy.require(ctx, Action.activity_list)
    return db.query(Activity).order_by(Activity.id.desc()).limit(limit).all()
