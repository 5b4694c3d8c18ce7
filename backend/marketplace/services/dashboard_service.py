"""Staff dashboard — headline counts for the marketplace."""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session

from marketplace.config import settings
from marketplace.models.account import Account
from marketplace.models.event import Event, EventStatus
from marketplace.models.proposal import Proposal, ProposalStatus
from marketplace.services import policy
from marketplace.services.policy import Action
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


def month_start(now: Optional[datetime] = None) -> datetime:
    """First instant of the current month in BUSINESS_TIMEZONE, as UTC."""
    tz = pytz.timezone(settings.BUSINESS_TIMEZONE)
    local_now = (now or datetime.now(timezone.utc)).astimezone(tz)
    local_start = tz.localize(datetime(local_now.year, local_now.month, 1))
    return local_start.astimezone(timezone.utc)


def get_stats(db: Session, ctx: AuthenticatedContext) -> dict[str, Any]:
    policy.require(ctx, Action.dashboard_read)

    revenue = (
        db.query(func.coalesce(func.sum(Proposal.total_price), 0))
        .filter(Proposal.status == ProposalStatus.accepted, Proposal.created_at >= month_start())
        .scalar()
    )
    stats = {
        "total_users": db.query(Account).count(),
        "active_events": db.query(Event)
        .filter(Event.status.in_([EventStatus.confirmed, EventStatus.in_progress]))
        .count(),
        "pending_events": db.query(Event).filter(Event.status == EventStatus.pending).count(),
        "monthly_revenue": int(revenue),
        "pending_approvals": db.query(Proposal).filter(Proposal.status == ProposalStatus.pending).count(),
        "recent_users": db.query(Account)
        .order_by(Account.created_at.desc(), Account.id.desc())
        .limit(RECENT_LIMIT)
        .all(),
        "recent_events": db.query(Event)
        .order_by(Event.created_at.desc(), Event.id.desc())
        .limit(RECENT_LIMIT)
        .all(),
    }
    logger.debug("Dashboard stats for account %s: %s users, %s revenue", ctx.account_id, stats["total_users"], revenue)
    return stats
