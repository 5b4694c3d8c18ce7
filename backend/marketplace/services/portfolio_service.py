"""Provider portfolios — showcase items listed on a provider's page."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from marketplace.errors import ValidationError
from marketplace.models.account import AccountRole
from marketplace.models.portfolio import PortfolioItem
from marketplace.services import activity_service, policy
from marketplace.services.policy import Action
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)


def target_provider(ctx: AuthenticatedContext, provider_profile_id: Optional[int]) -> int:
    """Providers default to their own page; everyone else must name one."""
    if provider_profile_id is not None:
        return provider_profile_id
    if ctx.role == AccountRole.provider:
        return ctx.profile_id
    raise ValidationError("Provider ID is required")


def list_items(
    db: Session, ctx: AuthenticatedContext, provider_profile_id: Optional[int] = None,
) -> list[PortfolioItem]:
    policy.require(ctx, Action.portfolio_list)
    provider_id = target_provider(ctx, provider_profile_id)
    return (
        db.query(PortfolioItem)
        .filter(PortfolioItem.provider_profile_id == provider_id)
        .order_by(PortfolioItem.featured.desc(), PortfolioItem.sort_order, PortfolioItem.id)
        .all()
    )


def create_item(db: Session, ctx: AuthenticatedContext, data: dict[str, Any]) -> PortfolioItem:
    policy.require(ctx, Action.portfolio_create)
    item = PortfolioItem(provider_profile_id=ctx.profile_id, **data)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Provider profile %s added portfolio item %s", ctx.profile_id, item.id)

    activity_service.record(
        db, ctx.account_id, "portfolio_update", f"Portfolio item added: {item.title}",
        entity_type="portfolio_item", entity_id=item.id,
    )
    return item
