"""Provider portfolio and review routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.schemas.provider import PortfolioItemCreate, PortfolioItemOut, ReviewCreate, ReviewOut
from marketplace.services import portfolio_service, review_service
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/portfolio", response_model=list[PortfolioItemOut])
def list_portfolio(
    provider_id: Optional[int] = Query(None),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return portfolio_service.list_items(db, ctx, provider_profile_id=provider_id)


@router.post("/portfolio", response_model=PortfolioItemOut, status_code=status.HTTP_201_CREATED)
def create_portfolio_item(
    payload: PortfolioItemCreate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return portfolio_service.create_item(db, ctx, payload.model_dump())


@router.get("/reviews", response_model=list[ReviewOut])
def list_reviews(
    provider_id: Optional[int] = Query(None),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Reviews for one provider, newest first."""
    return review_service.list_reviews(db, ctx, provider_profile_id=provider_id)


@router.post("/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return review_service.create_review(db, ctx, payload.model_dump())
