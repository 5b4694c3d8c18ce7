"""Staff dashboard routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.schemas.dashboard import DashboardStats
from marketplace.services import dashboard_service
from marketplace.services.context import AuthenticatedContext

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_stats(
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return dashboard_service.get_stats(db, ctx)
