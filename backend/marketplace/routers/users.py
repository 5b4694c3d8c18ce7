"""Account administration routes (staff)."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.models.account import AccountRole, AccountStatus
from marketplace.schemas.account import AccountOut, AccountStatusUpdate, StaffAccountCreate
from marketplace.services import account_service
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[AccountOut])
def list_users(
    role: Optional[AccountRole] = Query(None),
    account_status: Optional[AccountStatus] = Query(None, alias="status"),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return account_service.list_accounts(db, ctx, role=role, status=account_status)


@router.post("", response_model=AccountOut, status_code=status.HTTP_201_CREATED)
def create_staff_user(
    payload: StaffAccountCreate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Admin-only creation of admin / employee accounts."""
    return account_service.create_staff_account(
        db, ctx, payload.username, payload.email, payload.password, payload.role,
    )


@router.patch("/{account_id}/status", response_model=AccountOut)
def update_user_status(
    account_id: int,
    payload: AccountStatusUpdate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Approve, reject or deactivate an account."""
    return account_service.set_account_status(db, ctx, account_id, payload.status)
