"""Identity routes: registration, sessions, the current account and its profile."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.schemas.account import (
    AccountOut, ContextOut, CurrentUserOut, LoginRequest, RegisterRequest, TokenOut,
)
from marketplace.schemas.profile import (
    CustomerProfileOut, ProfileOut, ProviderProfileOut, StaffProfileOut,
)
from marketplace.models.account import AccountRole
from marketplace.services import account_service, credential_service, profile_service
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)
router = APIRouter()

_PROFILE_OUT = {
    AccountRole.admin: StaffProfileOut,
    AccountRole.employee: StaffProfileOut,
    AccountRole.customer: CustomerProfileOut,
    AccountRole.provider: ProviderProfileOut,
}


def _profile_out(ctx: AuthenticatedContext, profile) -> ProfileOut:
    return ProfileOut(role=ctx.role.value, profile=_PROFILE_OUT[ctx.role].model_validate(profile))


@router.post("/register", response_model=AccountOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Self-service sign-up for customers and providers."""
    return account_service.register_account(
        db, payload.username, payload.email, payload.password, payload.role,
    )


@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    account, ctx, token = account_service.login(db, payload.username, payload.password)
    return TokenOut(
        access_token=token,
        account=AccountOut.model_validate(account),
        context=ContextOut.model_validate(ctx),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(ctx: AuthenticatedContext = Depends(get_current_context), db: Session = Depends(get_db)):
    account_service.logout(db, ctx)


@router.get("/user", response_model=CurrentUserOut)
def current_user(ctx: AuthenticatedContext = Depends(get_current_context), db: Session = Depends(get_db)):
    """The caller's account (never the password hash) and resolved context."""
    account = credential_service.get_account(db, ctx.account_id)
    return CurrentUserOut(account=AccountOut.model_validate(account), context=ContextOut.model_validate(ctx))


@router.get("/profile", response_model=ProfileOut)
def get_profile(ctx: AuthenticatedContext = Depends(get_current_context), db: Session = Depends(get_db)):
    return _profile_out(ctx, profile_service.get_profile(db, ctx))


@router.post("/profile", response_model=ProfileOut)
def update_profile(
    patch: dict,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Partial update, validated against the caller's role-specific profile schema."""
    return _profile_out(ctx, profile_service.update_profile(db, ctx, patch))
