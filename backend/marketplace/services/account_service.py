"""Identity flows and account administration.

Ties the credential store, the profile resolver and the activity recorder
together: registration creates the account and its profile in one commit,
and every identity event leaves exactly one activity row.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from marketplace.errors import AccountNotActiveError, AuthenticationError, ValidationError
from marketplace.models.account import Account, AccountRole, AccountStatus, STAFF_ROLES
from marketplace.services import activity_service, credential_service, policy, profile_service
from marketplace.services.policy import Action
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = frozenset({AccountRole.customer, AccountRole.provider})
ADMIN_SETTABLE_STATUSES = frozenset({AccountStatus.active, AccountStatus.rejected, AccountStatus.inactive})


def _create(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: AccountRole,
    status: Optional[AccountStatus] = None,
) -> tuple[Account, AuthenticatedContext]:
    account = credential_service.register(db, username, email, password, role, status)
    ctx = profile_service.resolve(db, account)  # commits account + profile together
    db.refresh(account)
    logger.info("Registered %s account %s (%s)", role.value, account.id, account.username)
    return account, ctx


def register_account(db: Session, username: str, email: str, password: str, role: AccountRole) -> Account:
    """Public sign-up. Only customers and providers may register themselves."""
    if role not in SELF_SERVICE_ROLES:
        raise ValidationError("Only customer or provider accounts can be registered")
    account, _ = _create(db, username, email, password, role)
    activity_service.record(
        db, account.id, "registration", f"New {role.value} user registered",
        entity_type="account", entity_id=account.id,
    )
    return account


def create_staff_account(
    db: Session, ctx: AuthenticatedContext, username: str, email: str, password: str, role: AccountRole,
) -> Account:
    policy.require(ctx, Action.account_create)
    if role not in STAFF_ROLES:
        raise ValidationError("Staff accounts must be admin or employee")
    account, _ = _create(db, username, email, password, role, AccountStatus.active)
    activity_service.record(
        db, ctx.account_id, "account_create", f"{role.value.capitalize()} account {account.username} created",
        entity_type="account", entity_id=account.id,
    )
    return account


def login(db: Session, username: str, password: str) -> tuple[Account, AuthenticatedContext, str]:
    """Verify credentials and open a session. No token is issued on any failure."""
    account = credential_service.verify(db, username, password)
    credential_service.touch_login(db, account.id)
    ctx = profile_service.resolve(db, account)
    token = credential_service.issue_token(account)
    logger.info("Account %s logged in", account.id)
    activity_service.record(
        db, account.id, "login", f"{account.role.value} user logged in",
        entity_type="account", entity_id=account.id,
    )
    return account, ctx, token


def logout(db: Session, ctx: AuthenticatedContext) -> None:
    """End the session: every token issued to this account before now stops working."""
    credential_service.revoke_sessions(db, ctx.account_id)
    logger.info("Account %s logged out", ctx.account_id)
    activity_service.record(
        db, ctx.account_id, "logout", f"{ctx.role.value} user logged out",
        entity_type="account", entity_id=ctx.account_id,
    )


def context_for_token(db: Session, token: str) -> AuthenticatedContext:
    """Re-resolve the caller on every request; a deactivated account loses access at once."""
    account_id, token_version = credential_service.decode_token(token)
    account = db.get(Account, account_id)
    if account is None or account.token_version != token_version:
        raise AuthenticationError("Could not validate credentials")
    if account.status != AccountStatus.active:
        raise AccountNotActiveError(f"Your account is {account.status.value}")
    return profile_service.resolve(db, account)


def list_accounts(
    db: Session,
    ctx: AuthenticatedContext,
    role: Optional[AccountRole] = None,
    status: Optional[AccountStatus] = None,
) -> list[Account]:
    policy.require(ctx, Action.account_list)
    query = db.query(Account)
    if role is not None:
        query = query.filter(Account.role == role)
    if status is not None:
        query = query.filter(Account.status == status)
    return query.order_by(Account.id).all()


def set_account_status(db: Session, ctx: AuthenticatedContext, account_id: int, status: AccountStatus) -> Account:
    """Admin approval / rejection / deactivation of an account."""
    policy.require(ctx, Action.account_set_status)
    if status not in ADMIN_SETTABLE_STATUSES:
        raise ValidationError("Status must be active, rejected or inactive")
    account = credential_service.set_status(db, account_id, status)
    activity_service.record(
        db, ctx.account_id, "account_status_update",
        f"User status updated: {account.username} is now {status.value}",
        entity_type="account", entity_id=account.id,
    )
    return account
