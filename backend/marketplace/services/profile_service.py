"""Profile resolver — maps an account to its single role-scoped profile.

This is the only place that turns a role into a profile table. Everything
downstream works with the ``AuthenticatedContext`` it produces.
"""
import logging
from typing import Any, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.errors import NotFoundError, ValidationError
from marketplace.models.account import Account, AccountRole
from marketplace.models.profile import AdminProfile, EmployeeProfile, CustomerProfile, ProviderProfile
from marketplace.schemas.profile import StaffProfileUpdate, CustomerProfileUpdate, ProviderProfileUpdate
from marketplace.services import activity_service, policy
from marketplace.services.context import AuthenticatedContext
from marketplace.services.policy import Action, Resource

logger = logging.getLogger(__name__)

Profile = Union[AdminProfile, EmployeeProfile, CustomerProfile, ProviderProfile]

PROFILE_MODELS: dict[AccountRole, type] = {
    AccountRole.admin: AdminProfile,
    AccountRole.employee: EmployeeProfile,
    AccountRole.customer: CustomerProfile,
    AccountRole.provider: ProviderProfile,
}

PROFILE_UPDATE_SCHEMAS: dict[AccountRole, type[BaseModel]] = {
    AccountRole.admin: StaffProfileUpdate,
    AccountRole.employee: StaffProfileUpdate,
    AccountRole.customer: CustomerProfileUpdate,
    AccountRole.provider: ProviderProfileUpdate,
}


def _profile_model(role: AccountRole) -> type:
    model = PROFILE_MODELS.get(role)
    if model is None:
        raise NotFoundError(f"No profile type registered for role '{role}'")
    return model


def _new_profile(account: Account) -> Profile:
    """Default profile for a freshly created account, named after the username."""
    model = _profile_model(account.role)
    if model is ProviderProfile:
        return ProviderProfile(
            account_id=account.id,
            display_name=account.username,
            contact_name=account.username,
            languages=[],
        )
    return model(account_id=account.id, name=account.username)


def find_profile(db: Session, account: Account) -> Profile | None:
    model = _profile_model(account.role)
    return db.query(model).filter(model.account_id == account.id).first()


def resolve(db: Session, account: Account) -> AuthenticatedContext:
    """Return the context for ``account``, creating its profile on first use.

    Idempotent: once a profile exists this is a pure lookup. A concurrent
    creator losing the unique(account_id) race re-reads the winner's row.
    """
    profile = find_profile(db, account)
    if profile is None:
        profile = _new_profile(account)
        db.add(profile)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            profile = find_profile(db, account)
            if profile is None:
                raise
        else:
            logger.info("Created %s profile %s for account %s", account.role.value, profile.id, account.id)

    return AuthenticatedContext(
        account_id=account.id,
        role=account.role,
        profile_id=profile.id,
        status=account.status,
    )


def get_profile(db: Session, ctx: AuthenticatedContext) -> Profile:
    model = _profile_model(ctx.role)
    profile = db.get(model, ctx.profile_id)
    if not profile:
        raise NotFoundError("Profile not found")
    policy.require(ctx, Action.profile_read, Resource(account_id=profile.account_id))
    return profile


def update_profile(db: Session, ctx: AuthenticatedContext, patch: dict[str, Any]) -> Profile:
    """Apply a partial update validated against the caller's role-specific schema."""
    schema = PROFILE_UPDATE_SCHEMAS[ctx.role]
    try:
        validated = schema.model_validate(patch)
    except PydanticValidationError as exc:
        raise ValidationError(str(exc))

    profile = get_profile(db, ctx)
    policy.require(ctx, Action.profile_update, Resource(account_id=profile.account_id))
    changes = validated.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    logger.info("Updated %s profile %s", ctx.role.value, profile.id)

    activity_service.record(
        db, ctx.account_id, "profile_update", f"{ctx.role.value.capitalize()} profile updated",
        entity_type=f"{ctx.role.value}_profile", entity_id=profile.id,
        payload={"fields": sorted(changes)},
    )
    return profile


def account_id_for_profile(db: Session, role: AccountRole, profile_id: int) -> int | None:
    """Reverse lookup used to address notifications to a profile's owner."""
    profile = db.get(_profile_model(role), profile_id)
    return profile.account_id if profile else None
