"""Service catalog — providers list what customers can book."""
import logging
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from marketplace.errors import NotFoundError
from marketplace.models.account import AccountRole
from marketplace.models.service import Service
from marketplace.services import activity_service, policy
from marketplace.services.policy import Action, Resource
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = ("id", "provider_profile_id", "created_at", "updated_at")


def load_service(db: Session, service_id: int) -> Service:
    service = db.get(Service, service_id)
    if not service:
        raise NotFoundError("Service not found")
    return service


def list_services(
    db: Session, ctx: AuthenticatedContext, provider_profile_id: Optional[int] = None,
) -> list[Service]:
    """Available services, plus the caller's own unavailable ones when a provider asks."""
    policy.require(ctx, Action.service_list)
    query = db.query(Service)
    if provider_profile_id is not None:
        query = query.filter(Service.provider_profile_id == provider_profile_id)
    if ctx.role == AccountRole.provider:
        query = query.filter(or_(Service.is_available.is_(True), Service.provider_profile_id == ctx.profile_id))
    else:
        query = query.filter(Service.is_available.is_(True))
    return query.order_by(Service.id).all()


def create_service(db: Session, ctx: AuthenticatedContext, data: dict[str, Any]) -> Service:
    policy.require(ctx, Action.service_create)
    service = Service(provider_profile_id=ctx.profile_id, **data)
    db.add(service)
    db.commit()
    db.refresh(service)
    logger.info("Provider profile %s created service %s '%s'", ctx.profile_id, service.id, service.title)

    activity_service.record(
        db, ctx.account_id, "service_create", f"Provider service created: {service.title}",
        entity_type="service", entity_id=service.id,
    )
    return service


def update_service(db: Session, ctx: AuthenticatedContext, service_id: int, updates: dict[str, Any]) -> Service:
    service = load_service(db, service_id)
    policy.require(ctx, Action.service_update, Resource(provider_profile_id=service.provider_profile_id))

    for field, value in updates.items():
        if hasattr(service, field) and field not in _IMMUTABLE_FIELDS:
            setattr(service, field, value)
    db.commit()
    db.refresh(service)
    logger.info("Updated service %s", service_id)

    activity_service.record(
        db, ctx.account_id, "service_update", f"Provider service updated: {service.title}",
        entity_type="service", entity_id=service.id,
    )
    return service
