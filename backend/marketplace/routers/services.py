"""Provider service catalog routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.schemas.service import ServiceCreate, ServiceOut, ServiceUpdate
from marketplace.services import catalog_service
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[ServiceOut])
def list_services(
    provider_id: Optional[int] = Query(None),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return catalog_service.list_services(db, ctx, provider_profile_id=provider_id)


@router.post("", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return catalog_service.create_service(db, ctx, payload.model_dump())


@router.put("/{service_id}", response_model=ServiceOut)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return catalog_service.update_service(db, ctx, service_id, payload.model_dump(exclude_unset=True))
