"""Event API routes — delegates to event_service for ownership and window checks."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.models.event import EventStatus
from marketplace.schemas.event import EventCreate, EventOut, EventUpdate
from marketplace.schemas.proposal import ProposalOut
from marketplace.services import event_service, proposal_service
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[EventOut])
def list_events(
    event_status: Optional[list[EventStatus]] = Query(None, alias="status"),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Customers see their own events; staff see all."""
    return event_service.list_events(db, ctx, statuses=event_status)


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return event_service.create_event(db, ctx, payload.model_dump())


@router.get("/{event_id}", response_model=EventOut)
def get_event(
    event_id: int,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return event_service.get_event(db, ctx, event_id)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: EventUpdate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Owner or staff update; the owning customer cannot be changed."""
    return event_service.update_event(db, ctx, event_id, payload.model_dump(exclude_unset=True))


@router.get("/{event_id}/proposals", response_model=list[ProposalOut])
def list_event_proposals(
    event_id: int,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Proposals for one event. Customers never see drafts."""
    return proposal_service.list_event_proposals(db, ctx, event_id)
