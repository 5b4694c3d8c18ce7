"""Proposal API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.models.proposal import ProposalStatus
from marketplace.schemas.proposal import ProposalCreate, ProposalDecision, ProposalOut, ProposalUpdate
from marketplace.services import proposal_service
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[ProposalOut])
def list_proposals(
    proposal_status: Optional[ProposalStatus] = Query(None, alias="status"),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return proposal_service.list_proposals(db, ctx, status=proposal_status)


@router.post("", response_model=ProposalOut, status_code=status.HTTP_201_CREATED)
def create_proposal(
    payload: ProposalCreate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Staff draft a proposal; the total is recomputed from the items."""
    return proposal_service.create_proposal(
        db, ctx,
        event_id=payload.event_id,
        title=payload.title,
        description=payload.description,
        items=[item.model_dump() for item in payload.items],
        total_price=payload.total_price,
        valid_until=payload.valid_until,
    )


@router.get("/{proposal_id}", response_model=ProposalOut)
def get_proposal(
    proposal_id: int,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return proposal_service.get_proposal(db, ctx, proposal_id)


@router.put("/{proposal_id}", response_model=ProposalOut)
def edit_proposal(
    proposal_id: int,
    payload: ProposalUpdate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Edit a draft. Sent proposals are immutable."""
    patch = payload.model_dump(exclude_unset=True)
    if payload.items is not None:
        patch["items"] = [item.model_dump() for item in payload.items]
    return proposal_service.edit_proposal(db, ctx, proposal_id, patch)


@router.post("/{proposal_id}/send", response_model=ProposalOut)
def send_proposal(
    proposal_id: int,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return proposal_service.send_proposal(db, ctx, proposal_id)


@router.post("/{proposal_id}/decide", response_model=ProposalOut)
def decide_proposal(
    proposal_id: int,
    payload: ProposalDecision,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """The event's customer accepts or rejects a pending proposal."""
    return proposal_service.decide_proposal(
        db, ctx, proposal_id, ProposalStatus(payload.outcome), feedback=payload.feedback,
    )
