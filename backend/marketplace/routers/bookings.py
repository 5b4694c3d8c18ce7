"""Booking API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.dependencies import get_current_context
from marketplace.models.booking import BookingStatus
from marketplace.schemas.booking import BookingCancel, BookingCreate, BookingOut, BookingRespond
from marketplace.services import booking_service
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[BookingOut])
def list_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Customer: own bookings; provider: bookings of own services; staff: all."""
    return booking_service.list_bookings(db, ctx, status=booking_status)


@router.post("", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
def request_booking(
    payload: BookingCreate,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return booking_service.request_booking(db, ctx, **payload.model_dump())


@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(
    booking_id: int,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return booking_service.get_booking(db, ctx, booking_id)


@router.post("/{booking_id}/respond", response_model=BookingOut)
def respond_booking(
    booking_id: int,
    payload: BookingRespond,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return booking_service.respond_booking(db, ctx, booking_id, BookingStatus(payload.outcome))


@router.post("/{booking_id}/cancel", response_model=BookingOut)
def cancel_booking(
    booking_id: int,
    payload: BookingCancel,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    return booking_service.cancel_booking(db, ctx, booking_id, payload.reason)


@router.post("/{booking_id}/complete", response_model=BookingOut)
def complete_booking(
    booking_id: int,
    ctx: AuthenticatedContext = Depends(get_current_context),
    db: Session = Depends(get_db),
):
    """Staff mark a confirmed booking as delivered."""
    return booking_service.complete_booking(db, ctx, booking_id)
