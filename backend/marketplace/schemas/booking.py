"""Pydantic schemas for Bookings."""
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from marketplace.models.booking import BookingStatus


class BookingCreate(BaseModel):
    event_id: int
    service_id: int
    start_at: Optional[datetime] = None  # defaults to the event window
    end_at: Optional[datetime] = None
    price: Optional[int] = Field(None, ge=0)  # defaults to the service base price
    special_requirements: Optional[str] = None


class BookingRespond(BaseModel):
    outcome: Literal["confirmed", "declined"]


class BookingCancel(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class BookingOut(BaseModel):
    id: int
    event_id: int
    customer_profile_id: int
    provider_profile_id: int
    service_id: int
    start_at: datetime
    end_at: datetime
    price: int
    status: BookingStatus
    special_requirements: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
