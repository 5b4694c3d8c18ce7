"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from marketplace.models.event import EventStatus, LocationType


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_at: datetime
    end_at: datetime
    location: Optional[str] = Field(None, max_length=500)
    location_type: Optional[LocationType] = None
    audience_size: Optional[int] = Field(None, ge=0)
    budget: Optional[int] = Field(None, ge=0)


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=500)
    location_type: Optional[LocationType] = None
    audience_size: Optional[int] = Field(None, ge=0)
    budget: Optional[int] = Field(None, ge=0)
    status: Optional[EventStatus] = None


class EventOut(BaseModel):
    id: int
    customer_profile_id: int
    name: str
    description: Optional[str] = None
    start_at: datetime
    end_at: datetime
    location: Optional[str] = None
    location_type: Optional[LocationType] = None
    audience_size: Optional[int] = None
    budget: Optional[int] = None
    status: EventStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
