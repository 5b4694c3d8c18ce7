"""Pydantic schemas for the provider service catalog."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from marketplace.models.service import ServiceType


class ServiceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    service_type: ServiceType
    category: Optional[str] = Field(None, max_length=50)
    base_price: int = Field(0, ge=0)
    is_available: bool = True


class ServiceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    service_type: Optional[ServiceType] = None
    category: Optional[str] = Field(None, max_length=50)
    base_price: Optional[int] = Field(None, ge=0)
    is_available: Optional[bool] = None


class ServiceOut(BaseModel):
    id: int
    provider_profile_id: int
    title: str
    description: Optional[str] = None
    service_type: ServiceType
    category: Optional[str] = None
    base_price: int
    is_available: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
