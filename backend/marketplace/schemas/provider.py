"""Pydantic schemas for provider portfolios and customer reviews."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class PortfolioItemCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    media_url: str = Field(..., min_length=1, max_length=255)
    media_type: str = Field(..., min_length=1, max_length=20)
    featured: bool = False
    sort_order: int = 0


class PortfolioItemOut(BaseModel):
    id: int
    provider_profile_id: int
    title: str
    description: Optional[str] = None
    media_url: str
    media_type: str
    featured: bool
    sort_order: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReviewCreate(BaseModel):
    booking_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    service_quality: Optional[int] = Field(None, ge=1, le=5)
    communication: Optional[int] = Field(None, ge=1, le=5)
    value_for_money: Optional[int] = Field(None, ge=1, le=5)


class ReviewOut(BaseModel):
    id: int
    customer_profile_id: int
    provider_profile_id: int
    booking_id: int
    rating: int
    comment: Optional[str] = None
    service_quality: Optional[int] = None
    communication: Optional[int] = None
    value_for_money: Optional[int] = None
    published: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
