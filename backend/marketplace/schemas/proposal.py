"""Pydantic schemas for Proposals. Prices are integer minor units."""
from __future__ import annotations
from datetime import date, datetime
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field

from marketplace.models.account import AccountRole
from marketplace.models.proposal import ProposalStatus


class ProposalItem(BaseModel):
    name: str = Field(..., min_length=1)
    unit_price: int = Field(..., ge=0)
    quantity: int = Field(1, ge=1)


class ProposalCreate(BaseModel):
    event_id: int
    title: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    items: list[ProposalItem] = []
    total_price: Optional[int] = Field(None, ge=0)  # advisory; recomputed from items
    valid_until: Optional[date] = None


class ProposalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    items: Optional[list[ProposalItem]] = None
    total_price: Optional[int] = Field(None, ge=0)
    valid_until: Optional[date] = None


class ProposalDecision(BaseModel):
    outcome: Literal["accepted", "rejected"]
    feedback: Optional[str] = None


class ProposalOut(BaseModel):
    id: int
    event_id: int
    author_role: AccountRole
    author_profile_id: int
    title: str
    description: str
    items: list[dict[str, Any]]
    total_price: int
    status: ProposalStatus
    valid_until: Optional[date] = None
    feedback: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
