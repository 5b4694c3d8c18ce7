"""Pydantic schemas for role-specific profiles."""
from __future__ import annotations
from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, Field


class StaffProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, max_length=50)
    job_title: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = None

    model_config = {"extra": "forbid"}


class CustomerProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    company: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=50)
    country: Optional[str] = Field(None, max_length=50)
    preferred_contact: Optional[str] = Field(None, max_length=20)

    model_config = {"extra": "forbid"}


class ProviderProfileUpdate(BaseModel):
    # verified / featured are granted by staff, not self-service.
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_group: Optional[bool] = None
    team_size: Optional[int] = Field(None, ge=1)
    contact_name: Optional[str] = Field(None, max_length=100)
    contact_phone: Optional[str] = Field(None, max_length=20)
    current_residence: Optional[str] = Field(None, max_length=100)
    languages: Optional[list[str]] = None

    model_config = {"extra": "forbid"}


class StaffProfileOut(BaseModel):
    id: int
    account_id: int
    name: str
    phone: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    bio: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "forbid"}


class CustomerProfileOut(BaseModel):
    id: int
    account_id: int
    name: str
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    preferred_contact: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "forbid"}


class ProviderProfileOut(BaseModel):
    id: int
    account_id: int
    display_name: str
    is_group: bool
    team_size: Optional[int] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    current_residence: Optional[str] = None
    languages: Optional[list[str]] = None
    verified: bool
    featured: bool
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "forbid"}


class ProfileOut(BaseModel):
    # Out models forbid extras so a dumped profile matches exactly one union member.
    role: str
    profile: Union[StaffProfileOut, CustomerProfileOut, ProviderProfileOut]
