"""Pydantic schemas for accounts, sessions and account administration."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from marketplace.models.account import AccountRole, AccountStatus


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)
    role: AccountRole


class StaffAccountCreate(RegisterRequest):
    pass


class LoginRequest(BaseModel):
    username: str
    password: str


class AccountStatusUpdate(BaseModel):
    status: AccountStatus


class AccountOut(BaseModel):
    id: int
    username: str
    email: str
    role: AccountRole
    status: AccountStatus
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ContextOut(BaseModel):
    account_id: int
    role: AccountRole
    profile_id: int
    status: AccountStatus

    model_config = {"from_attributes": True}


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: AccountOut
    context: ContextOut


class CurrentUserOut(BaseModel):
    account: AccountOut
    context: ContextOut
