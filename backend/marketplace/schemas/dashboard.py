"""Pydantic schema for the staff dashboard summary."""
from __future__ import annotations
from pydantic import BaseModel

from marketplace.schemas.account import AccountOut
from marketplace.schemas.event import EventOut


class DashboardStats(BaseModel):
    total_users: int
    active_events: int
    pending_events: int
    monthly_revenue: int  # minor currency units
    pending_approvals: int
    recent_users: list[AccountOut]
    recent_events: list[EventOut]
