"""Read-side schemas for the activity feed and notifications."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel


class ActivityOut(BaseModel):
    id: int
    actor_account_id: Optional[int] = None
    action: str
    description: str
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    payload: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NotificationOut(BaseModel):
    id: int
    recipient_account_id: int
    kind: str
    title: str
    message: str
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    is_read: bool
    created_at: Optional[datetime] = None
    read_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
