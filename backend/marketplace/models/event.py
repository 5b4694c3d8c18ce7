"""Event ORM model — owned by exactly one customer profile."""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from marketplace.database import Base


class EventStatus(str, enum.Enum):
    """Descriptive only; no enforced transition edges."""

    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class LocationType(str, enum.Enum):
    indoor = "indoor"
    outdoor = "outdoor"
    hybrid = "hybrid"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_profile_id = Column(Integer, ForeignKey("customer_profiles.id"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(500), nullable=True)
    location_type = Column(SAEnum(LocationType), nullable=True)
    audience_size = Column(Integer, nullable=True)
    budget = Column(Integer, nullable=True)  # minor currency units
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.pending)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
