"""Booking ORM model — a customer's request for a provider's service."""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from marketplace.database import Base


class BookingStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    declined = "declined"
    completed = "completed"
    cancelled = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    customer_profile_id = Column(Integer, ForeignKey("customer_profiles.id"), nullable=False)
    provider_profile_id = Column(Integer, ForeignKey("provider_profiles.id"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    price = Column(Integer, nullable=False)  # minor currency units
    status = Column(SAEnum(BookingStatus), nullable=False, default=BookingStatus.pending)
    special_requirements = Column(Text, nullable=True)
    cancel_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
