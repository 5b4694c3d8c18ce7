"""Review ORM model — a customer's rating of a completed booking."""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from marketplace.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_profile_id = Column(Integer, ForeignKey("customer_profiles.id"), nullable=False)
    provider_profile_id = Column(Integer, ForeignKey("provider_profiles.id"), nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)  # one per booking
    rating = Column(Integer, nullable=False)  # 1..5
    comment = Column(Text, nullable=True)
    service_quality = Column(Integer, nullable=True)
    communication = Column(Integer, nullable=True)
    value_for_money = Column(Integer, nullable=True)
    published = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
