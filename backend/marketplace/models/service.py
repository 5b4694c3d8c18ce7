"""Service ORM model — a bookable offering listed by a provider."""
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from marketplace.database import Base


class ServiceType(str, enum.Enum):
    media = "media"
    entertainment = "entertainment"
    host = "host"
    activity = "activity"
    stage = "stage"
    tent = "tent"
    food = "food"
    retail = "retail"
    utilities = "utilities"
    digital = "digital"
    special_zone = "special_zone"


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    provider_profile_id = Column(Integer, ForeignKey("provider_profiles.id"), nullable=False)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    service_type = Column(SAEnum(ServiceType), nullable=False)
    category = Column(String(50), nullable=True)
    base_price = Column(Integer, nullable=False, default=0)  # minor currency units
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
