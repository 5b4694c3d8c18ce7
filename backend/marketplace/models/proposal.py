"""Proposal ORM model — staff-authored quote attached to an event."""
import enum
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from marketplace.database import Base
from marketplace.models.account import AccountRole


class ProposalStatus(str, enum.Enum):
    draft = "draft"
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    expired = "expired"


class Proposal(Base):
    __tablename__ = "proposals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    # Admin and employee profiles live in separate tables, so the role disambiguates the id.
    author_role = Column(SAEnum(AccountRole), nullable=False)
    author_profile_id = Column(Integer, nullable=False)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    items = Column(JSON, nullable=False, default=list)  # [{name, unit_price, quantity}]
    total_price = Column(Integer, nullable=False, default=0)  # minor currency units
    status = Column(SAEnum(ProposalStatus), nullable=False, default=ProposalStatus.draft)
    valid_until = Column(Date, nullable=True)
    feedback = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
