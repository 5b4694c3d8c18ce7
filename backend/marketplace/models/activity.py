"""Activity ORM model — append-only audit trail."""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey, event
from sqlalchemy.sql import func
from marketplace.database import Base
from marketplace.errors import InternalError


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_account_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)  # None = system
    action = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(Integer, nullable=True)
    payload = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


@event.listens_for(Activity, "before_update")
def _refuse_update(mapper, connection, target):
    raise InternalError("Activity records are append-only")


@event.listens_for(Activity, "before_delete")
def _refuse_delete(mapper, connection, target):
    raise InternalError("Activity records are append-only")
