"""Account ORM model — root identity record with credentials and role tag."""
import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from marketplace.database import Base


class AccountRole(str, enum.Enum):
    admin = "admin"
    employee = "employee"
    customer = "customer"
    provider = "provider"


STAFF_ROLES = frozenset({AccountRole.admin, AccountRole.employee})


class AccountStatus(str, enum.Enum):
    active = "active"
    pending = "pending"
    rejected = "rejected"
    inactive = "inactive"


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role = Column(SAEnum(AccountRole), nullable=False)  # immutable after creation
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    status = Column(SAEnum(AccountStatus), nullable=False, default=AccountStatus.active)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    token_version = Column(Integer, nullable=False, default=0)  # bumped on logout; older tokens stop working
