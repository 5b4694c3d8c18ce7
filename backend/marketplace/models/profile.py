"""Role-scoped profile ORM models.

Each account owns exactly one profile in the table matching its role.
``account_id`` is unique per table and cascades with the account.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship, backref
from sqlalchemy.sql import func
from marketplace.database import Base


class _ProfileColumns:
    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class _StaffColumns(_ProfileColumns):
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    department = Column(String(50), nullable=True)
    job_title = Column(String(50), nullable=True)
    bio = Column(Text, nullable=True)


class AdminProfile(_StaffColumns, Base):
    __tablename__ = "admin_profiles"

    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)
    account = relationship("Account", backref=backref("admin_profile", uselist=False, cascade="all, delete-orphan"))


class EmployeeProfile(_StaffColumns, Base):
    __tablename__ = "employee_profiles"

    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)
    account = relationship("Account", backref=backref("employee_profile", uselist=False, cascade="all, delete-orphan"))


class CustomerProfile(_ProfileColumns, Base):
    __tablename__ = "customer_profiles"

    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    company = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(50), nullable=True)
    country = Column(String(50), nullable=True)
    preferred_contact = Column(String(20), nullable=True)

    account = relationship("Account", backref=backref("customer_profile", uselist=False, cascade="all, delete-orphan"))


class ProviderProfile(_ProfileColumns, Base):
    __tablename__ = "provider_profiles"

    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)
    display_name = Column(String(100), nullable=False)
    is_group = Column(Boolean, nullable=False, default=False)
    team_size = Column(Integer, nullable=True)
    contact_name = Column(String(100), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    current_residence = Column(String(100), nullable=True)
    languages = Column(JSON, nullable=True, default=list)
    verified = Column(Boolean, nullable=False, default=False)
    featured = Column(Boolean, nullable=False, default=False)

    account = relationship("Account", backref=backref("provider_profile", uselist=False, cascade="all, delete-orphan"))
