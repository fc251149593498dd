"""
SQLAlchemy Models for Database
==============================

Durable tables for the hearing desk, mirroring the in-memory records:
- users, professionals, jurisdictions
- hearings (with denormalized payment status/amount)
- payments, tasks

Column names match the dataclass fields in juriscrm.models so rows convert
by name. Reference columns carry no FOREIGN KEY constraint: deleting a
referenced row leaves dangling ids, same as the memory backend.

Targets SQLite (see juriscrm.db.session).
"""

from datetime import datetime

from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, Date, DateTime, JSON
)
from sqlalchemy.orm import declarative_base


Base = declarative_base()

# SQLite reuses the highest rowid after a delete unless AUTOINCREMENT is set.
_NEVER_REUSE_IDS = {"sqlite_autoincrement": True}


class UserRow(Base):
    """Dashboard user"""
    __tablename__ = "users"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="user")


class ProfessionalRow(Base):
    """Lawyer or court official"""
    __tablename__ = "professionals"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    type = Column(String(50), nullable=False)
    specialization = Column(String(100), nullable=False)
    jurisdictions = Column(JSON, nullable=False, default=list)  # state codes
    user_id = Column(Integer, nullable=True)
    active = Column(Boolean, nullable=False, default=True)


class JurisdictionRow(Base):
    """Court location / comarca"""
    __tablename__ = "jurisdictions"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    state = Column(String(10), nullable=False)
    city = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)


class HearingRow(Base):
    """Scheduled hearing"""
    __tablename__ = "hearings"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True, autoincrement=True)
    process_number = Column(String(100), nullable=False)
    jurisdiction_id = Column(Integer, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)
    type = Column(String(50), nullable=False)
    area = Column(String(100), nullable=False)
    professional_id = Column(Integer, nullable=True, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    notes = Column(Text, nullable=True)
    minutes_uploaded = Column(Boolean, nullable=False, default=False)
    minutes_url = Column(Text, nullable=True)
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_amount = Column(Float, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class PaymentRow(Base):
    """Payment to a professional for a hearing"""
    __tablename__ = "payments"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True, autoincrement=True)
    hearing_id = Column(Integer, nullable=False, index=True)
    professional_id = Column(Integer, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    payment_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class TaskRow(Base):
    """Administrative reminder"""
    __tablename__ = "tasks"
    __table_args__ = _NEVER_REUSE_IDS

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    type = Column(String(50), nullable=False, index=True)
    related_id = Column(Integer, nullable=True)  # meaning depends on type
    due_date = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
