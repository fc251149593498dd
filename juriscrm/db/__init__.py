"""
Database Package - SQLite with SQLAlchemy
=========================================

Durable storage backend for the hearing desk.
"""

from .models import (
    Base,
    UserRow, ProfessionalRow, JurisdictionRow, HearingRow, PaymentRow, TaskRow,
)
from .session import get_db_session, init_db, drop_db, get_engine, reset_engine
from .repository import SqlRepository, SqlStorage

__all__ = [
    # Base
    "Base",
    # Tables
    "UserRow", "ProfessionalRow", "JurisdictionRow", "HearingRow", "PaymentRow", "TaskRow",
    # Session
    "get_db_session", "init_db", "drop_db", "get_engine", "reset_engine",
    # Storage
    "SqlRepository", "SqlStorage",
]
