"""
Engine and sessions for the SQL storage backend.

The URL comes from DATABASE_URL when set (tests point it at a tmp SQLite
file), else from Settings.database_url. The engine is rebuilt whenever that
URL changes, so the process never holds a connection to a stale database.
"""

import logging
import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from ..config import get_settings
from .models import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None

SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def database_url() -> str:
    return os.environ.get("DATABASE_URL") or get_settings().database_url


def _build_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        raise ValueError(f"Unsupported database scheme {url.split(':', 1)[0]!r}: only sqlite URLs are supported")
    echo = os.environ.get("SQL_ECHO", "false").lower() == "true"
    # FastAPI runs sync endpoints in a threadpool
    return create_engine(url, connect_args={"check_same_thread": False}, echo=echo)


def get_engine() -> Engine:
    """Engine for the current database URL, created on first use."""
    global _engine
    url = database_url()
    if _engine is None or _engine.url.render_as_string(hide_password=False) != url:
        if _engine is not None:
            _engine.dispose()
        _engine = _build_engine(url)
        SessionLocal.configure(bind=_engine)
        logger.info(f"Opened database {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def reset_engine():
    """Forget the current engine; the next session reopens the database."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
    SessionLocal.configure(bind=None)


def init_db():
    """Create missing hearing desk tables."""
    Base.metadata.create_all(bind=get_engine())


def drop_db():
    Base.metadata.drop_all(bind=get_engine())


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    One unit of work: commits on success, rolls back on any exception.

        with get_db_session() as db:
            db.query(HearingRow).all()
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
