"""
Database connection and session management.
"""
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from modreview.core.config import settings
from modreview.core.logging import get_logger

logger = get_logger("db.connection")

# Lazy initialization - don't connect at import time
_engine: Optional[Engine] = None
_SessionLocal = None


def _get_engine() -> Engine:
    """Get or create database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        kwargs = {"pool_pre_ping": True, "echo": False}
        if settings.database_url.startswith("sqlite"):
            # Sessions are used from worker threads by the async store
            kwargs["connect_args"] = {"check_same_thread": False}
        _engine = create_engine(settings.database_url, **kwargs)
    return _engine


def _get_session_local():
    """Get or create session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _SessionLocal


def configure_engine(engine: Engine) -> None:
    """Use an externally created engine (tests, embedded deployments)."""
    global _engine, _SessionLocal
    _engine = engine
    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_session_factory():
    """Session factory bound to the configured engine."""
    return _get_session_local()


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session."""
    SessionLocal = _get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for database session."""
    SessionLocal = _get_session_local()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Database error: {e}")
        raise
    finally:
        db.close()


def init_db() -> None:
    """Initialize database tables."""
    from modreview.db.models import Base

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=_get_engine(), checkfirst=True)
    logger.info("Database tables created successfully")
