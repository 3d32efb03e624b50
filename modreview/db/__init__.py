"""
Database module.
"""
from modreview.db.connection import (
    get_db,
    get_db_session,
    get_session_factory,
    configure_engine,
    init_db,
)
from modreview.db.models import Base, ContentItemRecord, ModerationRecord
from modreview.db.repository import ContentItemRepository, ModerationRepository

__all__ = [
    "get_db",
    "get_db_session",
    "get_session_factory",
    "configure_engine",
    "init_db",
    "Base",
    "ContentItemRecord",
    "ModerationRecord",
    "ContentItemRepository",
    "ModerationRepository",
]
