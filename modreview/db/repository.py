"""
Database repositories for content items and moderation state.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from modreview.core.logging import get_logger
from modreview.db.models import ContentItemRecord, ModerationRecord
from modreview.items.models import ContentItem, Priority
from modreview.moderation.result import ModerationState, ModerationStatus

logger = get_logger("db.repository")


# ============== CONTENT ITEM REPOSITORY ==============

class ContentItemRepository:
    """Repository for ContentItemRecord CRUD operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, item: ContentItem) -> ContentItemRecord:
        """Create a new content item record."""
        record = ContentItemRecord(
            id=item.id,
            title=item.title,
            video_url=item.video_url,
            storage_path=item.storage_path,
            thumbnail_url=item.thumbnail_url,
            text=item.text,
            upload_date=item.upload_date,
            file_size=item.file_size,
            duration=item.duration,
            views=item.views,
            user_reports=item.user_reports,
            priority=item.priority,
            status=item.status,
            escalated=item.escalated,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        logger.info(f"Created content item: {item.id}")
        return record

    def get(self, item_id: str) -> Optional[ContentItemRecord]:
        """Get content item by ID."""
        return self.db.query(ContentItemRecord).filter(ContentItemRecord.id == item_id).first()

    def exists(self, item_id: str) -> bool:
        return self.get(item_id) is not None

    def list(self, skip: int = 0, limit: int = 100, priority: Optional[Priority] = None) -> List[ContentItemRecord]:
        """List content items, newest first."""
        query = self.db.query(ContentItemRecord)
        if priority:
            query = query.filter(ContentItemRecord.priority == priority)
        return query.order_by(desc(ContentItemRecord.created_at)).offset(skip).limit(limit).all()

    def update(self, item_id: str, **kwargs) -> Optional[ContentItemRecord]:
        """Update content item record."""
        record = self.get(item_id)
        if not record:
            return None

        for key, value in kwargs.items():
            if hasattr(record, key):
                setattr(record, key, value)

        record.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(record)
        return record


# ============== MODERATION REPOSITORY ==============

class ModerationRepository:
    """Repository for ModerationRecord operations, keyed by item id."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, item_id: str) -> Optional[ModerationRecord]:
        return self.db.query(ModerationRecord).filter(ModerationRecord.item_id == item_id).first()

    def load_state(self, item_id: str) -> ModerationState:
        """Load the state for an item; absent records are PENDING."""
        record = self.get(item_id)
        return ModerationState.from_dict(record.to_dict() if record else None)

    def list_by_status(self, status: ModerationStatus) -> List[ModerationRecord]:
        return self.db.query(ModerationRecord).filter(ModerationRecord.status == status).all()

    def upsert(self, item_id: str, state: ModerationState) -> ModerationRecord:
        """
        Create or update the record for an item.

        Raises:
            KeyError: if the content item does not exist
        """
        if self.db.query(ContentItemRecord.id).filter(ContentItemRecord.id == item_id).first() is None:
            raise KeyError(f"Content item {item_id} not found")

        data: Dict[str, Any] = state.to_dict()
        record = self.get(item_id)
        if record is None:
            record = ModerationRecord(item_id=item_id)
            self.db.add(record)

        record.status = state.status
        record.result = data.get("result")
        record.error = state.error
        record.provider_errors = dict(state.provider_errors)
        record.updated_at = state.updated_at
        self.db.commit()
        logger.debug(f"Saved moderation state for {item_id}: {state.status.value}")
        return record

    def delete(self, item_id: str) -> bool:
        record = self.get(item_id)
        if not record:
            return False
        self.db.delete(record)
        self.db.commit()
        return True
