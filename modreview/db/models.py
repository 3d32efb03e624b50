"""
SQLAlchemy database models.

- ContentItemRecord: media under review
- ModerationRecord: analysis state keyed by content item id (one per item)
"""
from datetime import datetime
from typing import Any, Dict
from sqlalchemy import (
    Column, String, Integer, Float, Boolean, DateTime, Text,
    ForeignKey, JSON, Enum, Index
)
from sqlalchemy.orm import relationship, declarative_base

from modreview.items.models import ContentItem, Priority, ReviewStatus
from modreview.moderation.result import ModerationStatus

Base = declarative_base()


class ContentItemRecord(Base):
    """A piece of submitted media under review."""
    __tablename__ = "content_items"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)

    # Source info
    video_url = Column(Text, nullable=True)
    storage_path = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    text = Column(Text, nullable=True)

    # Upload metadata
    upload_date = Column(String(40), nullable=False)
    file_size = Column(Integer, nullable=True)
    duration = Column(Float, nullable=True)

    views = Column(Integer, default=0)
    user_reports = Column(Integer, default=0)

    priority = Column(Enum(Priority), default=Priority.MEDIUM, index=True)
    status = Column(Enum(ReviewStatus), default=ReviewStatus.PENDING, index=True)
    escalated = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    moderation = relationship(
        "ModerationRecord", back_populates="item", uselist=False, cascade="all, delete-orphan"
    )

    def to_item(self) -> ContentItem:
        return ContentItem(
            id=self.id,
            title=self.title,
            video_url=self.video_url,
            storage_path=self.storage_path,
            thumbnail_url=self.thumbnail_url,
            text=self.text,
            upload_date=self.upload_date,
            file_size=self.file_size,
            duration=self.duration,
            views=self.views or 0,
            user_reports=self.user_reports or 0,
            priority=self.priority or Priority.MEDIUM,
            status=self.status or ReviewStatus.PENDING,
            escalated=bool(self.escalated),
        )


class ModerationRecord(Base):
    """
    Persisted moderation state for one content item.

    ``result`` holds the serialized ModerationResult and is only set when
    status is COMPLETED.
    """
    __tablename__ = "moderation_results"

    item_id = Column(String(64), ForeignKey("content_items.id", ondelete="CASCADE"), primary_key=True)
    status = Column(Enum(ModerationStatus), default=ModerationStatus.PENDING)
    result = Column(JSON, nullable=True)
    error = Column(Text, nullable=True)
    provider_errors = Column(JSON, default=dict)
    updated_at = Column(String(40), nullable=True)

    item = relationship("ContentItemRecord", back_populates="moderation")

    __table_args__ = (
        Index("ix_moderation_status_item", "status", "item_id"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the same shape as ModerationState.to_dict()."""
        data: Dict[str, Any] = {"status": self.status.value if self.status else "pending"}
        if self.result is not None:
            data["result"] = self.result
        if self.error:
            data["error"] = self.error
        if self.provider_errors:
            data["providerErrors"] = self.provider_errors
        if self.updated_at:
            data["updatedAt"] = self.updated_at
        return data
