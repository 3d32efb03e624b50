"""
API Schemas (DTOs) for the review dashboard.

These Pydantic models are the only shapes the API returns; domain objects
are converted with the ``from_*`` constructors.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from modreview.items.models import ContentItem, Priority, ReviewDecision, ReviewStatus
from modreview.moderation.flags import Flag, FlagStatus, ReviewIndicator, review_indicator
from modreview.moderation.result import ModerationState, ModerationStatus, TimeMarker


class HealthResponse(BaseModel):
    status: str
    version: str
    providers: List[str] = Field(default_factory=list)


# ============================================================================
# Moderation DTOs
# ============================================================================

class TimeMarkerDTO(BaseModel):
    """A point in the media where categories were observed."""
    time_offset_seconds: float
    categories: List[str]
    confidence: float

    @classmethod
    def from_marker(cls, marker: TimeMarker) -> "TimeMarkerDTO":
        return cls(
            time_offset_seconds=marker.time_offset_seconds,
            categories=list(marker.categories),
            confidence=marker.confidence,
        )


class ModerationStateDTO(BaseModel):
    status: ModerationStatus
    indicator: ReviewIndicator
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    provider_errors: Dict[str, str] = Field(default_factory=dict)
    updated_at: Optional[str] = None

    @classmethod
    def from_state(cls, state: ModerationState) -> "ModerationStateDTO":
        return cls(
            status=state.status,
            indicator=review_indicator(state),
            result=state.result.to_dict() if state.result else None,
            error=state.error,
            provider_errors=dict(state.provider_errors),
            updated_at=state.updated_at,
        )


class FlagDTO(BaseModel):
    id: str
    type: str
    status: FlagStatus
    confidence: int
    model: str
    description: str
    timestamp: str = ""
    timestamps: List[TimeMarkerDTO] = Field(default_factory=list)

    @classmethod
    def from_flag(cls, flag: Flag) -> "FlagDTO":
        return cls(
            id=flag.id,
            type=flag.type,
            status=flag.status,
            confidence=flag.confidence,
            model=flag.model,
            description=flag.description,
            timestamp=flag.timestamp,
            timestamps=[TimeMarkerDTO.from_marker(m) for m in flag.timestamps],
        )


# ============================================================================
# Content item DTOs
# ============================================================================

class ContentItemDTO(BaseModel):
    """A content item together with its moderation state."""
    id: str
    display_id: str
    title: str
    video_url: Optional[str] = None
    storage_path: Optional[str] = None
    thumbnail_url: Optional[str] = None
    upload_date: str
    file_size: Optional[int] = None
    duration: Optional[float] = None
    views: int = 0
    user_reports: int = 0
    priority: Priority
    status: ReviewStatus
    escalated: bool = False
    moderation: ModerationStateDTO

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_item(cls, item: ContentItem) -> "ContentItemDTO":
        return cls(
            id=item.id,
            display_id=item.display_id,
            title=item.title,
            video_url=item.video_url,
            storage_path=item.storage_path,
            thumbnail_url=item.thumbnail_url,
            upload_date=item.upload_date,
            file_size=item.file_size,
            duration=item.duration,
            views=item.views,
            user_reports=item.user_reports,
            priority=item.priority,
            status=item.status,
            escalated=item.escalated,
            moderation=ModerationStateDTO.from_state(item.moderation),
        )


class ContentItemListResponse(BaseModel):
    items: List[ContentItemDTO]
    total: int
    analysis_dispatched: int = 0


class DecisionRequest(BaseModel):
    decision: ReviewDecision
