"""
Demo content items shown on a fresh dashboard.
"""
from typing import List

from modreview.items.models import ContentItem, Priority, ReviewStatus
from modreview.moderation.result import (
    ModerationResult,
    ModerationState,
    ModerationStatus,
    TimeMarker,
)


def _completed(provider: str, timestamp: str, scores: dict, markers: list) -> ModerationState:
    result = ModerationResult(
        flagged=True,
        categories=list(scores),
        category_scores=scores,
        provider=provider,
        timestamp=timestamp,
        timestamps=[TimeMarker(offset, [category], conf) for offset, category, conf in markers],
    )
    return ModerationState(status=ModerationStatus.COMPLETED, result=result, updated_at=timestamp)


def demo_items() -> List[ContentItem]:
    """Pre-analyzed sample videos."""
    return [
        ContentItem(
            id="12345",
            title="sexual",
            video_url="https://example.com/sexual.mp4",
            thumbnail_url="https://example.com/thumb1.jpg",
            upload_date="2024-12-15T10:30:00+00:00",
            file_size=45000000,
            duration=180,
            views=1250,
            user_reports=8,
            priority=Priority.HIGH,
            status=ReviewStatus.PENDING,
            moderation=_completed(
                "google_video_intelligence",
                "2024-12-15T10:31:00+00:00",
                {"sexual_content": 0.95, "adult_content": 0.88},
                [(45, "sexual_content", 0.95), (120, "adult_content", 0.88)],
            ),
        ),
        ContentItem(
            id="67890",
            title="violence3",
            video_url="https://example.com/violence3.mp4",
            thumbnail_url="https://example.com/thumb2.jpg",
            upload_date="2024-12-14T15:20:00+00:00",
            file_size=67000000,
            duration=240,
            views=890,
            user_reports=12,
            priority=Priority.HIGH,
            status=ReviewStatus.REJECTED,
            moderation=_completed(
                "azure",
                "2024-12-14T15:25:00+00:00",
                {"violence": 0.92, "graphic_content": 0.87},
                [(30, "violence", 0.92), (180, "graphic_content", 0.87)],
            ),
        ),
        ContentItem(
            id="54321",
            title="violence",
            video_url="https://example.com/violence.mp4",
            thumbnail_url="https://example.com/thumb3.jpg",
            upload_date="2024-12-13T09:15:00+00:00",
            file_size=52000000,
            duration=210,
            views=2100,
            user_reports=15,
            priority=Priority.HIGH,
            status=ReviewStatus.REJECTED,
            moderation=_completed(
                "openai",
                "2024-12-13T09:20:00+00:00",
                {"violence": 0.98, "disturbing_content": 0.85},
                [(60, "violence", 0.98), (150, "disturbing_content", 0.85)],
            ),
        ),
    ]
