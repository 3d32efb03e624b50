"""
Content items under review.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from modreview.moderation.result import ModerationState, utc_now_iso


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReviewStatus(str, Enum):
    """Reviewer workflow status (independent of automated analysis)."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    ESCALATE = "escalate"


def format_display_id(item_id: str) -> str:
    """Short display tag: '#' followed by the last five characters of the id."""
    return f"#{item_id.lstrip('#')[-5:]}"


@dataclass
class ContentItem:
    """
    A piece of submitted media under review.

    ``moderation`` is written only by the analysis controller.
    """
    id: str
    title: str
    video_url: Optional[str] = None
    storage_path: Optional[str] = None
    thumbnail_url: Optional[str] = None
    text: Optional[str] = None

    # Upload metadata
    upload_date: str = field(default_factory=utc_now_iso)
    file_size: Optional[int] = None
    duration: Optional[float] = None

    # Counters
    views: int = 0
    user_reports: int = 0

    priority: Priority = Priority.MEDIUM
    status: ReviewStatus = ReviewStatus.PENDING
    escalated: bool = False

    moderation: ModerationState = field(default_factory=ModerationState)

    @property
    def display_id(self) -> str:
        return format_display_id(self.id)

    @property
    def source_locator(self) -> Optional[str]:
        """URL or storage reference to analyze, if any."""
        return self.video_url or self.storage_path

    def apply_decision(self, decision: ReviewDecision) -> None:
        """
        Record a reviewer decision.

        Escalation keeps the item pending but raises it to high priority.
        """
        if decision == ReviewDecision.ACCEPT:
            self.status = ReviewStatus.APPROVED
        elif decision == ReviewDecision.REJECT:
            self.status = ReviewStatus.REJECTED
        else:
            self.status = ReviewStatus.PENDING
            self.priority = Priority.HIGH
            self.escalated = True
