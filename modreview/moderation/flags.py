"""
Reviewer-facing flag list.

Turns an item's ModerationState into the flags shown in the review panel:
one active flag per detected category (with its jump-to time markers),
dismissed entries for providers that failed, and a distinct failure flag
when the whole analysis failed.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from modreview.fusion.associator import associate
from modreview.moderation.categories import display_label
from modreview.moderation.result import ModerationState, ModerationStatus, TimeMarker

PROVIDER_MODELS: Dict[str, str] = {
    "openai": "OpenAI Moderation",
    "azure": "Azure Content Safety",
    "google_video_intelligence": "Google Video Intelligence",
    "consensus": "Consensus",
}


class FlagStatus(str, Enum):
    ACTIVE = "active"
    DISMISSED = "dismissed"
    FAILED = "failed"


class ReviewIndicator(str, Enum):
    """Item-level summary shown in lists."""
    PENDING = "pending"
    ANALYZING = "analyzing"
    ANALYSIS_FAILED = "analysis_failed"
    FLAGGED = "flagged"
    CLEAN = "clean"


@dataclass
class Flag:
    """A single entry of the review panel."""
    id: str
    type: str
    status: FlagStatus
    confidence: int  # percent
    model: str
    description: str
    timestamp: str = ""
    timestamps: List[TimeMarker] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "status": self.status.value,
            "confidence": self.confidence,
            "model": self.model,
            "description": self.description,
            "timestamp": self.timestamp,
            "timestamps": [m.to_dict() for m in self.timestamps],
        }


def model_name(provider: str) -> str:
    return PROVIDER_MODELS.get(provider, display_label(provider))


def review_indicator(state: ModerationState) -> ReviewIndicator:
    """Summarize a state as pending / analyzing / failed / flagged / clean."""
    if state.status == ModerationStatus.FAILED:
        return ReviewIndicator.ANALYSIS_FAILED
    if state.status == ModerationStatus.ANALYZING:
        return ReviewIndicator.ANALYZING
    if state.status == ModerationStatus.PENDING:
        return ReviewIndicator.PENDING
    return ReviewIndicator.FLAGGED if state.result.flagged else ReviewIndicator.CLEAN


def build_flags(state: ModerationState) -> List[Flag]:
    """Build the review panel flag list for one item."""
    if state.status == ModerationStatus.FAILED:
        return [Flag(
            id="analysis-failed",
            type="Analysis Failed",
            status=FlagStatus.FAILED,
            confidence=0,
            model="Automated Analysis",
            description=(
                f"Automated analysis failed: {state.error or 'unknown error'}. "
                "Run analysis again to retry."
            ),
            timestamp=state.updated_at or "",
        )]

    if state.status != ModerationStatus.COMPLETED:
        return []

    result = state.result
    flags: List[Flag] = []

    sources = [s.provider for s in result.sources] or [result.provider]
    model = ", ".join(model_name(p) for p in sources)

    for category in result.categories:
        label = display_label(category)
        percent = round(result.get_score(category) * 100)
        flags.append(Flag(
            id=f"{result.provider}-{category}",
            type=label,
            status=FlagStatus.ACTIVE,
            confidence=percent,
            model=model,
            description=f"{model} detected {label} content with {percent}% confidence",
            timestamp=result.timestamp,
            timestamps=associate(category, result.markers),
        ))

    for provider, error in sorted(state.provider_errors.items()):
        name = model_name(provider)
        flags.append(Flag(
            id=f"{provider}-failed",
            type=f"{name} Analysis Failed",
            status=FlagStatus.DISMISSED,
            confidence=0,
            model=name,
            description=f"{name} analysis failed: {error}",
            timestamp=result.timestamp,
        ))

    if not result.flagged:
        peak = max(result.category_scores.values(), default=0.0)
        flags.append(Flag(
            id="content-approved",
            type="Content Approved",
            status=FlagStatus.DISMISSED,
            confidence=round((1.0 - peak) * 100),
            model=model,
            description="No policy violations detected. Content passed all moderation checks.",
            timestamp=result.timestamp,
        ))

    return flags
