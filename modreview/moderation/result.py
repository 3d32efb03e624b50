"""
Moderation Result Models - normalized format for provider and consensus results.

Single source of truth for the structures used across:
- Provider normalizers
- Consensus engine
- Result stores (JSON file and SQL)
- API responses

Serialized keys follow the dashboard's wire shape (camelCase), while the
Python attributes are snake_case.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from modreview.moderation.errors import InvalidTransitionError


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _dedupe(values: Iterable[str]) -> List[str]:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")


class ModerationStatus(str, Enum):
    """Per-item analysis status."""
    PENDING = "pending"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    FAILED = "failed"


class ConsensusConfidence(str, Enum):
    """Agreement tier across providers."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class TimeMarker:
    """A single time-coded detection within a video."""
    time_offset_seconds: float
    categories: List[str]
    confidence: float

    def __post_init__(self):
        if self.time_offset_seconds < 0:
            raise ValueError(f"time_offset_seconds must be >= 0, got {self.time_offset_seconds}")
        _check_unit_interval("confidence", self.confidence)
        self.categories = _dedupe(self.categories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeOffsetSeconds": self.time_offset_seconds,
            "categories": list(self.categories),
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeMarker":
        # "timeOffset" is the key older dashboard builds persisted
        offset = data.get("timeOffsetSeconds", data.get("timeOffset", 0.0))
        return cls(
            time_offset_seconds=float(offset),
            categories=list(data.get("categories", [])),
            confidence=float(data.get("confidence", 0.0)),
        )


@dataclass
class ConsensusResult:
    """Categorical summary across providers. Derived, never stored on its own."""
    flagged: bool
    categories: List[str]
    confidence: ConsensusConfidence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "flagged": self.flagged,
            "categories": list(self.categories),
            "confidence": self.confidence.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConsensusResult":
        return cls(
            flagged=bool(data.get("flagged", False)),
            categories=list(data.get("categories", [])),
            confidence=ConsensusConfidence(data.get("confidence", "low")),
        )


@dataclass
class ModerationResult:
    """
    Normalized output of one provider, or of the consensus across providers.

    Invariants:
    - every category has an entry in ``category_scores``
    - every score is within [0, 1]
    - ``flagged`` is True iff ``categories`` is non-empty

    ``timestamps`` is None for providers without sub-clip localization and
    a (possibly empty) list for providers that support it.
    """
    flagged: bool
    categories: List[str]
    category_scores: Dict[str, float]
    provider: str
    timestamp: str = field(default_factory=utc_now_iso)
    timestamps: Optional[List[TimeMarker]] = None
    consensus: Optional[ConsensusResult] = None
    sources: List["ModerationResult"] = field(default_factory=list)

    def __post_init__(self):
        self.categories = _dedupe(self.categories)
        missing = [c for c in self.categories if c not in self.category_scores]
        if missing:
            raise ValueError(f"categories without scores: {missing}")
        for name, score in self.category_scores.items():
            _check_unit_interval(f"category_scores[{name}]", score)
        if self.flagged != bool(self.categories):
            raise ValueError("flagged must be True iff categories is non-empty")

    @property
    def markers(self) -> List[TimeMarker]:
        """Time markers, treating an absent list as empty."""
        return list(self.timestamps or [])

    def get_score(self, category: str) -> float:
        """Get score for a category (0.0 if not reported)."""
        return self.category_scores.get(category, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        data: Dict[str, Any] = {
            "flagged": self.flagged,
            "categories": list(self.categories),
            "categoryScores": dict(self.category_scores),
            "provider": self.provider,
            "timestamp": self.timestamp,
        }
        if self.timestamps is not None:
            data["timestamps"] = [m.to_dict() for m in self.timestamps]
        if self.consensus is not None:
            data["consensus"] = self.consensus.to_dict()
        if self.sources:
            data["sources"] = [s.to_dict() for s in self.sources]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModerationResult":
        """Create from dict."""
        timestamps = None
        if data.get("timestamps") is not None:
            timestamps = [TimeMarker.from_dict(m) for m in data["timestamps"]]

        consensus = None
        if data.get("consensus") is not None:
            consensus = ConsensusResult.from_dict(data["consensus"])

        return cls(
            flagged=bool(data.get("flagged", False)),
            categories=list(data.get("categories", [])),
            category_scores={k: float(v) for k, v in data.get("categoryScores", {}).items()},
            provider=data.get("provider", "unknown"),
            timestamp=data.get("timestamp") or utc_now_iso(),
            timestamps=timestamps,
            consensus=consensus,
            sources=[cls.from_dict(s) for s in data.get("sources", [])],
        )


# Allowed transitions. Re-running a finished item requires an explicit request.
_AUTOMATIC_TRANSITIONS = {
    ModerationStatus.PENDING: {ModerationStatus.ANALYZING},
    ModerationStatus.ANALYZING: {ModerationStatus.COMPLETED, ModerationStatus.FAILED},
    ModerationStatus.COMPLETED: set(),
    ModerationStatus.FAILED: set(),
}
_EXPLICIT_TRANSITIONS = {
    ModerationStatus.COMPLETED: {ModerationStatus.ANALYZING},
    ModerationStatus.FAILED: {ModerationStatus.ANALYZING},
}


@dataclass
class ModerationState:
    """
    Analysis state for one content item.

    ``result`` is present iff ``status`` is COMPLETED. ``provider_errors``
    records the providers whose contribution was dropped during the last run.
    """
    status: ModerationStatus = ModerationStatus.PENDING
    result: Optional[ModerationResult] = None
    error: Optional[str] = None
    provider_errors: Dict[str, str] = field(default_factory=dict)
    updated_at: Optional[str] = None

    def __post_init__(self):
        if (self.result is not None) != (self.status == ModerationStatus.COMPLETED):
            raise ValueError("result must be present iff status is completed")

    def can_transition(self, target: ModerationStatus, explicit: bool = False) -> bool:
        allowed = set(_AUTOMATIC_TRANSITIONS[self.status])
        if explicit:
            allowed |= _EXPLICIT_TRANSITIONS.get(self.status, set())
        return target in allowed

    def _move(self, target: ModerationStatus, explicit: bool = False) -> None:
        if not self.can_transition(target, explicit):
            raise InvalidTransitionError(self.status.value, target.value)
        self.status = target
        self.updated_at = utc_now_iso()

    def begin(self, explicit: bool = False) -> None:
        """Move to ANALYZING and clear any previous outcome."""
        self._move(ModerationStatus.ANALYZING, explicit)
        self.result = None
        self.error = None
        self.provider_errors = {}

    def complete(self, result: ModerationResult, provider_errors: Optional[Dict[str, str]] = None) -> None:
        self._move(ModerationStatus.COMPLETED)
        self.result = result
        self.provider_errors = dict(provider_errors or {})

    def fail(self, error: str, provider_errors: Optional[Dict[str, str]] = None) -> None:
        self._move(ModerationStatus.FAILED)
        self.result = None
        self.error = error
        self.provider_errors = dict(provider_errors or {})

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value}
        if self.result is not None:
            data["result"] = self.result.to_dict()
        if self.error:
            data["error"] = self.error
        if self.provider_errors:
            data["providerErrors"] = dict(self.provider_errors)
        if self.updated_at:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ModerationState":
        """Create from a stored record; absent records are PENDING."""
        if not data:
            return cls()
        result = data.get("result")
        return cls(
            status=ModerationStatus(data.get("status", "pending")),
            result=ModerationResult.from_dict(result) if result else None,
            error=data.get("error"),
            provider_errors=dict(data.get("providerErrors", {})),
            updated_at=data.get("updatedAt"),
        )
