"""
Moderation data model.

Normalized results, time markers, consensus summaries, per-item analysis
state, the error taxonomy, and the reviewer flag list.
"""
from modreview.moderation.result import (
    ModerationResult,
    ModerationState,
    ModerationStatus,
    ConsensusResult,
    ConsensusConfidence,
    TimeMarker,
)
from modreview.moderation.errors import (
    ModerationError,
    NormalizationError,
    ProviderCallError,
    AllProvidersFailedError,
    InvalidTransitionError,
    UnknownProviderError,
)
from modreview.moderation.categories import (
    normalize_label,
    labels_match,
    canonical_category,
    display_label,
)

__all__ = [
    "ModerationResult",
    "ModerationState",
    "ModerationStatus",
    "ConsensusResult",
    "ConsensusConfidence",
    "TimeMarker",
    "ModerationError",
    "NormalizationError",
    "ProviderCallError",
    "AllProvidersFailedError",
    "InvalidTransitionError",
    "UnknownProviderError",
    "normalize_label",
    "labels_match",
    "canonical_category",
    "display_label",
]
