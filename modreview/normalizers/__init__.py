"""
Provider normalizers.

Convert each provider's decoded response into a common ModerationResult:
- OpenAI Moderation: boolean flags + scores in [0, 1]
- Azure Content Safety: 0-6 severities
- Google Video Intelligence: likelihood enums + label segment confidences
"""
from modreview.normalizers.base import BaseNormalizer
from modreview.normalizers.openai import OpenAINormalizer
from modreview.normalizers.azure import AzureNormalizer
from modreview.normalizers.google_video import (
    GoogleVideoNormalizer,
    LIKELIHOOD_SCORES,
    likelihood_score,
)
from modreview.normalizers.registry import (
    NormalizerRegistry,
    get_normalizer,
    normalize_response,
    list_normalizers,
)

__all__ = [
    "BaseNormalizer",
    "OpenAINormalizer",
    "AzureNormalizer",
    "GoogleVideoNormalizer",
    "LIKELIHOOD_SCORES",
    "likelihood_score",
    "NormalizerRegistry",
    "get_normalizer",
    "normalize_response",
    "list_normalizers",
]
