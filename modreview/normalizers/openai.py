"""
OpenAI Moderation normalizer.

Scores are already in [0, 1] and copied verbatim; categories are the keys
whose flag is true, or the flagged names when the hosted function has
already flattened the map into a list.
"""
from typing import Any, Dict

from modreview.moderation.errors import NormalizationError
from modreview.moderation.result import ModerationResult
from modreview.normalizers.base import BaseNormalizer
from modreview.normalizers.raw import OpenAIRaw


class OpenAINormalizer(BaseNormalizer):
    """Normalizer for OpenAI moderation responses."""

    provider_id = "openai"
    raw_model = OpenAIRaw

    def unwrap(self, raw: Any) -> Dict[str, Any]:
        raw = super().unwrap(raw)
        # Full API envelope: {"id": ..., "model": ..., "results": [...]}
        if "results" in raw:
            results = raw["results"]
            if not isinstance(results, list) or not results:
                raise NormalizationError(self.provider_id, "results", "empty 'results' list")
            return super().unwrap(results[0])
        return raw

    def convert(self, parsed: OpenAIRaw) -> ModerationResult:
        if isinstance(parsed.categories, dict):
            categories = [name for name, hit in parsed.categories.items() if hit]
        else:
            categories = list(parsed.categories)

        for name in categories:
            if name not in parsed.category_scores:
                raise NormalizationError(self.provider_id, f"category_scores.{name}")

        return ModerationResult(
            flagged=bool(categories),
            categories=categories,
            category_scores=dict(parsed.category_scores),
            provider=self.provider_id,
            timestamps=None,
        )
