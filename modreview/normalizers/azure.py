"""
Azure Content Safety normalizer.

Severity is reported on a 0-6 scale: normalized score = severity / 6, and
a category is admitted when severity reaches the configured threshold
(medium and above by default).
"""
from modreview.core.logging import get_logger
from modreview.moderation.categories import canonical_category
from modreview.moderation.errors import NormalizationError
from modreview.moderation.result import ModerationResult
from modreview.normalizers.base import BaseNormalizer
from modreview.normalizers.raw import AzureRaw

logger = get_logger("normalizers.azure")


class AzureNormalizer(BaseNormalizer):
    """Normalizer for Azure Content Safety responses."""

    provider_id = "azure"
    raw_model = AzureRaw

    def convert(self, parsed: AzureRaw) -> ModerationResult:
        max_severity = self.thresholds.azure_max_severity
        categories = []
        scores = {}

        for index, analysis in enumerate(parsed.categories_analysis):
            if analysis.severity > max_severity:
                raise NormalizationError(
                    self.provider_id,
                    f"categoriesAnalysis.{index}.severity",
                    f"severity {analysis.severity} exceeds maximum {max_severity}",
                )
            category = canonical_category(analysis.category)
            score = analysis.severity / max_severity
            scores[category] = max(scores.get(category, 0.0), score)

            if analysis.severity >= self.thresholds.azure_severity:
                categories.append(category)

        logger.debug(f"Azure: {len(categories)} of {len(scores)} categories admitted")

        return ModerationResult(
            flagged=bool(categories),
            categories=categories,
            category_scores=scores,
            provider=self.provider_id,
            timestamps=None,
        )
