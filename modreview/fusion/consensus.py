"""
Consensus engine - combines per-provider results for one content item.

Providers use incompatible scoring semantics, so no score blending is
performed for the verdict. The consensus is categorical:
- flagged: at least one provider flagged
- categories: union of all providers' categories
- confidence: HIGH if every provider flagged, MEDIUM if some did, LOW if none
"""
from typing import Dict, List, Optional, Sequence

from modreview.core.logging import get_logger
from modreview.moderation.result import (
    ConsensusConfidence,
    ConsensusResult,
    ModerationResult,
    TimeMarker,
)

logger = get_logger("fusion.consensus")

CONSENSUS_PROVIDER = "consensus"


class ConsensusEngine:
    """
    Engine for deriving a consensus across provider results.
    """

    def combine(self, results: Sequence[ModerationResult]) -> ConsensusResult:
        """
        Derive the categorical consensus.

        With zero inputs the result is unflagged with LOW confidence.
        """
        flagged_count = sum(1 for r in results if r.flagged)

        categories: List[str] = []
        for result in results:
            for category in result.categories:
                if category not in categories:
                    categories.append(category)

        if results and flagged_count == len(results):
            confidence = ConsensusConfidence.HIGH
        elif flagged_count > 0:
            confidence = ConsensusConfidence.MEDIUM
        else:
            confidence = ConsensusConfidence.LOW

        return ConsensusResult(
            flagged=flagged_count > 0,
            categories=categories,
            confidence=confidence,
        )

    def merge(self, results: Sequence[ModerationResult]) -> ModerationResult:
        """
        Build the stored record for an item from its provider results.

        Category scores carry the peak score any provider reported for the
        category; they are informational and do not influence the verdict.
        """
        consensus = self.combine(results)

        peak_scores: Dict[str, float] = {}
        for result in results:
            for category, score in result.category_scores.items():
                peak_scores[category] = max(peak_scores.get(category, 0.0), score)

        markers: Optional[List[TimeMarker]] = None
        if any(r.timestamps is not None for r in results):
            markers = [m for r in results for m in r.markers]
            markers.sort(key=lambda m: m.time_offset_seconds)

        logger.info(
            f"Consensus over {len(results)} provider(s): flagged={consensus.flagged}, "
            f"confidence={consensus.confidence.value}, categories={consensus.categories}"
        )

        return ModerationResult(
            flagged=consensus.flagged,
            categories=list(consensus.categories),
            category_scores=peak_scores,
            provider=CONSENSUS_PROVIDER,
            timestamps=markers,
            consensus=consensus,
            sources=list(results),
        )


def build_consensus(results: Sequence[ModerationResult]) -> ConsensusResult:
    """Convenience wrapper around ConsensusEngine.combine()."""
    return ConsensusEngine().combine(results)
