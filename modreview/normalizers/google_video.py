"""
Google Video Intelligence normalizer.

Two signal families are combined:
- explicit content: per-frame likelihood enum mapped through a fixed table,
  maximum over all sampled frames -> ``sexual_explicit``
- label detection: segment/shot labels matched by substring against the
  configured signal vocabulary, maximum confidence per category

Frames and segments that cross their admission threshold also become
TimeMarkers so reviewers can jump to the offending moment.
"""
from typing import Any, Dict, List

from modreview.core.logging import get_logger
from modreview.moderation.errors import NormalizationError
from modreview.moderation.result import ModerationResult, TimeMarker
from modreview.normalizers.base import BaseNormalizer
from modreview.normalizers.raw import GoogleVideoRaw

logger = get_logger("normalizers.google_video")

EXPLICIT_CATEGORY = "sexual_explicit"
ON_SCREEN_TEXT = "on_screen_text"

# At least one must be present, even if empty
ANNOTATION_FIELDS = {
    "explicit_annotation": "explicitAnnotation",
    "segment_label_annotations": "segmentLabelAnnotations",
    "shot_label_annotations": "shotLabelAnnotations",
}

# Google likelihood enum -> score
LIKELIHOOD_SCORES: Dict[str, float] = {
    "UNKNOWN": 0.5,
    "VERY_UNLIKELY": 0.05,
    "UNLIKELY": 0.15,
    "POSSIBLE": 0.4,
    "LIKELY": 0.75,
    "VERY_LIKELY": 0.95,
}


def likelihood_score(likelihood: str) -> float:
    """Map a likelihood enum to a score; unrecognized values count as UNKNOWN."""
    return LIKELIHOOD_SCORES.get(likelihood, LIKELIHOOD_SCORES["UNKNOWN"])


class GoogleVideoNormalizer(BaseNormalizer):
    """Normalizer for Google Video Intelligence annotation responses."""

    provider_id = "google_video_intelligence"
    raw_model = GoogleVideoRaw

    def unwrap(self, raw: Any) -> Dict[str, Any]:
        raw = super().unwrap(raw)
        # Finished long-running operation: {"done": true, "response": {...}}
        if isinstance(raw.get("response"), dict):
            raw = raw["response"]
        if "annotationResults" in raw:
            results = raw["annotationResults"]
            if not isinstance(results, list) or not results:
                raise NormalizationError(self.provider_id, "annotationResults", "empty 'annotationResults' list")
            return super().unwrap(results[0])
        return raw

    def convert(self, parsed: GoogleVideoRaw) -> ModerationResult:
        if not ANNOTATION_FIELDS.keys() & parsed.model_fields_set:
            raise NormalizationError(
                self.provider_id,
                "|".join(ANNOTATION_FIELDS.values()),
                "response carries no explicit content or label annotations",
            )

        categories: List[str] = []
        scores: Dict[str, float] = {}
        markers: List[TimeMarker] = []

        self._explicit_signals(parsed, categories, scores, markers)
        self._label_signals(parsed, categories, scores, markers)

        if parsed.text_annotations:
            # Presence only; on-screen text is never admitted as a category
            scores[ON_SCREEN_TEXT] = 0.5

        markers.sort(key=lambda m: m.time_offset_seconds)

        logger.debug(
            f"Google video: {len(categories)} categories, {len(markers)} time markers"
        )

        return ModerationResult(
            flagged=bool(categories),
            categories=categories,
            category_scores=scores,
            provider=self.provider_id,
            timestamps=markers,
        )

    def _explicit_signals(self, parsed, categories, scores, markers) -> None:
        if parsed.explicit_annotation is None or not parsed.explicit_annotation.frames:
            return

        threshold = self.thresholds.google_explicit
        max_score = 0.0
        for frame in parsed.explicit_annotation.frames:
            score = likelihood_score(frame.pornography_likelihood)
            max_score = max(max_score, score)
            if score >= threshold:
                markers.append(TimeMarker(
                    time_offset_seconds=frame.time_offset,
                    categories=[EXPLICIT_CATEGORY],
                    confidence=score,
                ))

        scores[EXPLICIT_CATEGORY] = round(max_score, 3)
        if max_score >= threshold:
            categories.append(EXPLICIT_CATEGORY)

    def _label_signals(self, parsed, categories, scores, markers) -> None:
        threshold = self.thresholds.google_label
        signals = self.thresholds.google_label_signals

        for label in parsed.label_annotations:
            name = label.entity.description.lower()
            matched = []
            for substring, category in signals.items():
                if substring in name and category not in matched:
                    matched.append(category)
            if not matched:
                continue

            max_conf = max((s.confidence for s in label.segments), default=0.0)
            for category in matched:
                scores[category] = round(max(scores.get(category, 0.0), max_conf), 3)
                if max_conf >= threshold and category not in categories:
                    categories.append(category)

            for seg in label.segments:
                if seg.confidence >= threshold:
                    markers.append(TimeMarker(
                        time_offset_seconds=seg.segment.start_time_offset,
                        categories=list(matched),
                        confidence=round(seg.confidence, 3),
                    ))
