"""
Tests for provider normalizers.

Verifies that:
- OpenAI categories come from the boolean map (or flagged-name list) and scores are copied verbatim
- Azure severity is scaled by 6 and admitted from severity 2
- Google likelihoods map through the fixed table and labels match the signal vocabulary
- Malformed responses raise NormalizationError naming provider and field
"""
import pytest

from modreview.core.config import NormalizerThresholds
from modreview.moderation.errors import NormalizationError, UnknownProviderError
from modreview.normalizers import (
    AzureNormalizer,
    GoogleVideoNormalizer,
    OpenAINormalizer,
    list_normalizers,
    normalize_response,
)
from modreview.normalizers.google_video import LIKELIHOOD_SCORES, likelihood_score
from modreview.normalizers.raw import parse_duration


@pytest.fixture
def thresholds():
    """Default admission thresholds."""
    return NormalizerThresholds()


class TestOpenAINormalizer:
    """Tests for the OpenAI moderation normalizer."""

    @pytest.fixture
    def normalizer(self, thresholds):
        return OpenAINormalizer(thresholds)

    def test_flagged_categories_and_verbatim_scores(self, normalizer):
        """Categories are the keys whose flag is true; scores are untouched."""
        raw = {
            "flagged": True,
            "categories": {"hate": True, "violence": False, "self-harm": True},
            "category_scores": {"hate": 0.82, "violence": 0.12, "self-harm": 0.41},
        }

        result = normalizer.normalize(raw)

        assert result.provider == "openai"
        assert result.flagged is True
        assert result.categories == ["hate", "self-harm"]
        assert result.category_scores == {"hate": 0.82, "violence": 0.12, "self-harm": 0.41}
        assert result.timestamps is None

    def test_flagged_name_list(self, normalizer):
        """The hosted function's list of flagged names is accepted."""
        raw = {"flagged": True, "categories": ["hate"], "category_scores": {"hate": 0.82}}

        result = normalizer.normalize(raw)

        assert result.categories == ["hate"]
        assert result.get_score("hate") == 0.82

    def test_hosted_function_shape(self, normalizer):
        """The moderate-openai body, with camelCase scores and extra keys, is accepted."""
        raw = {
            "flagged": True,
            "categories": ["hate", "violence"],
            "categoryScores": {"hate": 0.82, "violence": 0.64, "sexual": 0.02},
            "provider": "openai",
            "timestamp": "2024-05-01T12:00:00.000Z",
        }

        result = normalizer.normalize(raw)

        assert result.categories == ["hate", "violence"]
        assert result.category_scores == {"hate": 0.82, "violence": 0.64, "sexual": 0.02}
        assert result.provider == "openai"

    def test_results_envelope(self, normalizer):
        """The full API envelope is unwrapped to its first result."""
        raw = {
            "id": "modr-1",
            "model": "omni-moderation-latest",
            "results": [{
                "flagged": False,
                "categories": {"hate": False},
                "category_scores": {"hate": 0.01},
            }],
        }

        result = normalizer.normalize(raw)

        assert result.flagged is False
        assert result.categories == []

    def test_flagged_field_is_derived(self, normalizer):
        """flagged follows the categories, not the provider's own flag."""
        raw = {"flagged": True, "categories": {"hate": False}, "category_scores": {"hate": 0.3}}

        result = normalizer.normalize(raw)

        assert result.flagged is False

    def test_missing_scores_raises(self, normalizer):
        """A response without category_scores names the missing field."""
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize({"categories": {"hate": True}})

        assert exc_info.value.provider == "openai"
        assert exc_info.value.field == "category_scores"
        assert "openai" in str(exc_info.value)

    def test_flagged_category_without_score_raises(self, normalizer):
        """A flagged category must have a score."""
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize({"categories": {"hate": True}, "category_scores": {}})

        assert exc_info.value.field == "category_scores.hate"

    def test_score_out_of_range_raises(self, normalizer):
        """Scores outside [0, 1] are rejected."""
        with pytest.raises(NormalizationError):
            normalizer.normalize({"categories": {"hate": True}, "category_scores": {"hate": 1.4}})

    def test_empty_results_list_raises(self, normalizer):
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize({"results": []})

        assert exc_info.value.field == "results"

    def test_non_object_raises(self, normalizer):
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize(["not", "an", "object"])

        assert exc_info.value.field == "<root>"


class TestAzureNormalizer:
    """Tests for the Azure Content Safety normalizer."""

    @pytest.fixture
    def normalizer(self, thresholds):
        return AzureNormalizer(thresholds)

    def test_severity_one_is_not_admitted(self, normalizer):
        """Severity 1 is scored but below the admission threshold."""
        result = normalizer.normalize({"categoriesAnalysis": [{"category": "Hate", "severity": 1}]})

        assert result.categories == []
        assert result.flagged is False
        assert result.category_scores["hate"] == pytest.approx(1 / 6)

    def test_severity_two_is_admitted(self, normalizer):
        """Severity 2 is the first admitted level."""
        result = normalizer.normalize({"categoriesAnalysis": [{"category": "Hate", "severity": 2}]})

        assert result.categories == ["hate"]
        assert result.flagged is True
        assert result.category_scores["hate"] == pytest.approx(2 / 6)

    def test_score_is_severity_over_six(self, normalizer):
        raw = {"categoriesAnalysis": [
            {"category": "Hate", "severity": 3},
            {"category": "Violence", "severity": 0},
            {"category": "Sexual", "severity": 6},
        ]}

        result = normalizer.normalize(raw)

        assert result.category_scores == {
            "hate": pytest.approx(0.5),
            "violence": 0.0,
            "sexual": 1.0,
        }
        assert result.categories == ["hate", "sexual"]
        assert result.timestamps is None

    def test_missing_analysis_raises(self, normalizer):
        """A response without categoriesAnalysis names the missing field."""
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize({"blocklistsMatch": []})

        assert exc_info.value.provider == "azure"
        assert exc_info.value.field == "categoriesAnalysis"

    def test_missing_severity_raises(self, normalizer):
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize({"categoriesAnalysis": [{"category": "Hate"}]})

        assert exc_info.value.field == "categoriesAnalysis.0.severity"

    def test_severity_above_scale_raises(self, normalizer):
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize({"categoriesAnalysis": [{"category": "Hate", "severity": 7}]})

        assert exc_info.value.field == "categoriesAnalysis.0.severity"

    def test_custom_threshold(self):
        """The admission threshold is configurable."""
        normalizer = AzureNormalizer(NormalizerThresholds(azure_severity=4))

        result = normalizer.normalize({"categoriesAnalysis": [{"category": "Hate", "severity": 3}]})

        assert result.categories == []


class TestGoogleVideoNormalizer:
    """Tests for the Google Video Intelligence normalizer."""

    @pytest.fixture
    def normalizer(self, thresholds):
        return GoogleVideoNormalizer(thresholds)

    @pytest.mark.parametrize("likelihood,expected", [
        ("UNKNOWN", 0.5),
        ("VERY_UNLIKELY", 0.05),
        ("UNLIKELY", 0.15),
        ("POSSIBLE", 0.4),
        ("LIKELY", 0.75),
        ("VERY_LIKELY", 0.95),
    ])
    def test_likelihood_table(self, normalizer, likelihood, expected):
        """Each likelihood maps to its fixed score; LIKELY and above are admitted."""
        raw = {"explicitAnnotation": {"frames": [
            {"timeOffset": "1s", "pornographyLikelihood": likelihood},
        ]}}

        result = normalizer.normalize(raw)

        assert result.category_scores["sexual_explicit"] == expected
        assert ("sexual_explicit" in result.categories) == (expected >= 0.75)

    def test_unrecognized_likelihood_counts_as_unknown(self):
        assert likelihood_score("LIKELIHOOD_UNSPECIFIED") == LIKELIHOOD_SCORES["UNKNOWN"] == 0.5

    def test_explicit_takes_max_over_frames(self, normalizer):
        """The explicit score is the maximum over all frames, with a marker per admitted frame."""
        raw = {"explicitAnnotation": {"frames": [
            {"timeOffset": "12.5s", "pornographyLikelihood": "VERY_LIKELY"},
            {"timeOffset": "1s", "pornographyLikelihood": "VERY_UNLIKELY"},
            {"timeOffset": {"seconds": "4", "nanos": 500000000}, "pornographyLikelihood": "LIKELY"},
        ]}}

        result = normalizer.normalize(raw)

        assert result.category_scores["sexual_explicit"] == 0.95
        assert result.categories == ["sexual_explicit"]
        assert [m.time_offset_seconds for m in result.timestamps] == [4.5, 12.5]
        assert [m.confidence for m in result.timestamps] == [0.75, 0.95]

    def test_label_signals(self, normalizer):
        """Labels match the signal vocabulary by substring, taking the max confidence."""
        raw = {
            "segmentLabelAnnotations": [
                {
                    "entity": {"description": "Gun Fight"},
                    "segments": [
                        {"segment": {"startTimeOffset": "10s", "endTimeOffset": "14s"}, "confidence": 0.82},
                        {"segment": {"startTimeOffset": "2s", "endTimeOffset": "3s"}, "confidence": 0.4},
                    ],
                },
                {
                    "entity": {"description": "weapon"},
                    "segments": [{"segment": {"startTimeOffset": "5s"}, "confidence": 0.65}],
                },
            ],
            "shotLabelAnnotations": [
                {
                    "entity": {"description": "Blood"},
                    "segments": [{"segment": {"startTimeOffset": "0s"}, "confidence": 0.9}],
                },
                {
                    "entity": {"description": "Dog"},
                    "segments": [{"segment": {"startTimeOffset": "0s"}, "confidence": 0.99}],
                },
            ],
        }

        result = normalizer.normalize(raw)

        assert result.categories == ["violence", "graphic_content"]
        assert result.category_scores == {
            "violence": 0.82,
            "weapons": 0.65,
            "graphic_content": 0.9,
        }
        assert [(m.time_offset_seconds, m.categories) for m in result.timestamps] == [
            (0.0, ["graphic_content"]),
            (10.0, ["violence"]),
        ]

    def test_on_screen_text_is_scored_not_admitted(self, normalizer):
        raw = {"segmentLabelAnnotations": [], "textAnnotations": [{"text": "SUBSCRIBE"}]}

        result = normalizer.normalize(raw)

        assert result.category_scores == {"on_screen_text": 0.5}
        assert result.categories == []
        assert result.flagged is False

    def test_clean_video_has_empty_timestamps(self, normalizer):
        """Google always reports a timestamp list, even when empty."""
        result = normalizer.normalize({"segmentLabelAnnotations": []})

        assert result.flagged is False
        assert result.timestamps == []

    def test_operation_envelope(self, normalizer):
        """A finished long-running operation is unwrapped."""
        raw = {
            "done": True,
            "response": {"annotationResults": [{
                "explicitAnnotation": {"frames": [{"timeOffset": "3s", "pornographyLikelihood": "VERY_LIKELY"}]},
            }]},
        }

        result = normalizer.normalize(raw)

        assert result.categories == ["sexual_explicit"]

    def test_empty_annotation_results_raises(self, normalizer):
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize({"annotationResults": []})

        assert exc_info.value.provider == "google_video_intelligence"
        assert exc_info.value.field == "annotationResults"

    @pytest.mark.parametrize("raw", [
        {},
        {"textAnnotations": [{"text": "SUBSCRIBE"}]},
        {"flagged": True, "categories": ["violence"], "categoryScores": {"violence": 0.9}},
    ])
    def test_missing_annotations_raises(self, normalizer, raw):
        """A body with no explicit or label annotations is not a clean video."""
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize(raw)

        assert exc_info.value.provider == "google_video_intelligence"
        assert exc_info.value.field == "explicitAnnotation|segmentLabelAnnotations|shotLabelAnnotations"

    def test_null_explicit_annotation_is_present(self, normalizer):
        result = normalizer.normalize({"annotationResults": [{"explicitAnnotation": None}]})

        assert result.flagged is False
        assert result.timestamps == []

    def test_label_without_entity_raises(self, normalizer):
        raw = {"segmentLabelAnnotations": [{"segments": [{"confidence": 0.9}]}]}

        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize(raw)

        assert exc_info.value.field == "segmentLabelAnnotations.0.entity"


class TestParseDuration:
    """Tests for protobuf duration parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("12.5s", 12.5),
        ("0s", 0.0),
        ({"seconds": "3", "nanos": 250000000}, 3.25),
        ({"nanos": 500000000}, 0.5),
        (7, 7.0),
        (None, 0.0),
    ])
    def test_formats(self, value, expected):
        assert parse_duration(value) == pytest.approx(expected)


class TestRegistry:
    """Tests for the normalizer registry."""

    def test_builtins_registered(self):
        assert set(list_normalizers()) >= {"openai", "azure", "google_video_intelligence"}

    def test_normalize_response_dispatches_by_provider(self):
        result = normalize_response("azure", {"categoriesAnalysis": [{"category": "Hate", "severity": 3}]})

        assert result.provider == "azure"
        assert result.categories == ["hate"]

    def test_unknown_provider(self):
        with pytest.raises(UnknownProviderError):
            normalize_response("rekognition", {})
