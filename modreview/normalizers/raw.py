"""
Raw provider response models.

One pydantic model per provider variant (OpenAIRaw | AzureRaw |
GoogleVideoRaw). Parsing a decoded response through these models turns a
missing or mistyped field into a ValidationError that the normalizers
convert into NormalizationError.
"""
from typing import Any, Dict, List, Optional, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def parse_duration(value: Any) -> float:
    """
    Parse a protobuf Duration as emitted by Google APIs.

    Accepts "12.5s" strings, {"seconds": "12", "nanos": 500000000}
    objects, and bare numbers.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("s"):
            text = text[:-1]
        return float(text or 0)
    if isinstance(value, dict):
        seconds = float(value.get("seconds", 0) or 0)
        nanos = float(value.get("nanos", 0) or 0)
        return seconds + nanos / 1e9
    raise ValueError(f"unsupported duration value: {value!r}")


# ===== OPENAI =====

class OpenAIRaw(BaseModel):
    """
    OpenAI moderation result (one entry of ``results``).

    ``categories`` is either the API's per-category boolean map or the
    list of flagged names returned by the moderate-openai function, which
    also spells the score map ``categoryScores``.
    """
    categories: Union[Dict[str, bool], List[str]]
    category_scores: Dict[str, float] = Field(
        ..., validation_alias=AliasChoices("category_scores", "categoryScores")
    )
    flagged: Optional[bool] = None


# ===== AZURE =====

class AzureCategoryAnalysis(BaseModel):
    category: str = Field(..., min_length=1)
    severity: int = Field(..., ge=0)


class AzureRaw(BaseModel):
    """Azure Content Safety text:analyze response."""
    model_config = ConfigDict(populate_by_name=True)

    categories_analysis: List[AzureCategoryAnalysis] = Field(..., alias="categoriesAnalysis")


# ===== GOOGLE VIDEO INTELLIGENCE =====

class ExplicitFrame(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pornography_likelihood: str = Field(default="UNKNOWN", alias="pornographyLikelihood")
    time_offset: float = Field(default=0.0, alias="timeOffset")

    @field_validator("time_offset", mode="before")
    @classmethod
    def _parse_offset(cls, v: Any) -> float:
        return parse_duration(v)


class ExplicitAnnotation(BaseModel):
    frames: List[ExplicitFrame] = Field(default_factory=list)


class VideoSegment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_time_offset: float = Field(default=0.0, alias="startTimeOffset")
    end_time_offset: float = Field(default=0.0, alias="endTimeOffset")

    @field_validator("start_time_offset", "end_time_offset", mode="before")
    @classmethod
    def _parse_offset(cls, v: Any) -> float:
        return parse_duration(v)


class LabelSegment(BaseModel):
    segment: VideoSegment = Field(default_factory=VideoSegment)
    confidence: float = 0.0


class LabelEntity(BaseModel):
    description: str


class LabelAnnotation(BaseModel):
    entity: LabelEntity
    segments: List[LabelSegment] = Field(default_factory=list)


class GoogleVideoRaw(BaseModel):
    """One entry of a Video Intelligence ``annotationResults`` list."""
    model_config = ConfigDict(populate_by_name=True)

    explicit_annotation: Optional[ExplicitAnnotation] = Field(default=None, alias="explicitAnnotation")
    segment_label_annotations: List[LabelAnnotation] = Field(default_factory=list, alias="segmentLabelAnnotations")
    shot_label_annotations: List[LabelAnnotation] = Field(default_factory=list, alias="shotLabelAnnotations")
    text_annotations: List[Dict[str, Any]] = Field(default_factory=list, alias="textAnnotations")

    @property
    def label_annotations(self) -> List[LabelAnnotation]:
        return self.segment_label_annotations + self.shot_label_annotations
