"""
Base normalizer class.

All provider normalizers inherit from BaseNormalizer. A normalizer is a
pure function of its input: it parses the decoded provider response into
the provider's raw model and converts it into a ModerationResult.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type
from pydantic import BaseModel, ValidationError

from modreview.core.config import NormalizerThresholds
from modreview.moderation.errors import NormalizationError
from modreview.moderation.result import ModerationResult


def _error_field(exc: ValidationError) -> str:
    """Dotted path of the first invalid field in a ValidationError."""
    errors = exc.errors()
    if not errors:
        return "<root>"
    loc = errors[0].get("loc", ())
    return ".".join(str(part) for part in loc) or "<root>"


class BaseNormalizer(ABC):
    """
    Abstract base class for provider normalizers.

    Subclasses must implement:
    - convert(): raw model -> ModerationResult
    - provider_id / raw_model: class attributes
    """

    # Subclasses should set these
    provider_id: str = "base"
    raw_model: Type[BaseModel] = BaseModel

    def __init__(self, thresholds: Optional[NormalizerThresholds] = None):
        self.thresholds = thresholds or NormalizerThresholds.from_settings()

    def normalize(self, raw: Any) -> ModerationResult:
        """
        Normalize a decoded provider response.

        Raises:
            NormalizationError: if the response is missing an expected field
        """
        parsed = self.parse(raw)
        try:
            return self.convert(parsed)
        except NormalizationError:
            raise
        except ValueError as e:
            raise NormalizationError(self.provider_id, "<result>", str(e)) from e

    def parse(self, raw: Any) -> BaseModel:
        """Validate the decoded response against the provider's raw model."""
        payload = self.unwrap(raw)
        try:
            return self.raw_model.model_validate(payload)
        except ValidationError as e:
            field = _error_field(e)
            raise NormalizationError(
                self.provider_id, field, f"missing or invalid field '{field}'"
            ) from e

    def unwrap(self, raw: Any) -> Dict[str, Any]:
        """Strip provider envelopes. Default: the response itself."""
        if not isinstance(raw, dict):
            raise NormalizationError(
                self.provider_id, "<root>", f"expected a JSON object, got {type(raw).__name__}"
            )
        return raw

    @abstractmethod
    def convert(self, parsed: BaseModel) -> ModerationResult:
        """Convert the parsed raw model into a ModerationResult."""
        pass
