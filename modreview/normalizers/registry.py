"""
Normalizer registry.

Maps provider ids to normalizer implementations.
"""
from typing import Any, Dict, List, Optional, Type

from modreview.core.config import NormalizerThresholds
from modreview.moderation.errors import UnknownProviderError
from modreview.moderation.result import ModerationResult
from modreview.normalizers.azure import AzureNormalizer
from modreview.normalizers.base import BaseNormalizer
from modreview.normalizers.google_video import GoogleVideoNormalizer
from modreview.normalizers.openai import OpenAINormalizer


class NormalizerRegistry:
    """
    Registry for provider normalizer implementations.
    """

    _normalizers: Dict[str, Type[BaseNormalizer]] = {}

    @classmethod
    def register(
        cls,
        provider_id: str,
        normalizer_class: Type[BaseNormalizer]
    ) -> None:
        """Register a normalizer implementation."""
        cls._normalizers[provider_id] = normalizer_class

    @classmethod
    def get(
        cls,
        provider_id: str,
        thresholds: Optional[NormalizerThresholds] = None
    ) -> BaseNormalizer:
        """Get a normalizer instance for the given provider."""
        if provider_id not in cls._normalizers:
            available = list(cls._normalizers.keys())
            raise UnknownProviderError(
                f"No normalizer registered for provider '{provider_id}'. "
                f"Available: {available}"
            )
        return cls._normalizers[provider_id](thresholds)

    @classmethod
    def list_providers(cls) -> List[str]:
        """List registered provider ids."""
        return list(cls._normalizers.keys())


# ===== CONVENIENCE FUNCTIONS =====

def get_normalizer(provider_id: str, thresholds: Optional[NormalizerThresholds] = None) -> BaseNormalizer:
    """Get a normalizer instance for the given provider."""
    return NormalizerRegistry.get(provider_id, thresholds)


def normalize_response(
    provider_id: str,
    raw: Any,
    thresholds: Optional[NormalizerThresholds] = None
) -> ModerationResult:
    """Normalize one provider's decoded response into a ModerationResult."""
    return NormalizerRegistry.get(provider_id, thresholds).normalize(raw)


def list_normalizers() -> List[str]:
    """List registered provider ids."""
    return NormalizerRegistry.list_providers()


# ===== REGISTER BUILT-IN NORMALIZERS =====

NormalizerRegistry.register(OpenAINormalizer.provider_id, OpenAINormalizer)
NormalizerRegistry.register(AzureNormalizer.provider_id, AzureNormalizer)
NormalizerRegistry.register(GoogleVideoNormalizer.provider_id, GoogleVideoNormalizer)
