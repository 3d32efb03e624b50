"""
Provider adapter interface.

An adapter invokes one third-party moderation provider for a content item
and returns the provider's decoded response, untouched. Normalization is
done by the matching normalizer, never by the adapter.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict

from modreview.items.models import ContentItem


class ProviderAdapter(ABC):
    """
    Abstract base class for provider adapters.

    Subclasses must implement:
    - analyze(): invoke the provider
    - provider_id: class attribute matching a registered normalizer
    """

    provider_id: str = "base"

    def applies_to(self, item: ContentItem) -> bool:
        """Whether this provider can analyze the item."""
        return True

    @abstractmethod
    async def analyze(self, item: ContentItem) -> Dict[str, Any]:
        """
        Invoke the provider for ``item``.

        Returns:
            The provider's decoded JSON response

        Raises:
            ProviderCallError: on network, auth or quota failures
        """
        pass

    async def close(self) -> None:
        """Release any held resources (optional override)."""
        pass
