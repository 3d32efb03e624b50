"""
HTTP adapters for hosted moderation functions.

Each provider is fronted by a hosted function (``moderate-openai``,
``moderate-azure``, ``moderate-video``) that holds the provider credentials
and returns the provider's decoded response.

Usage:
    adapters = create_function_adapters()
    raw = await adapters[0].analyze(item)
"""
from typing import Any, Dict, List, Optional

import httpx

from modreview.core.config import settings
from modreview.core.logging import get_logger
from modreview.items.models import ContentItem
from modreview.moderation.errors import ProviderCallError
from modreview.providers.base import ProviderAdapter

logger = get_logger("providers.http")


class FunctionProviderAdapter(ProviderAdapter):
    """
    Adapter that POSTs a content item to a hosted moderation function.
    """

    function_name: str = ""

    def __init__(
        self,
        base_url: str = None,
        api_key: str = None,
        timeout: float = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the adapter.

        Args:
            base_url: Functions base URL (default from settings)
            api_key: Bearer key sent with every call (default from settings)
            timeout: Request timeout in seconds (default from settings)
            client: Shared AsyncClient; created lazily when omitted
        """
        self.base_url = (base_url or settings.functions_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.functions_api_key
        self.timeout = timeout or settings.provider_timeout_sec
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def build_payload(self, item: ContentItem) -> Dict[str, Any]:
        return {"text": item.text or item.title}

    async def analyze(self, item: ContentItem) -> Dict[str, Any]:
        client = await self._get_client()
        url = f"{self.base_url}/{self.function_name}"
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        logger.info(f"Calling {self.function_name} for item {item.id}")
        try:
            response = await client.post(url, json=self.build_payload(item), headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderCallError(
                self.provider_id,
                f"{self.function_name} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderCallError(self.provider_id, f"{self.function_name} request failed: {e}") from e
        except ValueError as e:
            raise ProviderCallError(self.provider_id, f"{self.function_name} returned invalid JSON") from e


class OpenAIFunctionAdapter(FunctionProviderAdapter):
    provider_id = "openai"
    function_name = "moderate-openai"


class AzureFunctionAdapter(FunctionProviderAdapter):
    provider_id = "azure"
    function_name = "moderate-azure"

    def build_payload(self, item: ContentItem) -> Dict[str, Any]:
        return {"content": item.text or item.title}


class GoogleVideoFunctionAdapter(FunctionProviderAdapter):
    provider_id = "google_video_intelligence"
    function_name = "moderate-video"

    def applies_to(self, item: ContentItem) -> bool:
        return item.source_locator is not None

    def build_payload(self, item: ContentItem) -> Dict[str, Any]:
        locator = item.source_locator
        if locator and locator.startswith("gs://"):
            return {"gcsUri": locator}
        return {"videoUrl": locator}


_ADAPTERS = {
    OpenAIFunctionAdapter.provider_id: OpenAIFunctionAdapter,
    AzureFunctionAdapter.provider_id: AzureFunctionAdapter,
    GoogleVideoFunctionAdapter.provider_id: GoogleVideoFunctionAdapter,
}


def create_function_adapters(
    providers: Optional[List[str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[FunctionProviderAdapter]:
    """Create adapters for the enabled providers."""
    providers = providers if providers is not None else settings.enabled_providers
    adapters = []
    for provider_id in providers:
        adapter_class = _ADAPTERS.get(provider_id)
        if adapter_class is None:
            logger.warning(f"Unknown provider '{provider_id}', skipping")
            continue
        adapters.append(adapter_class(client=client))
    return adapters
