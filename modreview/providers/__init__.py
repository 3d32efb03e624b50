"""
Provider adapters (collaborator side of the provider boundary).
"""
from modreview.providers.base import ProviderAdapter
from modreview.providers.http import (
    FunctionProviderAdapter,
    OpenAIFunctionAdapter,
    AzureFunctionAdapter,
    GoogleVideoFunctionAdapter,
    create_function_adapters,
)

__all__ = [
    "ProviderAdapter",
    "FunctionProviderAdapter",
    "OpenAIFunctionAdapter",
    "AzureFunctionAdapter",
    "GoogleVideoFunctionAdapter",
    "create_function_adapters",
]
