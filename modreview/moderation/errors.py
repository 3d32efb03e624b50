"""
Moderation error taxonomy.

Per-provider errors (NormalizationError, ProviderCallError) are recoverable:
the provider's contribution is dropped and analysis continues with the
others. AllProvidersFailedError is what moves an item to ``failed``.
"""
from typing import Dict, Optional


class ModerationError(Exception):
    """Base class for moderation errors."""
    pass


class NormalizationError(ModerationError):
    """Raised when a provider response is missing an expected field."""

    def __init__(self, provider: str, field: str, message: Optional[str] = None):
        self.provider = provider
        self.field = field
        detail = message or f"missing or invalid field '{field}'"
        super().__init__(f"[{provider}] {detail}")


class ProviderCallError(ModerationError):
    """Raised when a provider adapter call fails (network, auth, quota, timeout)."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"[{provider}] {message}")


class AllProvidersFailedError(ModerationError):
    """Raised when every dispatched provider failed for an item."""

    def __init__(self, item_id: str, errors: Dict[str, str]):
        self.item_id = item_id
        self.errors = errors
        providers = ", ".join(sorted(errors)) or "none"
        super().__init__(f"All providers failed for item {item_id} ({providers})")


class InvalidTransitionError(ModerationError):
    """Raised when a moderation state change is not allowed."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move moderation state from '{current}' to '{target}'")


class UnknownProviderError(ModerationError):
    """Raised when no normalizer is registered for a provider id."""
    pass
