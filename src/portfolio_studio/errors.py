"""Exception types raised by the studio pipeline."""

from __future__ import annotations


class StudioError(Exception):
    """Base class for portfolio studio errors."""


class ConfigurationError(StudioError):
    """Raised when process configuration cannot be resolved."""


class UnsupportedProviderError(ConfigurationError):
    """Raised when the configured LLM provider identity is unknown."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"Unsupported LLM provider: {provider}")
        self.provider = provider


class ProviderRequestError(StudioError):
    """Raised when an LLM provider request fails."""

    def __init__(self, message: str, *, provider: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class ProviderTimeoutError(ProviderRequestError):
    """Raised when an LLM provider request exceeds its timeout."""
