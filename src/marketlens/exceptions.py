"""Exception hierarchy for provider and configuration failures.

These are raised inside source adapters and caught at the adapter boundary,
where they are logged and converted to an absent or empty result.
"""

from typing import Any, Dict, Optional


class MarketLensError(Exception):
    """Base exception for MarketLens."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProviderError(MarketLensError):
    """A single call to an external data provider failed."""

    def __init__(
        self,
        provider: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"{provider}: {message}",
            details={"provider": provider, **(details or {})},
        )
        self.provider = provider


class RateLimitedError(ProviderError):
    """The provider rejected the call because its quota was exhausted."""


class ProviderUnavailableError(ProviderError):
    """Network failure, timeout or unexpected HTTP status."""

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        super().__init__(provider, message, details={"status": status})
        self.status = status


class ProviderNotFoundError(ProviderError):
    """The provider answered but holds no data for the requested symbol."""

    def __init__(self, provider: str, symbol: str):
        super().__init__(
            provider, f"no data for '{symbol}'", details={"symbol": symbol}
        )
        self.symbol = symbol


class ConfigurationError(MarketLensError):
    """Exception for configuration errors."""

    def __init__(self, setting: str, message: str):
        super().__init__(
            message=f"Configuration error for '{setting}': {message}",
            details={"setting": setting},
        )
