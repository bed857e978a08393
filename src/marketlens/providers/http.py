"""Shared JSON-over-HTTP plumbing for keyed REST providers."""

import asyncio
from typing import Any, Dict, Optional

import aiohttp

from ..exceptions import ProviderUnavailableError, RateLimitedError
from .base import Provider


class HTTPProvider(Provider):
    """Provider backed by a REST API that answers with JSON."""

    base_url: str = ""

    def __init__(self, api_key: Optional[str] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.api_key = api_key

    async def _get_json(self, path: str = "", params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a JSON document after waiting for this provider's rate limiter.

        Args:
            path: Path appended to base_url
            params: Query string parameters

        Returns:
            Decoded JSON payload

        Raises:
            RateLimitedError: If the provider answered 429
            ProviderUnavailableError: On timeouts, transport errors or non-200 status
        """
        await self.rate_limiter.await_turn()

        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, params=params) as response:
                    if response.status == 429:
                        raise RateLimitedError(self.name, "Request rate limit exceeded")
                    if response.status != 200:
                        error_text = await response.text()
                        raise ProviderUnavailableError(
                            self.name,
                            f"HTTP {response.status}: {error_text[:200]}",
                            status=response.status,
                        )
                    return await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise ProviderUnavailableError(self.name, "Request timed out") from e
        except aiohttp.ClientError as e:
            raise ProviderUnavailableError(self.name, str(e)) from e
