"""Twelve Data real-time quote adapter."""

from typing import Any, Dict, Optional

from ..exceptions import ProviderError, ProviderNotFoundError, RateLimitedError
from ..models import CompanyProfile, DataSource, ProviderHealth, Quote
from .base import QuoteProvider
from .http import HTTPProvider
from .parsing import to_float, to_int


class TwelveDataProvider(HTTPProvider, QuoteProvider):
    """Primary live quote source."""

    name = "twelve_data"
    display_name = "Twelve Data"
    base_url = "https://api.twelvedata.com"

    async def get_quote(self, symbol: str) -> Optional[Quote]:
        symbol = symbol.upper()
        try:
            data = await self._get_json("/quote", {"symbol": symbol, "apikey": self.api_key})
            self._raise_for_error(data, symbol)
            return self._parse_quote(symbol, data)
        except ProviderError as e:
            self.logger.warning("Quote request failed", symbol=symbol, error=str(e))
            return None
        except (KeyError, TypeError, ValueError) as e:
            self.logger.warning("Malformed quote payload", symbol=symbol, error=str(e))
            return None

    def _raise_for_error(self, data: Any, symbol: str) -> None:
        if not isinstance(data, dict):
            raise ProviderError(self.name, "Unexpected payload")
        code = data.get("code")
        if code is None or code == 200:
            return
        if code == 429:
            raise RateLimitedError(self.name, data.get("message", "Rate limited"))
        if code in (400, 404):
            raise ProviderNotFoundError(self.name, symbol)
        raise ProviderError(self.name, data.get("message", "API error"))

    def _parse_quote(self, symbol: str, data: Dict[str, Any]) -> Optional[Quote]:
        price = to_float(data.get("close"))
        if price is None:
            raise ProviderNotFoundError(self.name, symbol)

        week52 = data.get("fifty_two_week") or {}
        profile = CompanyProfile(
            symbol=data.get("symbol", symbol),
            name=data.get("name"),
            exchange=data.get("exchange"),
            currency=data.get("currency"),
            average_volume=to_int(data.get("average_volume")),
            week52_high=to_float(week52.get("high")),
            week52_low=to_float(week52.get("low")),
            source=DataSource.TWELVE_DATA,
        )

        return Quote(
            symbol=symbol,
            price=price,
            change=to_float(data.get("change")) or 0.0,
            change_percent=to_float(data.get("percent_change")) or 0.0,
            volume=to_int(data.get("volume")),
            previous_close=to_float(data.get("previous_close")),
            open=to_float(data.get("open")),
            high=to_float(data.get("high")),
            low=to_float(data.get("low")),
            source=DataSource.TWELVE_DATA,
            profile=profile,
        )

    async def check_health(self) -> ProviderHealth:
        quote = await self.get_quote("AAPL")
        if quote:
            return self._health("healthy", "Real-time data available")
        return self._health("degraded", "No data returned")
