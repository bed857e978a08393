"""Federal Reserve Economic Data (FRED) adapter."""

from datetime import date
from typing import Dict, Optional

from ..exceptions import ProviderError
from ..models import EconomicIndicator, ProviderHealth
from .base import EconomicDataProvider
from .http import HTTPProvider
from .parsing import to_float

INDICATOR_SERIES = (
    "FEDFUNDS",  # Federal funds rate
    "CPIAUCSL",  # Consumer price index
    "UNRATE",  # Unemployment rate
    "GDP",
)


class FREDProvider(HTTPProvider, EconomicDataProvider):
    name = "fred"
    display_name = "Federal Reserve FRED"
    base_url = "https://api.stlouisfed.org/fred"

    async def get_latest_observation(self, series_id: str) -> Optional[EconomicIndicator]:
        data = await self._get_json(
            "/series/observations",
            {
                "series_id": series_id,
                "api_key": self.api_key,
                "file_type": "json",
                "limit": 1,
                "sort_order": "desc",
            },
        )
        observations = data.get("observations") if isinstance(data, dict) else None
        if not observations:
            return None

        latest = observations[0]
        value = to_float(latest.get("value"))
        if value is None:
            return None
        return EconomicIndicator(
            series_id=series_id,
            value=value,
            observed_on=date.fromisoformat(latest["date"]),
        )

    async def get_indicators(self) -> Dict[str, EconomicIndicator]:
        indicators: Dict[str, EconomicIndicator] = {}
        for series_id in INDICATOR_SERIES:
            try:
                indicator = await self.get_latest_observation(series_id)
            except (ProviderError, KeyError, ValueError) as e:
                self.logger.warning("Series request failed", series_id=series_id, error=str(e))
                continue
            if indicator:
                indicators[series_id] = indicator
        return indicators

    async def check_health(self) -> ProviderHealth:
        indicators = await self.get_indicators()
        status = "healthy" if indicators else "degraded"
        return self._health(status, f"{len(indicators)} indicators available")
