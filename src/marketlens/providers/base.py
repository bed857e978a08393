"""Capability interfaces implemented by source adapters."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from ..config.logging import get_logger
from ..core.rate_limiter import RateLimiter
from ..models import (
    CompanyProfile,
    EconomicIndicator,
    HistoricalSeries,
    IndexSnapshot,
    NewsArticle,
    ProviderHealth,
    Quote,
    SearchResult,
)

logger = get_logger(__name__)


class Provider(ABC):
    """
    Base class for every source adapter.

    Adapters never raise past their public capability methods: any failure
    is logged and returned as None or an empty collection.
    """

    name: str = "provider"
    display_name: str = "Provider"

    def __init__(self, rate_limiter: Optional[RateLimiter] = None, timeout: float = 10.0):
        self.rate_limiter = rate_limiter or RateLimiter(self.name, 0.0)
        self.timeout = timeout
        self.logger = logger.bind(provider=self.name)

    @abstractmethod
    async def check_health(self) -> ProviderHealth:
        """Run a lightweight probe against the provider."""

    def _health(self, status: str, message: Optional[str] = None) -> ProviderHealth:
        return ProviderHealth(service=self.display_name, status=status, message=message)


class QuoteProvider(Provider):
    @abstractmethod
    async def get_quote(self, symbol: str) -> Optional[Quote]:
        """Latest quote for a symbol, or None."""


class NewsProvider(Provider):
    @abstractmethod
    async def get_news(
        self,
        symbol: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[NewsArticle]:
        """Articles about a symbol; empty on any failure."""


class MarketNewsProvider(Provider):
    @abstractmethod
    async def get_market_news(self, limit: int = 50) -> List[NewsArticle]:
        """General market headlines; empty on any failure."""


class HistoricalProvider(Provider):
    @abstractmethod
    async def get_historical(
        self, symbol: str, period: str = "1mo", interval: str = "1d"
    ) -> Optional[HistoricalSeries]:
        """Price history with the most recent bar first, or None."""


class ProfileProvider(Provider):
    @abstractmethod
    async def get_profile(self, symbol: str) -> Optional[CompanyProfile]:
        """Company profile, or None."""


class SearchProvider(Provider):
    @abstractmethod
    async def search(self, query: str, limit: int = 10) -> List[SearchResult]:
        """Symbol search hits; empty on any failure."""


class MarketDataProvider(Provider):
    @abstractmethod
    async def get_index_snapshots(self) -> Dict[str, IndexSnapshot]:
        """Major index snapshots keyed by index name."""

    @abstractmethod
    async def get_sector_snapshots(self) -> Dict[str, IndexSnapshot]:
        """Sector ETF snapshots keyed by ETF symbol."""


class EconomicDataProvider(Provider):
    @abstractmethod
    async def get_indicators(self) -> Dict[str, EconomicIndicator]:
        """Latest observation per tracked macro series."""
