"""Construct the provider set and capability chains from settings."""

from dataclasses import dataclass, field
from typing import List, Optional

from ..config.logging import get_logger
from ..config.settings import Settings, get_settings
from ..core.rate_limiter import RateLimiter
from .alpha_vantage import AlphaVantageProvider
from .base import (
    EconomicDataProvider,
    HistoricalProvider,
    MarketDataProvider,
    MarketNewsProvider,
    NewsProvider,
    ProfileProvider,
    Provider,
    QuoteProvider,
    SearchProvider,
)
from .fred import FREDProvider
from .news_api import NewsAPIProvider
from .synthetic import SyntheticQuoteProvider
from .twelve_data import TwelveDataProvider
from .yahoo_finance import YahooFinanceProvider

logger = get_logger(__name__)


@dataclass
class ProviderRegistry:
    """
    Capability chains in priority order.

    Fallback chains (quote, historical, profile) are consulted front to back;
    fan-out lists (news) are joined in list order.
    """

    quote: List[QuoteProvider] = field(default_factory=list)
    news: List[NewsProvider] = field(default_factory=list)
    market_news: List[MarketNewsProvider] = field(default_factory=list)
    historical: List[HistoricalProvider] = field(default_factory=list)
    profile: List[ProfileProvider] = field(default_factory=list)
    search: List[SearchProvider] = field(default_factory=list)
    market_data: List[MarketDataProvider] = field(default_factory=list)
    economic: List[EconomicDataProvider] = field(default_factory=list)

    def all_providers(self) -> List[Provider]:
        """Every distinct provider, in first-seen order."""
        seen = []
        for chain in (
            self.quote,
            self.news,
            self.market_news,
            self.historical,
            self.profile,
            self.search,
            self.market_data,
            self.economic,
        ):
            for provider in chain:
                if all(provider is not other for other in seen):
                    seen.append(provider)
        return seen


def build_registry(settings: Optional[Settings] = None) -> ProviderRegistry:
    """
    Instantiate one adapter (and one rate limiter) per provider.

    Keyed providers only participate when their credential is configured.
    Yahoo Finance and the synthetic quote generator need no key.
    """
    settings = settings or get_settings()
    timeout = settings.provider_timeout_seconds

    yahoo = YahooFinanceProvider(
        rate_limiter=RateLimiter("yahoo_finance", settings.yahoo_finance_min_interval),
        timeout=timeout,
    )
    twelve_data = alpha_vantage = news_api = fred = None

    if settings.twelve_data_api_key:
        twelve_data = TwelveDataProvider(
            api_key=settings.twelve_data_api_key,
            rate_limiter=RateLimiter("twelve_data", settings.twelve_data_min_interval),
            timeout=timeout,
        )
    if settings.alpha_vantage_api_key:
        alpha_vantage = AlphaVantageProvider(
            api_key=settings.alpha_vantage_api_key,
            rate_limiter=RateLimiter("alpha_vantage", settings.alpha_vantage_min_interval),
            timeout=timeout,
        )
    if settings.news_api_key:
        news_api = NewsAPIProvider(
            api_key=settings.news_api_key,
            rate_limiter=RateLimiter("news_api", settings.news_api_min_interval),
            timeout=timeout,
        )
    if settings.fred_api_key:
        fred = FREDProvider(
            api_key=settings.fred_api_key,
            rate_limiter=RateLimiter("fred", settings.fred_min_interval),
            timeout=timeout,
        )

    registry = ProviderRegistry(
        quote=[p for p in (twelve_data, yahoo) if p] + [SyntheticQuoteProvider()],
        news=[p for p in (news_api, alpha_vantage, yahoo) if p],
        market_news=[p for p in (news_api,) if p],
        historical=[p for p in (yahoo, alpha_vantage) if p],
        profile=[p for p in (alpha_vantage, yahoo) if p],
        search=[yahoo],
        market_data=[yahoo],
        economic=[p for p in (fred,) if p],
    )

    logger.info(
        "Provider registry built",
        configured=settings.configured_providers(),
        providers=[p.name for p in registry.all_providers()],
    )
    return registry
