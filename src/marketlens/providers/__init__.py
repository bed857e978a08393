"""Source adapters for external market data providers."""

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
from .registry import ProviderRegistry, build_registry
from .synthetic import SyntheticQuoteProvider
from .twelve_data import TwelveDataProvider
from .yahoo_finance import MARKET_INDICES, SECTOR_ETFS, YahooFinanceProvider

__all__ = [
    "AlphaVantageProvider",
    "EconomicDataProvider",
    "FREDProvider",
    "HistoricalProvider",
    "MARKET_INDICES",
    "MarketDataProvider",
    "MarketNewsProvider",
    "NewsAPIProvider",
    "NewsProvider",
    "ProfileProvider",
    "Provider",
    "ProviderRegistry",
    "QuoteProvider",
    "SECTOR_ETFS",
    "SearchProvider",
    "SyntheticQuoteProvider",
    "TwelveDataProvider",
    "YahooFinanceProvider",
    "build_registry",
]
