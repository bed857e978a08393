"""Record types shared across providers and services."""

from .market import (
    CompanyProfile,
    DataSource,
    EconomicIndicator,
    HistoricalSeries,
    IndexSnapshot,
    MarketOverview,
    PriceBar,
    ProviderHealth,
    Quote,
    SearchResult,
    ServiceHealthReport,
)
from .news import Classification, NewsArticle, NewsCategory, PriceImpact, article_id

__all__ = [
    "Classification",
    "CompanyProfile",
    "DataSource",
    "EconomicIndicator",
    "HistoricalSeries",
    "IndexSnapshot",
    "MarketOverview",
    "NewsArticle",
    "NewsCategory",
    "PriceBar",
    "PriceImpact",
    "ProviderHealth",
    "Quote",
    "SearchResult",
    "ServiceHealthReport",
    "article_id",
]
