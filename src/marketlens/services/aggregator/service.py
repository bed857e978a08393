"""Multi-provider aggregation with fallback, caching and news classification."""

import asyncio
import time
from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Any, List, Optional, Sequence

from ...config.logging import get_logger, log_performance
from ...config.settings import Settings, get_settings
from ...core.cache import CacheKey, TTLCache
from ...core.fallback import first_available
from ...models import (
    CompanyProfile,
    HistoricalSeries,
    MarketOverview,
    NewsArticle,
    ProviderHealth,
    Quote,
    SearchResult,
    ServiceHealthReport,
)
from ...providers.parsing import as_utc
from ...providers.registry import ProviderRegistry, build_registry
from ..classification import NewsClassifier, summarize_day
from .dedup import dedup
from .models import ComprehensiveReport

logger = get_logger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
TOP_MARKET_NEWS = 10
MARKET_NEWS_FETCH = 20
SEARCH_OVERFETCH = 3


class DataAggregator:
    """
    Reconciles quotes, profiles, history and news from many providers.

    Every public operation degrades to None or an empty structure instead of
    raising when no provider has data. The cache is the only shared mutable
    state; concurrent cold lookups of one key may both reach the providers.
    Lists and models holding containers are copied on the way out of the
    cache, so callers may modify what they receive.
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        settings: Optional[Settings] = None,
        cache: Optional[TTLCache[Any]] = None,
        classifier: Optional[NewsClassifier] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or build_registry(self.settings)
        self.cache = cache or TTLCache(default_timeout=self.settings.cache_default_ttl)
        self.classifier = classifier or NewsClassifier()
        self.logger = logger.bind(service="data_aggregator")

    async def get_stock_data(self, symbol: str) -> Optional[Quote]:
        """
        Get a quote from the first provider that has one.

        The synthetic generator closes the chain, so a quote is always
        produced unless it has been removed from the registry.
        """
        symbol = symbol.upper().strip()
        key = CacheKey.build("quote", symbol)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        found = await first_available(
            self.registry.quote, lambda p: p.get_quote(symbol), operation="quote"
        )
        if found is None:
            self.logger.warning("No quote available", symbol=symbol)
            return None

        provider, quote = found
        self.cache.set(key, quote)
        self.logger.info(
            "Quote aggregated",
            symbol=symbol,
            provider=provider.name,
            price=quote.price,
            synthetic=quote.is_synthetic,
        )
        return quote

    async def get_stock_news(
        self,
        symbol: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[NewsArticle]:
        """
        Gather, deduplicate, classify and rank news for a symbol.

        Every news provider is queried concurrently; results are joined in
        provider order. Articles at or below the relevance floor are dropped
        and the rest are ordered by relevance, falling back to recency when
        two scores sit within the tie band.
        """
        symbol = symbol.upper().strip()
        start, end = as_utc(start), as_utc(end)
        key = CacheKey.build("news", symbol, start=start, end=end, limit=limit)
        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)

        started = time.perf_counter()
        results = await asyncio.gather(
            *(p.get_news(symbol, start=start, end=end, limit=limit) for p in self.registry.news),
            return_exceptions=True,
        )

        collected: List[NewsArticle] = []
        for provider, result in zip(self.registry.news, results):
            if isinstance(result, BaseException):
                self.logger.warning(
                    "News provider failed", symbol=symbol, provider=provider.name, error=str(result)
                )
                continue
            collected.extend(result)

        unique = dedup(collected)
        quote = await self.get_stock_data(symbol)
        sector = (quote.sector if quote else None) or self.settings.default_sector

        classified = self.classifier.classify_all(unique, symbol, sector)
        floor = self.settings.news_relevance_floor
        ranked = self.rank_news([a for a in classified if a.relevance > floor])

        self.cache.set(key, tuple(ranked))
        self.logger.info(
            "News aggregated",
            symbol=symbol,
            fetched=len(collected),
            unique=len(unique),
            relevant=len(ranked),
        )
        log_performance("get_stock_news", (time.perf_counter() - started) * 1000, symbol=symbol)
        return ranked

    def rank_news(self, articles: Sequence[NewsArticle]) -> List[NewsArticle]:
        """Sort by relevance descending; within the tie band, newest first."""
        tie_band = self.settings.news_relevance_tie_band

        def compare(a: NewsArticle, b: NewsArticle) -> int:
            diff = b.relevance - a.relevance
            if abs(diff) > tie_band:
                return 1 if diff > 0 else -1
            a_time = a.published_at or _EPOCH
            b_time = b.published_at or _EPOCH
            if a_time == b_time:
                return 0
            return 1 if b_time > a_time else -1

        return sorted(articles, key=cmp_to_key(compare))

    async def get_market_overview(self) -> MarketOverview:
        """Indices, sector ETFs, headlines and macro indicators, each optional."""
        key = CacheKey.build("market_overview")
        cached = self.cache.get(key)
        if cached is not None:
            return cached.model_copy(deep=True)

        market_data = self.registry.market_data[0] if self.registry.market_data else None
        market_news = self.registry.market_news[0] if self.registry.market_news else None
        economic = self.registry.economic[0] if self.registry.economic else None

        indices, sectors, headlines, indicators = await asyncio.gather(
            self._safely(market_data.get_index_snapshots() if market_data else None, {}),
            self._safely(market_data.get_sector_snapshots() if market_data else None, {}),
            self._safely(
                market_news.get_market_news(limit=MARKET_NEWS_FETCH) if market_news else None, []
            ),
            self._safely(economic.get_indicators() if economic else None, {}),
        )

        overview = MarketOverview(
            market_indices=indices,
            sector_performance=sectors,
            top_news=headlines[:TOP_MARKET_NEWS],
            economic_indicators=indicators,
        )
        self.cache.set(key, overview, timeout=self.settings.market_overview_ttl)
        self.logger.info(
            "Market overview aggregated",
            indices=len(indices),
            sectors=len(sectors),
            headlines=len(overview.top_news),
            indicators=len(indicators),
        )
        return overview.model_copy(deep=True)

    async def _safely(self, awaitable: Optional[Any], default: Any) -> Any:
        """Await a provider call, substituting the default on absence or failure."""
        if awaitable is None:
            return default
        try:
            result = await awaitable
        except Exception as e:
            self.logger.warning("Market overview component failed", error=str(e))
            return default
        return result if result is not None else default

    async def get_historical_data(
        self, symbol: str, period: str = "1mo", interval: str = "1d"
    ) -> Optional[HistoricalSeries]:
        """Primary history provider, then the secondary one for daily bars only."""
        symbol = symbol.upper().strip()
        key = CacheKey.build("historical", symbol, period=period, interval=interval)
        cached = self.cache.get(key)
        if cached is not None:
            return cached.model_copy(deep=True)

        chain = self.registry.historical if interval == "1d" else self.registry.historical[:1]
        found = await first_available(
            chain, lambda p: p.get_historical(symbol, period, interval), operation="historical"
        )
        if found is None:
            return None

        provider, series = found
        self.cache.set(key, series, timeout=self.settings.historical_ttl)
        self.logger.info(
            "Historical data aggregated", symbol=symbol, provider=provider.name, bars=len(series.bars)
        )
        return series.model_copy(deep=True)

    async def get_company_profile(self, symbol: str) -> Optional[CompanyProfile]:
        symbol = symbol.upper().strip()
        key = CacheKey.build("profile", symbol)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        found = await first_available(
            self.registry.profile, lambda p: p.get_profile(symbol), operation="profile"
        )
        if found is None:
            return None

        _, profile = found
        self.cache.set(key, profile, timeout=self.settings.profile_ttl)
        return profile

    async def search_stocks(self, query: str) -> List[SearchResult]:
        """US-listed equities matching the query."""
        limit = self.settings.search_result_limit
        # Non-equities and foreign listings are filtered out afterwards
        fetch = limit * SEARCH_OVERFETCH
        found = await first_available(
            self.registry.search, lambda p: p.search(query, fetch), operation="search"
        )
        if found is None:
            return []

        _, results = found
        equities = [
            result
            for result in results
            if result.quote_type == "EQUITY" and result.exchange and "." not in result.symbol
        ]
        return equities[:limit]

    async def calculate_average_volume(
        self, symbol: str, days: Optional[int] = None
    ) -> Optional[int]:
        """Mean positive daily volume over the most recent `days` bars of the last month."""
        days = days or self.settings.average_volume_days
        series = await self.get_historical_data(symbol, "1mo", "1d")
        if series is None or len(series.bars) < days:
            return None

        volumes = [bar.volume for bar in series.bars[:days] if bar.volume and bar.volume > 0]
        if not volumes:
            return None
        return round(sum(volumes) / len(volumes))

    async def generate_comprehensive_report(self, symbol: str) -> Optional[ComprehensiveReport]:
        symbol = symbol.upper().strip()
        quote, news, historical, profile = await asyncio.gather(
            self.get_stock_data(symbol),
            self.get_stock_news(symbol),
            self.get_historical_data(symbol, "1mo"),
            self.get_company_profile(symbol),
        )

        if quote is None:
            self.logger.warning("No data for comprehensive report", symbol=symbol)
            return None

        return ComprehensiveReport(
            symbol=symbol,
            quote=quote,
            profile=profile,
            news=news,
            historical=historical,
            daily_summary=summarize_day(symbol, quote, news),
        )

    async def check_all_services_health(self) -> ServiceHealthReport:
        providers = self.registry.all_providers()
        results = await asyncio.gather(
            *(provider.check_health() for provider in providers), return_exceptions=True
        )

        services: List[ProviderHealth] = []
        for provider, result in zip(providers, results):
            if isinstance(result, BaseException):
                services.append(
                    ProviderHealth(
                        service=provider.display_name, status="error", message=str(result)
                    )
                )
            else:
                services.append(result)

        report = ServiceHealthReport(services=services, cache_size=self.cache.size())
        self.logger.info("Service health checked", status=report.status, providers=len(services))
        return report

    def clear_cache(self) -> None:
        self.cache.clear()
        self.logger.info("Cache cleared")
