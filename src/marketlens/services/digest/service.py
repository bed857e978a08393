"""Watchlist digests, priority alerts and per-symbol movement analysis."""

import asyncio
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ...config.logging import get_logger
from ...config.settings import Settings, get_settings
from ...models import MarketOverview, NewsArticle, NewsCategory, Quote
from ..aggregator import DataAggregator
from ..classification import DailySummary, summarize_day
from ..correlation import CorrelationAnalysis, MarketCorrelator, sector_etf
from .models import (
    CategoryBreakdown,
    Digest,
    DigestError,
    DigestSummary,
    MarketContext,
    MovementSummary,
    PriorityAlert,
    StockDigest,
    StockSnapshot,
)
from .scoring import (
    HIGH_PRIORITY_THRESHOLD,
    calculate_priority_score,
    generate_alerts,
    generate_insights,
    market_direction,
)

logger = get_logger(__name__)

TOP_NEWS_PER_STOCK = 5
TOP_MARKET_NEWS = 3


def normalize_symbols(symbols: Iterable[str]) -> List[str]:
    """Upper-case, strip and de-duplicate symbols, keeping their order."""
    normalized: List[str] = []
    for symbol in symbols:
        symbol = symbol.strip().upper()
        if symbol and symbol not in normalized:
            normalized.append(symbol)
    return normalized


class DigestService:
    """Service combining aggregation, correlation and scoring per watchlist."""

    def __init__(
        self,
        aggregator: Optional[DataAggregator] = None,
        correlator: Optional[MarketCorrelator] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.aggregator = aggregator or DataAggregator(settings=self.settings)
        self.correlator = correlator or MarketCorrelator()
        self.logger = logger.bind(service="digest_service")

    def _recent_window_start(self, now: Optional[datetime] = None) -> datetime:
        """Start of the previous UTC day; stable within a day so news lookups cache."""
        now = now or datetime.now(timezone.utc)
        return datetime.combine(now.date() - timedelta(days=1), time.min, tzinfo=timezone.utc)

    async def _fetch(self, symbol: str) -> Tuple[Optional[Quote], List[NewsArticle]]:
        return await asyncio.gather(
            self.aggregator.get_stock_data(symbol),
            self.aggregator.get_stock_news(symbol, start=self._recent_window_start()),
        )

    async def _correlate(
        self,
        symbol: str,
        quote: Quote,
        news: Sequence[NewsArticle],
        overview: MarketOverview,
    ) -> CorrelationAnalysis:
        sector = quote.sector or self.settings.default_sector
        etf = sector_etf(sector)
        snapshot = overview.sector_performance.get(etf) if etf else None

        average_volume = quote.average_volume
        if not average_volume:
            average_volume = await self.aggregator.calculate_average_volume(symbol)

        return self.correlator.analyze_movement(
            symbol,
            quote,
            news,
            market_change=overview.average_index_change() or 0.0,
            sector_change=snapshot.change_percent if snapshot else None,
            sector=sector,
            average_volume=average_volume,
        )

    async def analyze_movement(self, symbol: str) -> Optional[CorrelationAnalysis]:
        """
        Explain a symbol's current move.

        Args:
            symbol: Ticker to analyze

        Returns:
            CorrelationAnalysis, or None if no quote is available
        """
        symbol = symbol.strip().upper()
        (quote, news), overview = await asyncio.gather(
            self._fetch(symbol), self.aggregator.get_market_overview()
        )
        if quote is None:
            return None
        return await self._correlate(symbol, quote, news, overview)

    async def summarize_day(self, symbol: str) -> Optional[DailySummary]:
        symbol = symbol.strip().upper()
        quote, news = await self._fetch(symbol)
        if quote is None:
            return None
        return summarize_day(symbol, quote, news)

    async def _digest_symbol(
        self, symbol: str, digest_date: date, overview: MarketOverview
    ) -> Union[StockDigest, DigestError]:
        try:
            quote, news = await self._fetch(symbol)
            if quote is None:
                self.logger.warning("No stock data found", symbol=symbol)
                return DigestError(symbol=symbol, error="No stock data available")

            analysis = await self._correlate(symbol, quote, news, overview)

            todays_news = [
                a
                for a in news
                if a.published_at is not None
                and a.published_at.astimezone(timezone.utc).date() == digest_date
            ]
            by_category = {
                category: sum(1 for a in todays_news if a.category == category)
                for category in NewsCategory
            }

            return StockDigest(
                symbol=symbol,
                stock=StockSnapshot(
                    name=quote.name or symbol,
                    price=quote.price,
                    change=quote.change,
                    change_percent=quote.change_percent,
                    volume=quote.volume,
                    sector=quote.sector,
                    synthetic=quote.is_synthetic,
                ),
                movement=MovementSummary(
                    explanation=analysis.explanation,
                    confidence=analysis.confidence,
                    primary_driver=analysis.driver.primary.value,
                ),
                news_breakdown=CategoryBreakdown(
                    total=len(todays_news),
                    stock_specific=by_category[NewsCategory.STOCK_SPECIFIC],
                    competitor=by_category[NewsCategory.COMPETITOR],
                    industry=by_category[NewsCategory.INDUSTRY],
                    macro=by_category[NewsCategory.MACRO],
                ),
                top_news=sorted(todays_news, key=lambda a: a.relevance, reverse=True)[
                    :TOP_NEWS_PER_STOCK
                ],
                priority_score=calculate_priority_score(quote, todays_news, analysis),
                alerts=generate_alerts(quote, todays_news, analysis),
            )

        except Exception as e:
            self.logger.error("Failed to build digest entry", symbol=symbol, error=str(e), exc_info=True)
            return DigestError(symbol=symbol, error=str(e))

    async def build_digest(
        self,
        symbols: Optional[Iterable[str]] = None,
        digest_date: Optional[date] = None,
    ) -> Digest:
        """
        Build a digest over a watchlist.

        Args:
            symbols: Symbols to include; defaults to the configured watchlist
            digest_date: UTC date whose news is scored; defaults to today

        Returns:
            Digest with stocks sorted by priority score, highest first
        """
        watchlist = normalize_symbols(symbols or self.settings.watchlist_symbols())
        digest_date = digest_date or datetime.now(timezone.utc).date()

        self.logger.info("Generating digest", symbols=watchlist, date=digest_date.isoformat())

        overview = await self.aggregator.get_market_overview()
        results = await asyncio.gather(
            *(self._digest_symbol(symbol, digest_date, overview) for symbol in watchlist)
        )

        stocks = [r for r in results if isinstance(r, StockDigest)]
        errors = [r for r in results if isinstance(r, DigestError)]
        stocks.sort(key=lambda s: s.priority_score, reverse=True)

        summary = DigestSummary(
            total_stocks=len(stocks),
            stocks_with_news=sum(1 for s in stocks if s.news_breakdown.total > 0),
            high_priority_alerts=sum(
                1 for s in stocks if s.priority_score > HIGH_PRIORITY_THRESHOLD
            ),
            total_news_articles=sum(len(s.top_news) for s in stocks),
            average_priority_score=(
                sum(s.priority_score for s in stocks) / len(stocks) if stocks else 0.0
            ),
        )

        digest = Digest(
            date=digest_date,
            symbols=watchlist,
            summary=summary,
            market_context=MarketContext(
                indices=overview.market_indices,
                overall_direction=market_direction(overview.market_indices),
                top_market_news=overview.top_news[:TOP_MARKET_NEWS],
            ),
            insights=generate_insights(stocks),
            stocks=stocks,
            errors=errors,
        )

        self.logger.info(
            "Digest generated",
            stocks=len(stocks),
            errors=len(errors),
            average_priority=round(summary.average_priority_score, 2),
        )
        return digest

    async def get_priority_alerts(
        self,
        symbols: Optional[Iterable[str]] = None,
        min_priority: Optional[int] = None,
    ) -> List[PriorityAlert]:
        """Symbols scoring at least min_priority over their recent news, highest first."""
        watchlist = normalize_symbols(symbols or self.settings.watchlist_symbols())
        threshold = self.settings.alert_min_priority if min_priority is None else min_priority

        overview = await self.aggregator.get_market_overview()

        async def evaluate(symbol: str) -> Optional[PriorityAlert]:
            try:
                quote, news = await self._fetch(symbol)
                if quote is None:
                    return None
                analysis = await self._correlate(symbol, quote, news, overview)
                score = calculate_priority_score(quote, news, analysis)
                if score < threshold:
                    return None
                return PriorityAlert(
                    symbol=symbol,
                    name=quote.name or symbol,
                    price=quote.price,
                    change_percent=quote.change_percent,
                    priority_score=score,
                    alerts=generate_alerts(quote, news, analysis),
                )
            except Exception as e:
                self.logger.error("Failed to evaluate alerts", symbol=symbol, error=str(e), exc_info=True)
                return None

        results = await asyncio.gather(*(evaluate(symbol) for symbol in watchlist))
        alerts = [r for r in results if r is not None]
        alerts.sort(key=lambda a: a.priority_score, reverse=True)
        return alerts
