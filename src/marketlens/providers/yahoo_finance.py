"""Yahoo Finance adapter built on yfinance."""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

import pandas as pd
import yfinance as yf

from ..exceptions import ProviderError, ProviderNotFoundError, ProviderUnavailableError
from ..models import (
    CompanyProfile,
    DataSource,
    HistoricalSeries,
    IndexSnapshot,
    NewsArticle,
    PriceBar,
    ProviderHealth,
    Quote,
    SearchResult,
)
from .base import (
    HistoricalProvider,
    MarketDataProvider,
    NewsProvider,
    ProfileProvider,
    QuoteProvider,
    SearchProvider,
)
from .parsing import as_utc, parse_timestamp, to_float, to_int

T = TypeVar("T")

MARKET_INDICES = {
    "^GSPC": "SP500",
    "^DJI": "DOW",
    "^IXIC": "NASDAQ",
    "^RUT": "RUSSELL2000",
}

SECTOR_ETFS = {
    "XLK": "Technology",
    "XLF": "Financial",
    "XLV": "Healthcare",
    "XLE": "Energy",
    "XLI": "Industrial",
    "XLY": "Consumer Discretionary",
    "XLP": "Consumer Staples",
    "XLU": "Utilities",
    "XLB": "Materials",
    "XLRE": "Real Estate",
    "XLC": "Communication Services",
}


class YahooFinanceProvider(
    QuoteProvider,
    HistoricalProvider,
    ProfileProvider,
    SearchProvider,
    MarketDataProvider,
    NewsProvider,
):
    """Keyless provider; always participates."""

    name = "yahoo_finance"
    display_name = "Yahoo Finance"

    async def _call(self, func: Callable[..., T], *args: Any) -> T:
        """Run a blocking yfinance call in a worker thread, bounded by the timeout."""
        await self.rate_limiter.await_turn()
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ProviderUnavailableError(self.name, "Request timed out") from e
        except Exception as e:
            raise ProviderError(self.name, str(e)) from e

    @staticmethod
    def _fetch_info(symbol: str) -> Dict[str, Any]:
        return yf.Ticker(symbol).info or {}

    async def get_quote(self, symbol: str) -> Optional[Quote]:
        symbol = symbol.upper()
        try:
            info = await self._call(self._fetch_info, symbol)
            price = to_float(info.get("regularMarketPrice") or info.get("currentPrice"))
            if price is None:
                raise ProviderNotFoundError(self.name, symbol)
        except ProviderError as e:
            self.logger.warning("Quote request failed", symbol=symbol, error=str(e))
            return None

        previous_close = to_float(
            info.get("regularMarketPreviousClose") or info.get("previousClose")
        )
        change = to_float(info.get("regularMarketChange"))
        if change is None:
            change = price - previous_close if previous_close else 0.0
        change_percent = to_float(info.get("regularMarketChangePercent"))
        if change_percent is None:
            change_percent = change / previous_close * 100 if previous_close else 0.0

        return Quote(
            symbol=symbol,
            price=price,
            change=change,
            change_percent=change_percent,
            volume=to_int(info.get("regularMarketVolume") or info.get("volume")),
            previous_close=previous_close,
            open=to_float(info.get("regularMarketOpen") or info.get("open")),
            high=to_float(info.get("regularMarketDayHigh") or info.get("dayHigh")),
            low=to_float(info.get("regularMarketDayLow") or info.get("dayLow")),
            source=DataSource.YAHOO_FINANCE,
            profile=self._parse_profile(symbol, info),
        )

    def _parse_profile(self, symbol: str, info: Dict[str, Any]) -> CompanyProfile:
        return CompanyProfile(
            symbol=info.get("symbol", symbol),
            name=info.get("longName") or info.get("shortName"),
            sector=info.get("sector"),
            industry=info.get("industry"),
            exchange=info.get("exchange"),
            currency=info.get("currency"),
            description=info.get("longBusinessSummary"),
            market_cap=to_float(info.get("marketCap")),
            pe_ratio=to_float(info.get("trailingPE")),
            forward_pe=to_float(info.get("forwardPE")),
            eps=to_float(info.get("trailingEps")),
            dividend_yield=to_float(info.get("dividendYield")),
            profit_margin=to_float(info.get("profitMargins")),
            analyst_target_price=to_float(info.get("targetMeanPrice")),
            average_volume=to_int(info.get("averageVolume")),
            week52_high=to_float(info.get("fiftyTwoWeekHigh")),
            week52_low=to_float(info.get("fiftyTwoWeekLow")),
            source=DataSource.YAHOO_FINANCE,
        )

    async def get_profile(self, symbol: str) -> Optional[CompanyProfile]:
        symbol = symbol.upper()
        try:
            info = await self._call(self._fetch_info, symbol)
        except ProviderError as e:
            self.logger.warning("Profile request failed", symbol=symbol, error=str(e))
            return None

        if not (info.get("longName") or info.get("shortName")):
            return None
        return self._parse_profile(symbol, info)

    @staticmethod
    def _fetch_history(symbol: str, period: str, interval: str) -> pd.DataFrame:
        return yf.Ticker(symbol).history(period=period, interval=interval)

    async def get_historical(
        self, symbol: str, period: str = "1mo", interval: str = "1d"
    ) -> Optional[HistoricalSeries]:
        symbol = symbol.upper()
        try:
            frame = await self._call(self._fetch_history, symbol, period, interval)
        except ProviderError as e:
            self.logger.warning("Historical request failed", symbol=symbol, error=str(e))
            return None

        if frame is None or frame.empty:
            return None

        bars = []
        for timestamp, row in frame.iterrows():
            if pd.isna(row.get("Close")):
                continue
            moment = pd.Timestamp(timestamp).to_pydatetime()
            bars.append(
                PriceBar(
                    date=moment.date(),
                    timestamp=moment,
                    open=to_float(row.get("Open")),
                    high=to_float(row.get("High")),
                    low=to_float(row.get("Low")),
                    close=float(row["Close"]),
                    volume=to_int(row.get("Volume")),
                )
            )

        if not bars:
            return None

        bars.reverse()
        return HistoricalSeries(
            symbol=symbol,
            period=period,
            interval=interval,
            bars=bars,
            source=DataSource.YAHOO_FINANCE,
        )

    @staticmethod
    def _fetch_search(query: str, limit: int) -> List[Dict[str, Any]]:
        return yf.Search(query, max_results=limit, news_count=0).quotes or []

    async def search(self, query: str, limit: int = 10) -> List[SearchResult]:
        try:
            quotes = await self._call(self._fetch_search, query, limit)
        except ProviderError as e:
            self.logger.warning("Search request failed", query=query, error=str(e))
            return []

        return [
            SearchResult(
                symbol=item["symbol"],
                short_name=item.get("shortname"),
                long_name=item.get("longname"),
                exchange=item.get("exchange"),
                quote_type=item.get("quoteType"),
                sector=item.get("sector"),
                industry=item.get("industry"),
                score=to_float(item.get("score")),
            )
            for item in quotes
            if item.get("symbol")
        ]

    @staticmethod
    def _fetch_snapshots(symbols: Dict[str, str]) -> List[IndexSnapshot]:
        snapshots = []
        for symbol, name in symbols.items():
            fast_info = yf.Ticker(symbol).fast_info
            price = to_float(fast_info.last_price)
            previous_close = to_float(fast_info.previous_close)
            if price is None:
                continue
            change = price - previous_close if previous_close else 0.0
            snapshots.append(
                IndexSnapshot(
                    symbol=symbol,
                    name=name,
                    price=price,
                    change=change,
                    change_percent=change / previous_close * 100 if previous_close else 0.0,
                    volume=to_int(fast_info.last_volume),
                )
            )
        return snapshots

    async def get_index_snapshots(self) -> Dict[str, IndexSnapshot]:
        try:
            snapshots = await self._call(self._fetch_snapshots, MARKET_INDICES)
        except ProviderError as e:
            self.logger.warning("Index request failed", error=str(e))
            return {}
        return {MARKET_INDICES[snapshot.symbol]: snapshot for snapshot in snapshots}

    async def get_sector_snapshots(self) -> Dict[str, IndexSnapshot]:
        try:
            snapshots = await self._call(self._fetch_snapshots, SECTOR_ETFS)
        except ProviderError as e:
            self.logger.warning("Sector request failed", error=str(e))
            return {}
        return {snapshot.symbol: snapshot for snapshot in snapshots}

    @staticmethod
    def _fetch_news(symbol: str) -> List[Dict[str, Any]]:
        return yf.Ticker(symbol).news or []

    async def get_news(
        self,
        symbol: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[NewsArticle]:
        symbol = symbol.upper()
        start, end = as_utc(start), as_utc(end)
        try:
            items = await self._call(self._fetch_news, symbol)
        except ProviderError as e:
            self.logger.warning("News request failed", symbol=symbol, error=str(e))
            return []

        articles = []
        for item in items:
            article = self._parse_news_item(item)
            if article is None:
                continue
            if article.published_at:
                if start and article.published_at < start:
                    continue
                if end and article.published_at > end:
                    continue
            articles.append(article)

        return articles[:limit] if limit else articles

    def _parse_news_item(self, item: Dict[str, Any]) -> Optional[NewsArticle]:
        # Newer yfinance releases nest the article under "content"
        content = item.get("content")
        if isinstance(content, dict):
            url = (content.get("canonicalUrl") or {}).get("url") or (
                content.get("clickThroughUrl") or {}
            ).get("url")
            title = content.get("title")
            if not title:
                return None
            return NewsArticle(
                title=title,
                summary=content.get("summary") or content.get("description"),
                url=url,
                source_name=(content.get("provider") or {}).get("displayName"),
                published_at=parse_timestamp(content.get("pubDate")),
                provider=self.name,
            )

        title = item.get("title")
        if not title:
            return None
        return NewsArticle(
            title=title,
            summary=item.get("summary"),
            url=item.get("link"),
            source_name=item.get("publisher"),
            published_at=parse_timestamp(item.get("providerPublishTime")),
            provider=self.name,
        )

    async def check_health(self) -> ProviderHealth:
        quote = await self.get_quote("AAPL")
        if quote:
            return self._health("healthy", "Quote data available")
        return self._health("error", "No quote returned")
