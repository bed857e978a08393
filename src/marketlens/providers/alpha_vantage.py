"""Alpha Vantage adapter: news sentiment feed, time series and company overview."""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..exceptions import ProviderError, ProviderNotFoundError, RateLimitedError
from ..models import (
    CompanyProfile,
    DataSource,
    HistoricalSeries,
    NewsArticle,
    PriceBar,
    ProviderHealth,
)
from .base import HistoricalProvider, NewsProvider, ProfileProvider
from .http import HTTPProvider
from .parsing import as_utc, parse_timestamp, to_float, to_int

TIME_SERIES_FUNCTIONS = {
    "1d": "TIME_SERIES_DAILY",
    "1wk": "TIME_SERIES_WEEKLY",
    "1mo": "TIME_SERIES_MONTHLY",
}

PERIOD_DAYS = {
    "1d": 1,
    "5d": 5,
    "1mo": 30,
    "3mo": 90,
    "6mo": 180,
    "1y": 365,
    "2y": 730,
    "5y": 1825,
    "10y": 3650,
}

# compact output holds the latest 100 data points
COMPACT_DAYS = 100


class AlphaVantageProvider(HTTPProvider, NewsProvider, HistoricalProvider, ProfileProvider):
    """Keyed provider with a strict free-tier quota (5 calls per minute)."""

    name = "alpha_vantage"
    display_name = "Alpha Vantage"
    base_url = "https://www.alphavantage.co/query"

    async def _query(self, function: str, **params: Any) -> Dict[str, Any]:
        data = await self._get_json(params={"function": function, "apikey": self.api_key, **params})
        if not isinstance(data, dict):
            raise ProviderError(self.name, "Unexpected payload")
        # Quota exhaustion is reported in-band with HTTP 200
        if "Note" in data or "Information" in data:
            raise RateLimitedError(self.name, data.get("Note") or data.get("Information"))
        if "Error Message" in data:
            raise ProviderError(self.name, data["Error Message"])
        return data

    async def get_news(
        self,
        symbol: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[NewsArticle]:
        symbol = symbol.upper()
        start = as_utc(start) or datetime.now(timezone.utc) - timedelta(days=7)
        end = as_utc(end)
        params: Dict[str, Any] = {
            "tickers": symbol,
            "time_from": start.strftime("%Y%m%dT%H%M"),
            "sort": "LATEST",
            "limit": limit or 50,
        }
        if end:
            params["time_to"] = end.strftime("%Y%m%dT%H%M")

        try:
            data = await self._query("NEWS_SENTIMENT", **params)
        except ProviderError as e:
            self.logger.warning("News request failed", symbol=symbol, error=str(e))
            return []

        articles = []
        for item in data.get("feed") or []:
            if not item.get("title"):
                continue
            authors = item.get("authors") or []
            articles.append(
                NewsArticle(
                    title=item["title"],
                    summary=item.get("summary"),
                    url=item.get("url"),
                    source_name=item.get("source"),
                    author=", ".join(authors) if authors else None,
                    published_at=parse_timestamp(item.get("time_published")),
                    provider=self.name,
                )
            )

        self.logger.debug("Fetched news", symbol=symbol, count=len(articles))
        return articles

    async def get_historical(
        self, symbol: str, period: str = "1mo", interval: str = "1d"
    ) -> Optional[HistoricalSeries]:
        symbol = symbol.upper()
        function = TIME_SERIES_FUNCTIONS.get(interval)
        if function is None:
            self.logger.debug("Unsupported interval", symbol=symbol, interval=interval)
            return None

        days = PERIOD_DAYS.get(period, PERIOD_DAYS["1mo"])
        outputsize = "compact" if days <= COMPACT_DAYS else "full"

        try:
            data = await self._query(function, symbol=symbol, outputsize=outputsize)
            series_key = next((key for key in data if "Time Series" in key), None)
            if series_key is None or not data[series_key]:
                raise ProviderNotFoundError(self.name, symbol)
            bars = self._parse_bars(data[series_key], date.today() - timedelta(days=days))
        except ProviderError as e:
            self.logger.warning("Historical request failed", symbol=symbol, error=str(e))
            return None

        if not bars:
            return None

        return HistoricalSeries(
            symbol=symbol,
            period=period,
            interval=interval,
            bars=bars,
            source=DataSource.ALPHA_VANTAGE,
        )

    def _parse_bars(self, series: Dict[str, Dict[str, str]], cutoff: date) -> List[PriceBar]:
        bars = []
        for day, values in series.items():
            try:
                bar_date = date.fromisoformat(day[:10])
            except ValueError:
                continue
            close = to_float(values.get("4. close"))
            if close is None or bar_date < cutoff:
                continue
            bars.append(
                PriceBar(
                    date=bar_date,
                    open=to_float(values.get("1. open")),
                    high=to_float(values.get("2. high")),
                    low=to_float(values.get("3. low")),
                    close=close,
                    volume=to_int(values.get("5. volume")),
                )
            )
        bars.sort(key=lambda bar: bar.date, reverse=True)
        return bars

    async def get_profile(self, symbol: str) -> Optional[CompanyProfile]:
        symbol = symbol.upper()
        try:
            data = await self._query("OVERVIEW", symbol=symbol)
            if not data.get("Symbol"):
                raise ProviderNotFoundError(self.name, symbol)
        except ProviderError as e:
            self.logger.warning("Overview request failed", symbol=symbol, error=str(e))
            return None

        return CompanyProfile(
            symbol=data["Symbol"],
            name=data.get("Name"),
            sector=_title_case(data.get("Sector")),
            industry=_title_case(data.get("Industry")),
            exchange=data.get("Exchange"),
            currency=data.get("Currency"),
            description=data.get("Description"),
            market_cap=to_float(data.get("MarketCapitalization")),
            pe_ratio=to_float(data.get("PERatio")),
            forward_pe=to_float(data.get("ForwardPE")),
            peg_ratio=to_float(data.get("PEGRatio")),
            eps=to_float(data.get("EPS")),
            dividend_yield=to_float(data.get("DividendYield")),
            profit_margin=to_float(data.get("ProfitMargin")),
            analyst_target_price=to_float(data.get("AnalystTargetPrice")),
            week52_high=to_float(data.get("52WeekHigh")),
            week52_low=to_float(data.get("52WeekLow")),
            source=DataSource.ALPHA_VANTAGE,
        )

    async def check_health(self) -> ProviderHealth:
        try:
            data = await self._query("GLOBAL_QUOTE", symbol="AAPL")
        except RateLimitedError as e:
            return self._health("rate_limited", e.message)
        except ProviderError as e:
            return self._health("error", e.message)

        if data.get("Global Quote"):
            return self._health("healthy", "Quote endpoint responding")
        return self._health("degraded", "Empty quote returned")


def _title_case(value: Optional[str]) -> Optional[str]:
    """Alpha Vantage reports sectors upper-cased ("TECHNOLOGY")."""
    if not value or value == "None":
        return None
    return value.title() if value.isupper() else value
