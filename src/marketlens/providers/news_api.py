"""NewsAPI adapter for symbol news and business headlines."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..exceptions import ProviderError, RateLimitedError
from ..models import NewsArticle, ProviderHealth
from .base import MarketNewsProvider, NewsProvider
from .http import HTTPProvider
from .parsing import parse_timestamp

# Free-text search names that match how outlets refer to each company
SEARCH_NAMES = {
    "AAPL": "Apple Inc",
    "TSLA": "Tesla Inc",
    "GOOGL": "Alphabet Google",
    "GOOG": "Alphabet Google",
    "MSFT": "Microsoft Corporation",
    "AMZN": "Amazon.com",
    "META": "Meta Facebook",
    "NVDA": "NVIDIA Corporation",
    "NFLX": "Netflix Inc",
    "AMD": "Advanced Micro Devices",
    "INTC": "Intel Corporation",
    "CRM": "Salesforce",
    "ORCL": "Oracle Corporation",
    "IBM": "International Business Machines",
    "CSCO": "Cisco Systems",
    "ADBE": "Adobe Inc",
    "NOW": "ServiceNow",
    "SNOW": "Snowflake Inc",
    "PLTR": "Palantir",
    "CRWD": "CrowdStrike",
    "ZM": "Zoom",
    "SHOP": "Shopify",
    "SQ": "Block Square",
    "PYPL": "PayPal",
    "V": "Visa Inc",
    "MA": "Mastercard",
    "JPM": "JPMorgan Chase",
    "BAC": "Bank of America",
    "WFC": "Wells Fargo",
    "GS": "Goldman Sachs",
    "MS": "Morgan Stanley",
    "BRK.A": "Berkshire Hathaway",
    "BRK.B": "Berkshire Hathaway",
}


class NewsAPIProvider(HTTPProvider, NewsProvider, MarketNewsProvider):
    name = "news_api"
    display_name = "NewsAPI"
    base_url = "https://newsapi.org/v2"

    async def _request(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._get_json(path, {**params, "apiKey": self.api_key})
        if not isinstance(data, dict):
            raise ProviderError(self.name, "Unexpected payload")
        if data.get("status") == "error":
            if data.get("code") == "rateLimited":
                raise RateLimitedError(self.name, data.get("message", "Rate limited"))
            raise ProviderError(self.name, data.get("message", "API error"))
        return data

    def search_queries(self, symbol: str) -> List[str]:
        """Queries issued per symbol: bare ticker, quoted ticker and company name."""
        queries = [symbol, f'"{symbol}"']
        name = SEARCH_NAMES.get(symbol)
        if name:
            queries.append(name)
        return queries

    async def get_news(
        self,
        symbol: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[NewsArticle]:
        symbol = symbol.upper()
        end = end or datetime.now(timezone.utc)
        start = start or end - timedelta(days=1)

        params: Dict[str, Any] = {
            "from": start.date().isoformat(),
            "to": end.date().isoformat(),
            "language": "en",
            "sortBy": "publishedAt",
        }
        if limit:
            params["pageSize"] = min(limit, 100)

        raw_articles: List[Dict[str, Any]] = []
        try:
            for query in self.search_queries(symbol):
                data = await self._request("/everything", {**params, "q": query})
                raw_articles.extend(data.get("articles") or [])
        except ProviderError as e:
            # keep whatever earlier queries returned
            self.logger.warning("News request failed", symbol=symbol, error=str(e))

        seen = set()
        articles = []
        for raw in raw_articles:
            key = raw.get("url") or raw.get("title")
            if not key or key in seen:
                continue
            seen.add(key)
            article = self._parse_article(raw)
            if article:
                articles.append(article)

        self.logger.debug("Fetched news", symbol=symbol, count=len(articles))
        return articles

    async def get_market_news(self, limit: int = 50) -> List[NewsArticle]:
        try:
            data = await self._request(
                "/top-headlines",
                {"category": "business", "country": "us", "pageSize": limit},
            )
        except ProviderError as e:
            self.logger.warning("Headline request failed", error=str(e))
            return []

        articles = [self._parse_article(raw) for raw in data.get("articles") or []]
        return [article for article in articles if article]

    def _parse_article(self, raw: Dict[str, Any]) -> Optional[NewsArticle]:
        title = raw.get("title")
        if not title or title == "[Removed]":
            return None
        source = raw.get("source") or {}
        return NewsArticle(
            title=title,
            summary=raw.get("description"),
            content=raw.get("content"),
            url=raw.get("url"),
            source_name=source.get("name") or self.display_name,
            author=raw.get("author"),
            published_at=parse_timestamp(raw.get("publishedAt")),
            provider=self.name,
        )

    async def check_health(self) -> ProviderHealth:
        try:
            await self._request("/top-headlines", {"country": "us", "pageSize": 1})
        except RateLimitedError as e:
            return self._health("rate_limited", e.message)
        except ProviderError as e:
            return self._health("error", e.message)
        return self._health("healthy", "Headlines endpoint responding")
