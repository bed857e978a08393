"""Deterministic keyword rule engine for news relevance."""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from ...config.logging import get_logger
from ...models import Classification, NewsArticle, NewsCategory, PriceImpact
from .keywords import Buckets, KeywordTables, load_keyword_tables

logger = get_logger(__name__)

# Articles without a timestamp are treated as a week old
MISSING_TIMESTAMP_HOURS = 168.0
URGENCY_DECAY_HOURS = 168.0


def _first_bucket(text: str, buckets: Buckets) -> Optional[str]:
    for name, words in buckets:
        if any(word in text for word in words):
            return name
    return None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class NewsClassifier:
    """
    Classifies articles against a (symbol, sector) pair.

    The same article can classify differently for different symbols, so
    results are computed per call and never cached on the article.
    """

    def __init__(self, tables: Optional[KeywordTables] = None):
        self.tables = tables or load_keyword_tables()
        self.logger = logger.bind(component="news_classifier")

    def classify(
        self,
        article: NewsArticle,
        symbol: str,
        sector: Optional[str],
        now: Optional[datetime] = None,
    ) -> Classification:
        """
        Score one article for one symbol.

        Args:
            article: Article to classify
            symbol: Ticker the relevance is measured against
            sector: Sector of the symbol, used for industry matching
            now: Reference time for recency; defaults to the current UTC time

        Returns:
            Classification record
        """
        symbol = symbol.upper()
        hours_ago = self.hours_since(article.published_at, now)

        category, subcategory, reason, competitor = self.determine_category(
            article, symbol, sector
        )

        confidence = 0.5
        if category == NewsCategory.STOCK_SPECIFIC:
            confidence += 0.3
        if hours_ago < 24:
            confidence += 0.1
        if len(article.body) > 500:
            confidence += 0.1

        return Classification(
            category=category,
            subcategory=subcategory,
            relevance=self.relevance(article, symbol, hours_ago),
            sentiment=self.sentiment(article),
            urgency=self.urgency(article, hours_ago),
            price_impact=self.price_impact(article),
            confidence=min(confidence, 0.95),
            reason=reason,
            affected_competitor=competitor,
        )

    def classify_all(
        self,
        articles: Iterable[NewsArticle],
        symbol: str,
        sector: Optional[str],
        now: Optional[datetime] = None,
    ) -> List[NewsArticle]:
        """Return copies of the articles with their classification attached."""
        now = now or datetime.now(timezone.utc)
        return [
            article.classified(self.classify(article, symbol, sector, now))
            for article in articles
        ]

    def determine_category(
        self, article: NewsArticle, symbol: str, sector: Optional[str]
    ) -> Tuple[NewsCategory, str, str, Optional[str]]:
        """Priority cascade; returns (category, subcategory, reason, competitor)."""
        text = f"{article.title} {article.body}".lower()
        company = self.tables.company_name(symbol).lower()

        if symbol.lower() in text or company in text:
            subcategory = _first_bucket(text, self.tables.stock_buckets) or "general"
            return (
                NewsCategory.STOCK_SPECIFIC,
                subcategory,
                f"Direct mention of {symbol} with {subcategory} context",
                None,
            )

        for competitor in self.tables.competitors_of(symbol):
            if competitor.lower() in text:
                return (
                    NewsCategory.COMPETITOR,
                    "peer-impact",
                    f"Competitor {competitor} mentioned",
                    competitor,
                )

        if any(word in text for word in self.tables.keywords_for_sector(sector)):
            subcategory = _first_bucket(text, self.tables.industry_buckets) or "sector-general"
            return (
                NewsCategory.INDUSTRY,
                subcategory,
                f"{sector} industry relevance - {subcategory}",
                None,
            )

        macro = _first_bucket(text, self.tables.macro_buckets)
        if macro:
            return NewsCategory.MACRO, macro, f"Market-wide {macro} event", None

        return NewsCategory.UNRELATED, "other", "No clear relevance detected", None

    def relevance(self, article: NewsArticle, symbol: str, hours_ago: float) -> float:
        title = article.title.lower()
        body = article.body.lower()
        ticker = symbol.lower()
        company = self.tables.company_name(symbol).lower()

        score = 0.0
        if ticker in title:
            score += 0.8
        if ticker in body:
            score += 0.3
        if company in title:
            score += 0.7
        if company in body:
            score += 0.2
        if hours_ago < 24:
            score += 0.1
        if hours_ago < 6:
            score += 0.1
        return min(score, 1.0)

    def sentiment(self, article: NewsArticle) -> float:
        """0.1 per positive keyword occurrence minus 0.1 per negative one."""
        text = f"{article.title} {article.body}".lower()
        positive = sum(text.count(word) for word in self.tables.positive_words)
        negative = sum(text.count(word) for word in self.tables.negative_words)
        return _clamp((positive - negative) * 0.1, -1.0, 1.0)

    def urgency(self, article: NewsArticle, hours_ago: float) -> float:
        title = article.title.lower()
        urgency = 1.0 - hours_ago / URGENCY_DECAY_HOURS
        for boost, words in self.tables.urgency_boosts:
            if any(word in title for word in words):
                urgency += boost
        return _clamp(urgency, 0.0, 1.0)

    def price_impact(self, article: NewsArticle) -> PriceImpact:
        text = f"{article.title} {article.body}".lower()
        tier = _first_bucket(text, self.tables.impact_tiers)
        return PriceImpact(tier) if tier else PriceImpact.UNKNOWN

    @staticmethod
    def hours_since(published_at: Optional[datetime], now: Optional[datetime] = None) -> float:
        if published_at is None:
            return MISSING_TIMESTAMP_HOURS
        now = now or datetime.now(timezone.utc)
        return (now - published_at).total_seconds() / 3600
