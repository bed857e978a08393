"""Per-symbol daily summary of price movement and classified news."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence

from ...models import NewsArticle, NewsCategory, Quote

# Articles at or below this relevance are ignored when summarizing
RELEVANT_THRESHOLD = 0.3


@dataclass
class PriceMovement:
    direction: str  # up, down or flat
    magnitude: float
    significance: str  # high, medium, low or minimal


@dataclass
class NewsBreakdown:
    stock_specific: int = 0
    competitor: int = 0
    industry: int = 0
    macro: int = 0
    total_relevant: int = 0


@dataclass
class KeyEvent:
    title: str
    impact: Optional[str] = None
    competitor: Optional[str] = None


@dataclass
class DailySummary:
    """What moved a symbol today and which news explains it."""

    symbol: str
    date: date
    price_movement: PriceMovement
    news_analysis: NewsBreakdown
    movement_explanation: str
    key_events: List[KeyEvent] = field(default_factory=list)
    sentiment: float = 0.0
    sentiment_label: str = "neutral"


def movement_significance(magnitude: float) -> str:
    if magnitude > 5:
        return "high"
    if magnitude > 2:
        return "medium"
    if magnitude > 0.5:
        return "low"
    return "minimal"


def sentiment_label(score: float) -> str:
    if score > 0.2:
        return "positive"
    if score < -0.2:
        return "negative"
    return "neutral"


def relevant_articles(news: Sequence[NewsArticle]) -> List[NewsArticle]:
    return [article for article in news if article.relevance > RELEVANT_THRESHOLD]


def summarize_day(
    symbol: str,
    quote: Quote,
    news: Sequence[NewsArticle],
    today: Optional[date] = None,
) -> DailySummary:
    """
    Summarize a symbol's day from its quote and classified news.

    The explanation follows the strongest news category present among
    relevant articles (stock-specific, competitor, industry, macro); without
    relevant news a move above 2% is attributed to the broader market.
    """
    change = quote.change_percent
    relevant = relevant_articles(news)

    by_category = {category: [] for category in NewsCategory}
    for article in relevant:
        by_category[article.category].append(article)

    stock_news = by_category[NewsCategory.STOCK_SPECIFIC]
    competitor_news = by_category[NewsCategory.COMPETITOR]
    key_events: List[KeyEvent] = []

    if stock_news:
        explanation = f"Primary driver: Company-specific news ({len(stock_news)} articles)"
        key_events = [
            KeyEvent(title=a.title, impact=a.classification.price_impact.value)
            for a in stock_news[:3]
        ]
    elif competitor_news:
        explanation = "Likely driver: Competitor developments affecting sector"
        key_events = [
            KeyEvent(title=a.title, competitor=a.classification.affected_competitor)
            for a in competitor_news[:2]
        ]
    elif by_category[NewsCategory.INDUSTRY]:
        explanation = "Likely driver: Industry-wide developments"
    elif by_category[NewsCategory.MACRO]:
        explanation = "Likely driver: Market-wide macro events"
    elif abs(change) > 2:
        explanation = "No specific news found - likely macro/market driven movement"
    else:
        explanation = "Normal trading activity with minimal news impact"

    sentiment = (
        sum(a.classification.sentiment for a in relevant) / len(relevant) if relevant else 0.0
    )

    return DailySummary(
        symbol=symbol.upper(),
        date=today or datetime.now(timezone.utc).date(),
        price_movement=PriceMovement(
            direction="up" if change > 0 else "down" if change < 0 else "flat",
            magnitude=abs(change),
            significance=movement_significance(abs(change)),
        ),
        news_analysis=NewsBreakdown(
            stock_specific=len(stock_news),
            competitor=len(competitor_news),
            industry=len(by_category[NewsCategory.INDUSTRY]),
            macro=len(by_category[NewsCategory.MACRO]),
            total_relevant=len(relevant),
        ),
        movement_explanation=explanation,
        key_events=key_events,
        sentiment=sentiment,
        sentiment_label=sentiment_label(sentiment),
    )
