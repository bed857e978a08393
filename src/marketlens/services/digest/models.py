"""Digest and alert data models."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from ...models import IndexSnapshot, NewsArticle


class AlertType(Enum):
    """Types of watchlist alerts."""

    PRICE_MOVEMENT = "price_movement"
    HIGH_IMPACT_NEWS = "high_impact_news"
    NEWS_VOLUME = "news_volume"
    VOLUME_SPIKE = "volume_spike"


class AlertSeverity(Enum):
    HIGH = "high"
    MEDIUM = "medium"


@dataclass
class Alert:
    """Alert data container. Generated per request, never stored."""

    symbol: str
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    explanation: str


@dataclass
class Insight:
    """Observation spanning several symbols of a digest."""

    type: str  # market_correlation, sector_movement or high_priority
    message: str
    significance: str
    symbols: List[str] = field(default_factory=list)


@dataclass
class StockSnapshot:
    name: str
    price: float
    change: float
    change_percent: float
    volume: Optional[int]
    sector: Optional[str]
    synthetic: bool = False


@dataclass
class MovementSummary:
    explanation: str
    confidence: float
    primary_driver: str


@dataclass
class CategoryBreakdown:
    total: int = 0
    stock_specific: int = 0
    competitor: int = 0
    industry: int = 0
    macro: int = 0


@dataclass
class StockDigest:
    """One symbol's entry in a digest."""

    symbol: str
    stock: StockSnapshot
    movement: MovementSummary
    news_breakdown: CategoryBreakdown
    top_news: List[NewsArticle]
    priority_score: int
    alerts: List[Alert]


@dataclass
class DigestError:
    symbol: str
    error: str


@dataclass
class DigestSummary:
    total_stocks: int
    stocks_with_news: int
    high_priority_alerts: int
    total_news_articles: int
    average_priority_score: float


@dataclass
class MarketContext:
    indices: Dict[str, IndexSnapshot]
    overall_direction: str  # bullish, bearish or neutral
    top_market_news: List[NewsArticle]


@dataclass
class Digest:
    """Aggregate report over a watchlist, recomputed on every request."""

    date: date
    symbols: List[str]
    summary: DigestSummary
    market_context: MarketContext
    insights: List[Insight]
    stocks: List[StockDigest]
    errors: List[DigestError] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class PriorityAlert:
    symbol: str
    name: str
    price: float
    change_percent: float
    priority_score: int
    alerts: List[Alert]
