"""Correlation analysis data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from ...models import NewsArticle, NewsCategory


class Alignment(Enum):
    """Sign agreement between two percent changes."""

    SAME = "same"
    OPPOSITE = "opposite"
    NEUTRAL = "neutral"


class CorrelationStrength(Enum):
    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


class DriverType(Enum):
    """Primary explanation chosen for a price move."""

    STOCK_SPECIFIC_NEWS = "stock-specific-news"
    INDUSTRY_SECTOR = "industry-sector"
    MARKET_DRIVEN = "market-driven"
    SECTOR_DRIVEN = "sector-driven"
    UNUSUAL_ACTIVITY = "unusual-activity"
    MACRO_EVENTS = "macro-events"
    UNEXPLAINED_MARKET = "unexplained-market"


@dataclass
class MarketCorrelation:
    coefficient: float
    market_direction: str  # up, down or flat
    market_magnitude: float
    alignment: Alignment
    strength: CorrelationStrength


@dataclass
class SectorCorrelation:
    sector: str
    sector_change: float
    coefficient: float
    alignment: Alignment
    strength: CorrelationStrength
    outperformance: float


@dataclass
class VolumeAnalysis:
    ratio: float
    pattern: str  # very low, low, normal, high, very high or extremely high
    significance: str  # low, normal, medium or high


@dataclass
class NewsAnalysis:
    """Relevant articles grouped by category with their explanatory weight."""

    total_relevant: int
    has_high_impact_news: bool
    categories: Dict[NewsCategory, List[NewsArticle]]
    explanation_power: float

    def count(self, category: NewsCategory) -> int:
        return len(self.categories.get(category, []))


@dataclass
class MovementDriver:
    primary: DriverType
    confidence: float
    reasoning: str


@dataclass
class ContributingFactor:
    type: str
    strength: str
    description: str


@dataclass
class CorrelationAnalysis:
    """Best-effort explanation of why a symbol moved."""

    symbol: str
    price_change: float
    volume: Optional[int]
    market: MarketCorrelation
    sector: Optional[SectorCorrelation]
    volume_analysis: VolumeAnalysis
    news_analysis: NewsAnalysis
    driver: MovementDriver
    explanation: str
    factors: List[ContributingFactor] = field(default_factory=list)
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def confidence(self) -> float:
        return self.driver.confidence
