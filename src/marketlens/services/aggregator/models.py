"""Aggregator output records."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from ...models import CompanyProfile, HistoricalSeries, NewsArticle, Quote
from ..classification import DailySummary


@dataclass
class ComprehensiveReport:
    """Everything known about one symbol, gathered in a single pass."""

    symbol: str
    quote: Quote
    profile: Optional[CompanyProfile]
    news: List[NewsArticle]
    historical: Optional[HistoricalSeries]
    daily_summary: DailySummary
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
