"""Market data records produced by source adapters."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .news import NewsArticle


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DataSource(str, Enum):
    """Provenance tag carried by every record."""

    TWELVE_DATA = "twelve_data"
    YAHOO_FINANCE = "yahoo_finance"
    ALPHA_VANTAGE = "alpha_vantage"
    NEWS_API = "news_api"
    FRED = "fred"
    SYNTHETIC = "synthetic"


class CompanyProfile(BaseModel):
    """Company reference data and valuation ratios."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None
    exchange: Optional[str] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    market_cap: Optional[float] = None
    pe_ratio: Optional[float] = None
    forward_pe: Optional[float] = None
    peg_ratio: Optional[float] = None
    eps: Optional[float] = None
    dividend_yield: Optional[float] = None
    profit_margin: Optional[float] = None
    analyst_target_price: Optional[float] = None
    average_volume: Optional[int] = None
    week52_high: Optional[float] = None
    week52_low: Optional[float] = None
    source: DataSource


class Quote(BaseModel):
    """Point-in-time quote for one symbol. Replaced wholesale on refresh."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    change: float
    change_percent: float
    volume: Optional[int] = None
    previous_close: Optional[float] = None
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    timestamp: datetime = Field(default_factory=utc_now)
    source: DataSource
    profile: Optional[CompanyProfile] = None

    @property
    def is_synthetic(self) -> bool:
        return self.source == DataSource.SYNTHETIC

    @property
    def name(self) -> Optional[str]:
        return self.profile.name if self.profile else None

    @property
    def sector(self) -> Optional[str]:
        return self.profile.sector if self.profile else None

    @property
    def average_volume(self) -> Optional[int]:
        return self.profile.average_volume if self.profile else None


class PriceBar(BaseModel):
    """Single price candle (OHLCV)."""

    model_config = ConfigDict(frozen=True)

    date: date
    timestamp: Optional[datetime] = None
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: float
    volume: Optional[int] = None


class HistoricalSeries(BaseModel):
    """Ordered price history, most recent bar first."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    period: str
    interval: str
    bars: List[PriceBar]
    source: DataSource


class IndexSnapshot(BaseModel):
    """Latest level and move of an index or sector ETF."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: Optional[str] = None
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: float = 0.0
    volume: Optional[int] = None


class EconomicIndicator(BaseModel):
    """Most recent observation of a macro series."""

    model_config = ConfigDict(frozen=True)

    series_id: str
    value: float
    observed_on: date


class MarketOverview(BaseModel):
    """Market-wide context shared by every symbol in a request."""

    model_config = ConfigDict(frozen=True)

    market_indices: Dict[str, IndexSnapshot] = Field(default_factory=dict)
    sector_performance: Dict[str, IndexSnapshot] = Field(default_factory=dict)
    top_news: List[NewsArticle] = Field(default_factory=list)
    economic_indicators: Dict[str, EconomicIndicator] = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=utc_now)

    def average_index_change(self) -> Optional[float]:
        """Mean percent change across the tracked indices, if any."""
        if not self.market_indices:
            return None
        changes = [index.change_percent for index in self.market_indices.values()]
        return sum(changes) / len(changes)


class SearchResult(BaseModel):
    """Symbol search hit."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    short_name: Optional[str] = None
    long_name: Optional[str] = None
    exchange: Optional[str] = None
    quote_type: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None
    score: Optional[float] = None


class ProviderHealth(BaseModel):
    """Result of probing one provider."""

    model_config = ConfigDict(frozen=True)

    service: str
    status: str  # healthy, degraded, rate_limited or error
    message: Optional[str] = None


class ServiceHealthReport(BaseModel):
    """Health of every configured provider plus cache occupancy."""

    model_config = ConfigDict(frozen=True)

    services: List[ProviderHealth]
    cache_size: int
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def status(self) -> str:
        if all(service.status == "healthy" for service in self.services):
            return "healthy"
        return "degraded"
