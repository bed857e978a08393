"""Movement driver analysis."""

from .correlator import SECTOR_PROXIES, MarketCorrelator, sector_etf
from .models import (
    Alignment,
    ContributingFactor,
    CorrelationAnalysis,
    CorrelationStrength,
    DriverType,
    MarketCorrelation,
    MovementDriver,
    NewsAnalysis,
    SectorCorrelation,
    VolumeAnalysis,
)

__all__ = [
    "Alignment",
    "ContributingFactor",
    "CorrelationAnalysis",
    "CorrelationStrength",
    "DriverType",
    "MarketCorrelation",
    "MarketCorrelator",
    "MovementDriver",
    "NewsAnalysis",
    "SECTOR_PROXIES",
    "SectorCorrelation",
    "VolumeAnalysis",
    "sector_etf",
]
