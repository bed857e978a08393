"""Business services built on top of the provider registry."""

from .aggregator import DataAggregator
from .classification import NewsClassifier
from .correlation import MarketCorrelator
from .digest import DigestService

__all__ = ["DataAggregator", "DigestService", "MarketCorrelator", "NewsClassifier"]
