"""
MarketLens - stock market data aggregation and news analysis.

Combines quotes, history and news from several market data providers,
classifies news by relevance to a symbol and explains price moves.
"""

from .services import DataAggregator, DigestService, MarketCorrelator, NewsClassifier

__version__ = "0.1.0"

__all__ = [
    "DataAggregator",
    "DigestService",
    "MarketCorrelator",
    "NewsClassifier",
    "__version__",
]
