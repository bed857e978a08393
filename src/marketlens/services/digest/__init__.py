"""Watchlist digest and alert scoring."""

from .models import (
    Alert,
    AlertSeverity,
    AlertType,
    CategoryBreakdown,
    Digest,
    DigestError,
    DigestSummary,
    Insight,
    MarketContext,
    MovementSummary,
    PriorityAlert,
    StockDigest,
    StockSnapshot,
)
from .scoring import calculate_priority_score, generate_alerts, generate_insights, market_direction
from .service import DigestService, normalize_symbols

__all__ = [
    "Alert",
    "AlertSeverity",
    "AlertType",
    "CategoryBreakdown",
    "Digest",
    "DigestError",
    "DigestService",
    "DigestSummary",
    "Insight",
    "MarketContext",
    "MovementSummary",
    "PriorityAlert",
    "StockDigest",
    "StockSnapshot",
    "calculate_priority_score",
    "generate_alerts",
    "generate_insights",
    "market_direction",
    "normalize_symbols",
]
