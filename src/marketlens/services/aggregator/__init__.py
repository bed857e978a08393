"""Provider aggregation service."""

from .dedup import dedup, dedup_key
from .models import ComprehensiveReport
from .service import DataAggregator

__all__ = ["ComprehensiveReport", "DataAggregator", "dedup", "dedup_key"]
