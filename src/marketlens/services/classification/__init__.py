"""News relevance classification and daily summaries."""

from .classifier import NewsClassifier
from .keywords import KeywordTables, load_keyword_tables
from .summary import (
    DailySummary,
    KeyEvent,
    NewsBreakdown,
    PriceMovement,
    relevant_articles,
    summarize_day,
)

__all__ = [
    "DailySummary",
    "KeyEvent",
    "KeywordTables",
    "NewsBreakdown",
    "NewsClassifier",
    "PriceMovement",
    "load_keyword_tables",
    "relevant_articles",
    "summarize_day",
]
