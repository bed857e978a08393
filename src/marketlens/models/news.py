"""News article and classification records."""

import hashlib
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NewsCategory(str, Enum):
    """Relevance of an article to a given symbol, strongest first."""

    STOCK_SPECIFIC = "stock-specific"
    COMPETITOR = "competitor"
    INDUSTRY = "industry"
    MACRO = "macro"
    UNRELATED = "unrelated"


class PriceImpact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


class Classification(BaseModel):
    """Result of classifying one article against one (symbol, sector) pair."""

    model_config = ConfigDict(frozen=True)

    category: NewsCategory
    subcategory: str
    relevance: float = Field(ge=0.0, le=1.0)
    sentiment: float = Field(ge=-1.0, le=1.0)
    urgency: float = Field(ge=0.0, le=1.0)
    price_impact: PriceImpact
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str
    affected_competitor: Optional[str] = None


class NewsArticle(BaseModel):
    """A news item as returned by a provider, optionally classified."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str
    summary: Optional[str] = None
    content: Optional[str] = None
    url: Optional[str] = None
    source_name: Optional[str] = None
    author: Optional[str] = None
    published_at: Optional[datetime] = None
    provider: str
    classification: Optional[Classification] = None

    @field_validator("published_at")
    @classmethod
    def ensure_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are taken to be UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="before")
    @classmethod
    def assign_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("id"):
            data = dict(data)
            data["id"] = article_id(data.get("url"), data.get("title") or "", data.get("published_at"))
        return data

    @property
    def body(self) -> str:
        return self.content or self.summary or ""

    @property
    def relevance(self) -> float:
        return self.classification.relevance if self.classification else 0.0

    @property
    def category(self) -> Optional[NewsCategory]:
        return self.classification.category if self.classification else None

    def classified(self, classification: Classification) -> "NewsArticle":
        """Return a copy of this article carrying the given classification."""
        return self.model_copy(update={"classification": classification})


def article_id(url: Optional[str], title: str, published_at: Any = None) -> str:
    """Stable identity from the URL, or from title and timestamp when there is none."""
    if url:
        seed = url
    else:
        if isinstance(published_at, datetime):
            stamp = published_at.isoformat()
        else:
            stamp = str(published_at or "")
        seed = f"{title}|{stamp}"
    return hashlib.sha1(seed.encode("utf-8")).hexdigest()[:16]
