"""Cross-provider duplicate article removal."""

import re
from typing import Iterable, List

from ...models import NewsArticle

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")
TITLE_KEY_LENGTH = 50


def dedup_key(article: NewsArticle) -> str:
    """URL when present, else the title lowercased, stripped to [a-z0-9] and truncated."""
    if article.url:
        return article.url
    return _NON_ALPHANUMERIC.sub("", article.title.lower())[:TITLE_KEY_LENGTH]


def dedup(articles: Iterable[NewsArticle]) -> List[NewsArticle]:
    """
    Drop duplicate articles, keeping the first occurrence.

    Input order reflects provider fan-out order, so it decides which
    provider's copy of a duplicated article survives.
    """
    seen = set()
    unique = []
    for article in articles:
        key = dedup_key(article)
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique
