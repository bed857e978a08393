"""In-process expiring cache shared by all aggregation calls."""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

from ..config.logging import get_logger

logger = get_logger(__name__)

V = TypeVar("V")


def _freeze(value: Any) -> Hashable:
    """Turn option values into something hashable and order independent."""
    if isinstance(value, dict):
        return tuple(sorted((str(k), _freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_freeze(v) for v in value]
        return tuple(sorted(items, key=repr)) if isinstance(value, (set, frozenset)) else tuple(items)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class CacheKey:
    """Structured cache key: operation, symbol and normalized options."""

    operation: str
    symbol: Optional[str] = None
    options: Tuple[Tuple[str, Hashable], ...] = field(default_factory=tuple)

    @classmethod
    def build(cls, operation: str, symbol: Optional[str] = None, **options: Any) -> "CacheKey":
        """
        Build a key, dropping unset options and sorting the rest.

        Args:
            operation: Aggregator operation the entry belongs to
            symbol: Ticker symbol, upper-cased; None for market-wide data
            **options: Query options that change the result

        Returns:
            CacheKey usable as a dictionary key
        """
        normalized = tuple(
            sorted((name, _freeze(value)) for name, value in options.items() if value is not None)
        )
        return cls(
            operation=operation,
            symbol=symbol.upper() if symbol else None,
            options=normalized,
        )


@dataclass
class CacheEntry(Generic[V]):
    """A cached payload with its creation time and lifetime in seconds."""

    key: CacheKey
    value: V
    created_at: float
    timeout: float

    def is_valid(self, now: float) -> bool:
        return now - self.created_at < self.timeout


class TTLCache(Generic[V]):
    """
    Key/value store with per-entry expiry.

    Expired entries are treated as absent and removed lazily when looked up;
    there is no background sweep and no size bound. Values are expected to
    be immutable so that callers can share them safely.
    """

    def __init__(
        self,
        default_timeout: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_timeout = default_timeout
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry[V]] = {}

    def get(self, key: CacheKey) -> Optional[V]:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss", operation=key.operation, symbol=key.symbol)
            return None

        if not entry.is_valid(self._clock()):
            self._entries.pop(key, None)
            logger.debug("Cache entry expired", operation=key.operation, symbol=key.symbol)
            return None

        logger.debug("Cache hit", operation=key.operation, symbol=key.symbol)
        return entry.value

    def set(self, key: CacheKey, value: V, timeout: Optional[float] = None) -> None:
        """Store a value, replacing any previous entry for the key."""
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            created_at=self._clock(),
            timeout=timeout if timeout is not None else self.default_timeout,
        )

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        """Number of stored entries, including expired ones not yet looked up."""
        return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: CacheKey) -> bool:
        return self.get(key) is not None
