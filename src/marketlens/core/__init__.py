"""Shared infrastructure: expiring cache, rate limiting and provider fallback."""

from .cache import CacheKey, TTLCache
from .fallback import first_available
from .rate_limiter import RateLimiter

__all__ = ["CacheKey", "TTLCache", "RateLimiter", "first_available"]
