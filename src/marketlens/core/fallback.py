"""Ordered "first success wins" lookup across interchangeable providers."""

from typing import Awaitable, Callable, Optional, Sequence, Tuple, TypeVar

from ..config.logging import get_logger

logger = get_logger(__name__)

P = TypeVar("P")
T = TypeVar("T")


async def first_available(
    providers: Sequence[P],
    fetch: Callable[[P], Awaitable[Optional[T]]],
    operation: str = "lookup",
) -> Optional[Tuple[P, T]]:
    """
    Consult providers in priority order and return the first non-empty result.

    Providers are tried one at a time; a provider that returns None (or an
    empty collection) or raises hands over to the next one.

    Args:
        providers: Capability implementations in priority order
        fetch: Coroutine function calling the capability on one provider
        operation: Name used in log events

    Returns:
        (provider, result) for the first success, or None if all came up empty
    """
    for provider in providers:
        name = getattr(provider, "name", type(provider).__name__)
        try:
            result = await fetch(provider)
        except Exception as e:
            logger.warning(
                "Provider raised during fallback",
                operation=operation,
                provider=name,
                error=str(e),
            )
            continue

        if result is None:
            logger.debug("Provider returned no data", operation=operation, provider=name)
            continue
        if isinstance(result, (list, tuple, dict)) and not result:
            logger.debug("Provider returned no data", operation=operation, provider=name)
            continue

        return provider, result

    logger.info("No provider produced data", operation=operation)
    return None
