"""Per-provider request spacing."""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from ..config.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Sequential gate enforcing a minimum interval between granted turns.

    One instance exists per provider and is shared by reference with that
    provider's adapter, so waiting here never delays other providers. There
    is no burst allowance.
    """

    def __init__(
        self,
        name: str,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.name = name
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_turn: Optional[float] = None
        self._lock = asyncio.Lock()
        self.logger = logger.bind(provider=name)

    async def await_turn(self) -> None:
        """Block until min_interval has passed since the last granted turn."""
        async with self._lock:
            if self._last_turn is not None:
                wait = self.min_interval - (self._clock() - self._last_turn)
                if wait > 0:
                    self.logger.debug("Rate limit wait", wait_seconds=round(wait, 3))
                    await self._sleep(wait)
            self._last_turn = self._clock()

    @property
    def last_turn(self) -> Optional[float]:
        return self._last_turn
