"""Trading lock that guards a swipe queue while a swap is in flight."""

import asyncio
from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)


class TradingBusyError(RuntimeError):
    """Raised when a trade is attempted while another one is in flight."""
    pass


class TradingLock:
    """Non-waiting async lock for in-flight trades.

    A second decision on the same queue must be refused, not queued behind
    the first, so ``hold`` raises instead of waiting.
    """

    def __init__(self, name: str):
        """Initialize trading lock."""
        self.name = name
        self._lock = asyncio.Lock()
        self._hold_count = 0
        logger.debug(f"Trading lock '{name}' created")

    @property
    def held(self) -> bool:
        """True while a trade holds the lock."""
        return self._lock.locked()

    async def acquire(self) -> None:
        """Acquire the lock or raise if already held."""
        if self._lock.locked():
            raise TradingBusyError(f"Trading lock '{self.name}' already held")
        await self._lock.acquire()
        self._hold_count += 1
        logger.debug(f"Trading lock '{self.name}' acquired (holds: {self._hold_count})")

    def release(self) -> None:
        """Release the lock."""
        if self._lock.locked():
            self._lock.release()
            logger.debug(f"Trading lock '{self.name}' released")

    @asynccontextmanager
    async def hold(self):
        """Context manager holding the lock for one trade."""
        await self.acquire()
        try:
            yield
        finally:
            self.release()

    def hold_count(self) -> int:
        """Total number of trades that have held this lock."""
        return self._hold_count
