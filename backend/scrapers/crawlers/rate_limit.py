"""Per-domain request spacing shared by every fetch in the process."""

import asyncio
import time
from typing import Awaitable, Callable, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class DomainRateLimiter:
    """
    Enforces a minimum interval between requests to the same domain.

    Keeps the ``domain -> last request time`` map. The timestamp is
    recorded as soon as the wait finishes, before the network call
    starts, so a slow fetch cannot cause a burst on the next one.
    Requests to different domains never wait on each other.

    Args:
        min_interval: Minimum seconds between two requests to one domain
        clock: Monotonic time source (injectable for tests)
        sleep: Coroutine used to suspend (injectable for tests)
    """

    def __init__(
        self,
        min_interval: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: Dict[str, float] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def last_request(self, domain: str) -> Optional[float]:
        """Timestamp of the last request to ``domain`` (None if never contacted)."""
        return self._last_request.get(domain)

    async def wait(self, domain: str) -> None:
        """Suspend until ``domain`` may be requested again, then claim the slot."""
        lock = self._locks.setdefault(domain, asyncio.Lock())
        async with lock:
            last = self._last_request.get(domain)
            if last is not None:
                elapsed = self._clock() - last
                if elapsed < self.min_interval:
                    delay = self.min_interval - elapsed
                    logger.debug(f"Rate limit: waiting {delay:.2f}s before next request to {domain}")
                    await self._sleep(delay)
            self._last_request[domain] = self._clock()
