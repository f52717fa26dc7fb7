"""Fixed delay between consecutive item requests."""
import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class RequestPacer:
    """Waits a fixed delay before each request it is asked to pace."""

    def __init__(
        self,
        delay_ms: int,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delay_ms = delay_ms
        self.delay = delay_ms / 1000 if delay_ms > 0 else 0
        self._sleep = sleep

    async def wait(self) -> None:
        """Sleep the configured delay."""
        if self.delay:
            logger.debug(f"Waiting {self.delay_ms}ms before next request")
        await self._sleep(self.delay)
