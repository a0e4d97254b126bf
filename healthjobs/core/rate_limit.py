import asyncio
import logging

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Bounds how many browser sessions or lookups run at once.

    Scrape adapters open one browser per call, so concurrent detail lookups
    go through one of these instead of fanning out unbounded.
    """

    def __init__(self, max_concurrent: int):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent
        self._semaphore = asyncio.Semaphore(max_concurrent)

    async def acquire(self):
        await self._semaphore.acquire()

    def release(self):
        self._semaphore.release()

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()
