"""ABOUTME: Minimum-interval rate limiter shared by all outbound upstream calls."""

import asyncio
import logging
import time
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_REQUESTS_PER_SECOND = 7.0


class RateLimiter:
    """Spaces consecutive calls at least 1/requests_per_second seconds apart.

    One instance is meant to be shared by every request a process makes.
    The lock makes "read last call, sleep, record new call" a single step,
    so concurrent callers queue up instead of all seeing the same stale
    timestamp.
    """

    def __init__(self, requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")

        self.requests_per_second = requests_per_second
        self.min_request_interval = 1.0 / requests_per_second
        self.last_request_time: Optional[float] = None
        self._rate_limit_lock = asyncio.Lock()

    async def wait(self) -> None:
        """Wait until the next call is allowed, then record it."""
        async with self._rate_limit_lock:
            if self.last_request_time is not None:
                elapsed = time.monotonic() - self.last_request_time
                if elapsed < self.min_request_interval:
                    wait_time = self.min_request_interval - elapsed
                    logger.debug(f"Rate limiting: waiting {wait_time:.3f}s")
                    await asyncio.sleep(wait_time)
            self.last_request_time = time.monotonic()
