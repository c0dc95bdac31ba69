import asyncio
import logging
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

from tripscan.models.photo import Coordinate, PlaceRecord
from tripscan.utils.geo import round_coordinate_key

from .base import Geocoder

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Rolling-window limiter: at most `limit` requests per `window_sec`.

    `reserve()` records the request and returns how long the caller should
    wait before sending it, capped at `max_wait_sec`.
    """

    def __init__(
        self,
        limit: int = 30,
        window_sec: float = 60.0,
        max_wait_sec: float = 15.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_sec = window_sec
        self.max_wait_sec = max_wait_sec
        self.clock = clock
        self._timestamps: Deque[float] = deque()
        self._lock = asyncio.Lock()

    async def reserve(self) -> float:
        async with self._lock:
            now = self.clock()
            while self._timestamps and self._timestamps[0] <= now - self.window_sec:
                self._timestamps.popleft()

            wait = 0.0
            if len(self._timestamps) >= self.limit:
                oldest = self._timestamps[0]
                wait = max(0.0, min(self.max_wait_sec, self.window_sec - (now - oldest)))

            self._timestamps.append(now)
            return wait


class CachedGeocoder(Geocoder):
    """Caches another geocoder by rounded coordinate and rate limits cache misses."""

    def __init__(
        self,
        inner: Geocoder,
        rate_limiter: Optional[RateLimiter] = None,
        decimals: int = 3,
        sleep: Callable[[float], "asyncio.Future"] = asyncio.sleep,
    ):
        self.inner = inner
        self.rate_limiter = rate_limiter or RateLimiter()
        self.decimals = decimals
        self._sleep = sleep
        self._cache: Dict[str, PlaceRecord] = {}

    def cache_key(self, coord: Coordinate) -> str:
        return round_coordinate_key(coord, self.decimals)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    async def reverse(self, coord: Coordinate) -> PlaceRecord:
        key = self.cache_key(coord)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        wait = await self.rate_limiter.reserve()
        if wait > 0:
            logger.info(f"Geocode rate limit reached; waiting {wait:.1f}s")
            await self._sleep(wait)

        place = await self.inner.reverse(coord)
        self._cache[key] = place
        return place

    async def aclose(self) -> None:
        await self.inner.aclose()
