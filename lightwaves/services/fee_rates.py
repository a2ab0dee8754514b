"""
Fee-rate snapshot cache.

The recommended fee tiers are cached process-wide for a short TTL. The cache
stores whole immutable snapshots, so readers never see a partial update.
Refresh on a miss is single-flight: concurrent requests during a miss share
one upstream call.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from cachetools import TTLCache

from lightwaves.clients.fees import FeeSourceClient
from lightwaves.models.fees import FeeSnapshot

logger = logging.getLogger(__name__)

DEFAULT_FEE_TTL_SECONDS = 30.0


def fee_cache(
    ttl: float = DEFAULT_FEE_TTL_SECONDS,
    timer: Callable[[], float] = time.monotonic,
) -> TTLCache:
    """Single-entry snapshot cache; ``timer`` is injectable for tests."""
    return TTLCache(maxsize=1, ttl=ttl, timer=timer)


class FeeRateService:
    """Serves fee snapshots from cache, refreshing from the fee source on expiry."""

    CACHE_KEY = "feeRates"

    def __init__(self, source: FeeSourceClient, cache: TTLCache) -> None:
        self.source = source
        self.cache = cache
        self._refresh_lock = asyncio.Lock()

    async def get_snapshot(self) -> FeeSnapshot:
        """
        Current fee snapshot.

        Raises:
            FeeSourceError: If a refresh is needed and the fee source fails
        """
        cached: FeeSnapshot | None = self.cache.get(self.CACHE_KEY)
        if cached is not None:
            return cached

        async with self._refresh_lock:
            # Another request may have refreshed while we waited
            cached = self.cache.get(self.CACHE_KEY)
            if cached is not None:
                return cached

            snapshot = await self.source.fetch()
            self.cache[self.CACHE_KEY] = snapshot
            logger.info(
                "Fee rates refreshed: low=%s medium=%s high=%s",
                snapshot.low,
                snapshot.medium,
                snapshot.high,
            )
            return snapshot
