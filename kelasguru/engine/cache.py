"""
kelasguru.engine.cache — Badge Catalog TTL Cache
=================================================

The badge catalog is global reference data, so a single snapshot is kept
with a fixed time-to-live.  The slot is refreshed only after a successful
fetch; a failed fetch leaves the previous snapshot (if any) untouched.

No lock: the cache is only touched from one asyncio event loop.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from kelasguru.client.transport import ApiResult

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60.0


class BadgeCache:
    """Single-slot cache for the badge catalog.

    Usage::

        cache = BadgeCache(ttl=60)
        result = await cache.resolve(lambda: get_badge_catalog(api))

    Parameters
    ----------
    ttl : float
        Seconds a snapshot stays fresh.
    clock : callable
        Returns the current time in seconds; injectable for tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self.value: list[Any] | None = None
        self.fetched_at: float = 0.0

    def is_fresh(self) -> bool:
        if self.value is None:
            return False
        return (self._clock() - self.fetched_at) <= self.ttl

    def get(self) -> list[Any] | None:
        """Return the snapshot if still fresh, else None."""
        return self.value if self.is_fresh() else None

    def store(self, value: list[Any], fetched_at: float | None = None) -> None:
        self.value = value
        self.fetched_at = self._clock() if fetched_at is None else fetched_at

    def invalidate(self) -> None:
        self.value = None
        self.fetched_at = 0.0

    async def resolve(self, fetch: Callable[[], Awaitable[ApiResult]]) -> ApiResult:
        """Serve the catalog from the slot, or call *fetch* and remember it."""
        cached = self.get()
        if cached is not None:
            logger.debug("Badge catalog served from cache (%d badges)", len(cached))
            return ApiResult.ok(cached)

        started = self._clock()
        result = await fetch()
        if result.success:
            catalog = result.data if isinstance(result.data, list) else []
            self.store(catalog, fetched_at=started)
            logger.debug("Badge catalog cached (%d badges)", len(self.value))
        return result
