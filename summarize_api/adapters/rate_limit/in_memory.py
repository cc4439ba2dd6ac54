"""In-memory sliding-window rate limiting.

Notes:
- Per-process only: running multiple workers multiplies the effective limit,
  and a restart silently resets every counter.
- Thread-safe: a lock guards the read-increment-write of each counter.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from summarize_api.adapters.rate_limit.base import (
    AbstractCounterStore,
    AbstractRateLimiter,
    RateLimitResult,
)

logger = logging.getLogger(__name__)


@dataclass
class _CounterEntry:
    count: int
    expires_at: float


class InMemoryCounterStore(AbstractCounterStore):
    """Bounded key → count map with per-entry TTL and LRU eviction.

    Every ``increment`` restarts the entry's TTL (sliding window) and marks it
    as most recently used. When a new key arrives at capacity, the least
    recently used entry is dropped first. Expired entries read as absent,
    whether or not they have been purged yet.

    Attributes:
        max_entries: Maximum number of keys tracked at once.
        ttl_seconds: Lifetime of an entry after its last access.
    """

    def __init__(
        self,
        *,
        max_entries: int = 500,
        ttl_seconds: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the counter store.

        Args:
            max_entries: Capacity bound on distinct keys.
            ttl_seconds: Sliding window length in seconds.
            clock: Time source returning seconds; injectable for tests.

        Raises:
            ValueError: If max_entries or ttl_seconds are invalid.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")

        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._store: OrderedDict[str, _CounterEntry] = OrderedDict()
        self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._store.values() if entry.expires_at > now)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._store.get(key)  # type: ignore[arg-type]
            return entry is not None and entry.expires_at > self._clock()

    def increment(self, key: str) -> int:
        """Count one more hit for ``key`` and restart its window.

        Args:
            key: Counter key; must be non-empty.

        Returns:
            Post-increment count (1 for a new or expired key).

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        with self._lock:
            now = self._clock()
            entry = self._store.get(key)

            if entry is not None and entry.expires_at > now:
                entry.count += 1
                entry.expires_at = now + self.ttl_seconds
                self._store.move_to_end(key)
                return entry.count

            if entry is not None:
                # Expired: replace in place, no capacity pressure
                del self._store[key]
            else:
                self._purge_expired_locked(now)
                self._evict_lru_locked()

            self._store[key] = _CounterEntry(count=1, expires_at=now + self.ttl_seconds)
            return 1

    def get(self, key: str) -> int:
        """Return the live count for ``key`` without touching its recency."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None or entry.expires_at <= self._clock():
                return 0
            return entry.count

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._evictions = 0

    def stats(self) -> dict[str, int | float]:
        """Return lightweight store metrics without exposing keys."""
        with self._lock:
            return {
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl_seconds,
                "entries": len(self._store),
                "evictions": self._evictions,
            }

    def _purge_expired_locked(self, now: float) -> None:
        expired = [k for k, entry in self._store.items() if entry.expires_at <= now]
        for key in expired:
            del self._store[key]

    def _evict_lru_locked(self) -> None:
        # Make room for exactly one new key
        while len(self._store) >= self.max_entries:
            self._store.popitem(last=False)
            self._evictions += 1
            logger.debug(
                "counter_store.evicted",
                extra={"entries": len(self._store), "max_entries": self.max_entries},
            )


class SlidingWindowRateLimiter(AbstractRateLimiter):
    """Threshold policy over a counter store.

    The hit is counted before the threshold is checked, so a rejected request
    is itself recorded and pushes the window out again.
    """

    def __init__(self, *, store: AbstractCounterStore, limit: int, window_seconds: int) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self.store = store
        self._limit = limit
        self._window_seconds = window_seconds

    def consume(self, key: str) -> RateLimitResult:
        count = self.store.increment(key)

        if count <= self._limit:
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                count=count,
                remaining=self._limit - count,
                retry_after_seconds=None,
            )

        # The window restarted with this very hit
        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            count=count,
            remaining=0,
            retry_after_seconds=self._window_seconds,
        )
