"""Rate limiter interfaces.

The admission pipeline depends on these abstractions (not the concrete
implementation) so the counter storage can be swapped later (e.g., Redis)
with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        count: Requests counted for the key in the current window, this one included.
        remaining: Requests still allowed in the current window (0 when blocked).
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    count: int
    remaining: int
    retry_after_seconds: int | None


class AbstractCounterStore(ABC):
    """Interface for bounded, expiring per-key counters."""

    @abstractmethod
    def increment(self, key: str) -> int:
        """Atomically count one more hit for ``key``.

        Args:
            key: Counter key (e.g., client address).

        Returns:
            The post-increment count for the key's current window.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, key: str) -> int:
        """Return the live count for ``key`` (0 when absent or expired)."""
        raise NotImplementedError


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, key: str) -> RateLimitResult:
        """Consume one unit of rate limit budget for a given key.

        Args:
            key: Unique identifier (e.g., client address).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
