"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory counter store and later migrate to Redis or another shared store
without changing the admission pipeline.
"""

from summarize_api.adapters.rate_limit.base import (
    AbstractCounterStore,
    AbstractRateLimiter,
    RateLimitResult,
)
from summarize_api.adapters.rate_limit.in_memory import (
    InMemoryCounterStore,
    SlidingWindowRateLimiter,
)

__all__ = [
    "AbstractCounterStore",
    "AbstractRateLimiter",
    "InMemoryCounterStore",
    "RateLimitResult",
    "SlidingWindowRateLimiter",
]
