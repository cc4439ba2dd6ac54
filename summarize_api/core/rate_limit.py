"""Rate limiter wiring and client identity resolution.

This module builds the process-wide limiter from settings and derives the
identity each request is counted against.

Rate limiting strategy:
- Sliding window per client address, 5 requests per 10 minutes by default.
- The client address is the raw forwarded-address header value.
- Callers without that header all share the fallback identity (127.0.0.1).
  This keeps the gateway usable behind proxies that drop the header, but it
  also means such callers throttle each other and that a caller able to set
  the header freely can rotate identities.
"""

from __future__ import annotations

import logging
import threading
from typing import Mapping

from summarize_api.adapters.rate_limit.base import AbstractRateLimiter
from summarize_api.adapters.rate_limit.in_memory import (
    InMemoryCounterStore,
    SlidingWindowRateLimiter,
)
from summarize_api.core.config import settings

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int, int] | None = None
_limiter_lock = threading.Lock()


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve counters across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.
    Building happens under a lock so concurrent first use shares one store.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_seconds,
        settings.app.rate_limit_max_clients,
    )

    with _limiter_lock:
        if _limiter is None or _limiter_config != config:
            store = InMemoryCounterStore(
                max_entries=settings.app.rate_limit_max_clients,
                ttl_seconds=settings.app.rate_limit_window_seconds,
            )
            _limiter = SlidingWindowRateLimiter(
                store=store,
                limit=settings.app.rate_limit_requests,
                window_seconds=settings.app.rate_limit_window_seconds,
            )
            _limiter_config = config
            logger.info(
                "rate_limit.configured",
                extra={
                    "limit": config[0],
                    "window_s": config[1],
                    "max_clients": config[2],
                },
            )

        return _limiter


def reset_rate_limiter() -> None:
    """Drop the cached limiter so the next request starts with empty counters."""

    global _limiter, _limiter_config
    with _limiter_lock:
        _limiter = None
        _limiter_config = None


def resolve_client_identity(headers: Mapping[str, str]) -> str:
    """Derive the rate limit identity from request headers.

    Args:
        headers: Request headers (case-insensitive mapping in practice).

    Returns:
        The forwarded address as sent, or the fallback identity when the
        header is absent or blank.
    """

    forwarded = headers.get(settings.app.client_ip_header)
    if forwarded and forwarded.strip():
        return forwarded.strip()
    return settings.app.fallback_client_ip
