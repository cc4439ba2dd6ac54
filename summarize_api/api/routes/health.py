from __future__ import annotations

from fastapi import APIRouter

from summarize_api.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Liveness probe.

    Does not call the summarization provider and is not rate limited.

    Returns:
        dict: ``status`` plus the configured provider and whether rate limiting is on.
    """

    return {
        "status": "ok",
        "provider": settings.llm.provider,
        "rate_limit_enabled": settings.app.rate_limit_enabled,
    }
