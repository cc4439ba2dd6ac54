"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests and the ASGI entrypoint build the exact same application.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from summarize_api.api.dependencies import get_llm_client
from summarize_api.api.routes import health_router, summarize_router
from summarize_api.core.config import settings
from summarize_api.core.exception_handlers import setup_exception_handlers
from summarize_api.core.logging import configure_logging
from summarize_api.core.middleware import request_id_middleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Provider misconfiguration fails startup
    get_llm_client()
    logger.info(
        "startup.ready",
        extra={
            "app_env": settings.app_env,
            "provider": settings.llm.provider,
            "model": settings.llm.model,
            "rate_limit_enabled": settings.app.rate_limit_enabled,
            "rate_limit_requests": settings.app.rate_limit_requests,
            "rate_limit_window_s": settings.app.rate_limit_window_seconds,
        },
    )
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Summarize API",
        description=(
            "Single-endpoint gateway that summarizes submitted text with a hosted "
            "LLM. Requests are rate limited per client address and validated "
            "before the model is called."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(summarize_router, prefix="/api")
    app.include_router(health_router)

    return app
