from __future__ import annotations

from summarize_api.api.routes.health import router as health_router
from summarize_api.api.routes.summarize import router as summarize_router

__all__ = ["health_router", "summarize_router"]
