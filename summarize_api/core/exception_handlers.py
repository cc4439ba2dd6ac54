"""Global exception handlers for consistent error responses.

This module maps every pipeline/adapter outcome to its HTTP status and a
minimal ``{"error": message}`` body.

Design:
- AppError subclasses → status from ``STATUS_BY_ERROR`` (405/429/400/413/500)
- Starlette HTTP errors raised by routing (404, ...) → same body shape
- Unexpected Exception → generic 500 (safety net)
- Correlation happens through the X-Request-ID response header, not the body
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from summarize_api.core.config import settings
from summarize_api.core.errors import (
    AppError,
    ConfigurationAppError,
    ContentBlockedAppError,
    LLMAppError,
    MethodNotAllowedAppError,
    PayloadTooLargeAppError,
    RateLimitedAppError,
    ValidationAppError,
)
from summarize_api.core.logging import get_request_id

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to generate summary."

STATUS_BY_ERROR: tuple[tuple[type[AppError], int], ...] = (
    (MethodNotAllowedAppError, 405),
    (RateLimitedAppError, 429),
    (PayloadTooLargeAppError, 413),
    (ContentBlockedAppError, 400),
    (ValidationAppError, 400),
    (LLMAppError, 500),
    (ConfigurationAppError, 500),
)


def status_for(exc: AppError) -> int:
    """Return the HTTP status for a domain error (400 when unmapped)."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


def _headers_for(exc: AppError) -> dict[str, str] | None:
    """Build response headers carried by specific error types."""
    details = exc.details or {}

    if isinstance(exc, MethodNotAllowedAppError):
        return {"Allow": "POST"}

    if isinstance(exc, RateLimitedAppError) and settings.app.rate_limit_include_headers:
        headers: dict[str, str] = {}
        if "retry_after" in details:
            headers["Retry-After"] = str(details["retry_after"])
        if "limit" in details:
            headers["X-RateLimit-Limit"] = str(details["limit"])
        if "remaining" in details:
            headers["X-RateLimit-Remaining"] = str(details["remaining"])
        return headers or None

    return None


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with the ``{"error": ...}`` format.

    Server-side failures (LLMAppError, ConfigurationAppError) never expose
    their message; the caller receives the generic failure text and the
    detail stays in the logs.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error message.
    """
    status_code = status_for(exc)
    message = GENERIC_FAILURE_MESSAGE if status_code >= 500 else exc.message

    log = logger.error if status_code >= 500 else logger.info
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers=_headers_for(exc),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (unknown path, etc.) in the same shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning generic message.
    Prevents information leakage (no stack traces to client).

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_FAILURE_MESSAGE},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from summarize_api.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
