"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses. Every failure the
admission pipeline or the summarization adapter can produce has exactly one
class here; the HTTP status for each lives in the exception handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and response headers.

    Never rendered into the response body; the body only carries the message.
    """

    hint: str
    min_value: int
    max_value: int
    actual_value: int
    limit: int
    remaining: int
    retry_after: int
    method: str
    provider: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message, safe to return to the caller.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class MethodNotAllowedAppError(AppError):
    """Raised when the request uses a method other than POST."""


class RateLimitedAppError(AppError):
    """Raised when a client exceeds its request budget for the window."""


class ValidationAppError(AppError):
    """Raised when the submitted text is missing, mistyped or too short."""


class PayloadTooLargeAppError(AppError):
    """Raised when the submitted text exceeds the maximum length."""


class ContentBlockedAppError(AppError):
    """Raised when the provider's safety mechanism refused the content."""


class LLMAppError(AppError):
    """Raised when the summarization provider call fails for any other reason."""


class ConfigurationAppError(AppError):
    """Raised when provider settings cannot produce a working client."""
