"""Admission pipeline deciding whether a request may reach the model.

The gates run in a fixed order and the first failure ends the request:

1. Method gate: only POST is accepted.
2. Rate-limit gate: one hit is counted for the client identity, then the
   threshold is checked (the rejected hit counts too).
3. Payload gate: body must be a JSON object with a string ``text`` field.
4. Minimum length gate.
5. Maximum length gate.
6. Delegation to the summarization service.

Method and rate checks run before the body is read, so throttled callers are
rejected without the server buffering or parsing their payload.

Lengths are measured in UTF-16 code units: a character outside the Basic
Multilingual Plane counts as 2.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping

from summarize_api.adapters.rate_limit.base import AbstractRateLimiter
from summarize_api.core.errors import (
    MethodNotAllowedAppError,
    PayloadTooLargeAppError,
    RateLimitedAppError,
    ValidationAppError,
)
from summarize_api.core.logging import hash_identity
from summarize_api.core.rate_limit import resolve_client_identity
from summarize_api.schemas.summarize import SummaryRequest, SummaryResponse
from summarize_api.services.summarization_service import SummarizationService

logger = logging.getLogger(__name__)

ALLOWED_METHOD = "POST"


@dataclass(frozen=True)
class InboundRequest:
    """Framework-independent view of an incoming request.

    Attributes:
        method: HTTP method as sent by the client.
        headers: Request headers (case-insensitive mapping from the framework).
        body: Raw, undecoded request body.
        read_body: Optional coroutine function returning the body; when set it
            is awaited only after the method and rate-limit gates pass.
    """

    method: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    read_body: Callable[[], Awaitable[bytes]] | None = None


def format_duration(seconds: int) -> str:
    """Render a window length for user-facing messages (600 → "10 minutes")."""
    if seconds % 60 == 0:
        minutes = seconds // 60
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{seconds} second" if seconds == 1 else f"{seconds} seconds"


def _invalid_text_error(min_chars: int, reason: str, actual: int | None = None) -> ValidationAppError:
    details: dict[str, Any] = {"hint": reason, "min_value": min_chars}
    if actual is not None:
        details["actual_value"] = actual
    return ValidationAppError(
        code="invalid_text",
        message=f"Invalid text. Min {min_chars} characters required.",
        details=details,  # type: ignore[arg-type]
    )


def text_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


class AdmissionPipeline:
    """Ordered admission gates in front of the summarization service.

    Attributes:
        summarizer: Service performing the external call once admitted.
        rate_limiter: Limiter consulted per client; ``None`` disables the gate.
        min_text_chars: Minimum accepted text length.
        max_text_chars: Maximum accepted text length.
    """

    def __init__(
        self,
        *,
        summarizer: SummarizationService,
        rate_limiter: AbstractRateLimiter | None,
        min_text_chars: int = 50,
        max_text_chars: int = 30000,
        identity_resolver: Callable[[Mapping[str, str]], str] = resolve_client_identity,
    ) -> None:
        if min_text_chars > max_text_chars:
            raise ValueError("min_text_chars must be <= max_text_chars")

        self.summarizer = summarizer
        self.rate_limiter = rate_limiter
        self.min_text_chars = min_text_chars
        self.max_text_chars = max_text_chars
        self._resolve_identity = identity_resolver

    def check_method(self, request: InboundRequest) -> None:
        if request.method != ALLOWED_METHOD:
            raise MethodNotAllowedAppError(
                code="method_not_allowed",
                message="Method Not Allowed",
                details={"method": request.method},
            )

    def check_rate_limit(self, request: InboundRequest) -> None:
        """Count the request against its client identity and enforce the threshold.

        Raises:
            RateLimitedAppError: When the post-increment count exceeds the limit.
        """
        if self.rate_limiter is None:
            return

        identity = self._resolve_identity(request.headers)
        result = self.rate_limiter.consume(identity)
        key_hash = hash_identity(identity)

        if result.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "key_hash": key_hash,
                    "count": result.count,
                    "limit": result.limit,
                    "remaining": result.remaining,
                },
            )
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "key_hash": key_hash,
                "count": result.count,
                "limit": result.limit,
                "retry_after_s": retry_after,
            },
        )
        raise RateLimitedAppError(
            code="rate_limited",
            message=f"Too many requests. Please try again in {format_duration(retry_after)}.",
            details={
                "limit": result.limit,
                "remaining": result.remaining,
                "retry_after": retry_after,
            },
        )

    def parse_text(self, body: bytes) -> str:
        """Decode the body and return the ``text`` field.

        Raises:
            ValidationAppError: If the body is not a JSON object carrying a string ``text``.
        """
        try:
            payload = json.loads(body) if body else None
        except (ValueError, RecursionError):
            raise _invalid_text_error(self.min_text_chars, "body is not valid JSON") from None

        if not isinstance(payload, dict):
            raise _invalid_text_error(self.min_text_chars, "body must be a JSON object")

        text = payload.get("text")
        if not isinstance(text, str):
            raise _invalid_text_error(self.min_text_chars, "missing or wrong type")
        return text

    def check_length(self, text: str) -> None:
        """Enforce the minimum and maximum length bounds (in that order)."""
        length = text_length(text)
        if length < self.min_text_chars:
            raise _invalid_text_error(self.min_text_chars, "too short", actual=length)

        if length > self.max_text_chars:
            raise PayloadTooLargeAppError(
                code="text_too_large",
                message=f"Text too large. Max {self.max_text_chars:,} characters.",
                details={"max_value": self.max_text_chars, "actual_value": length},
            )

    def screen(self, request: InboundRequest) -> None:
        """Run the gates that only need the method and headers."""
        try:
            self.check_method(request)
        except MethodNotAllowedAppError as exc:
            logger.info("admission.rejected", extra={"error_code": exc.code})
            raise
        self.check_rate_limit(request)

    def validate(self, body: bytes) -> SummaryRequest:
        """Run the payload and length gates on a raw body."""
        try:
            text = self.parse_text(body)
            self.check_length(text)
        except (ValidationAppError, PayloadTooLargeAppError) as exc:
            logger.info("admission.rejected", extra={"error_code": exc.code})
            raise

        return SummaryRequest(text=text)

    def admit(self, request: InboundRequest) -> SummaryRequest:
        """Run every admission gate in order on an already buffered body.

        Args:
            request: Incoming request.

        Returns:
            The validated SummaryRequest.

        Raises:
            MethodNotAllowedAppError, RateLimitedAppError, ValidationAppError,
            PayloadTooLargeAppError: From the first failing gate.
        """
        self.screen(request)
        return self.validate(request.body)

    async def handle(self, request: InboundRequest) -> SummaryResponse:
        """Admit the request and, if it passes, summarize its text.

        The body is read through ``request.read_body`` when provided, and only
        once the method and rate-limit gates have passed.
        """
        self.screen(request)
        body = await request.read_body() if request.read_body is not None else request.body
        summary_request = self.validate(body)
        return await self.summarizer.summarize(summary_request)
