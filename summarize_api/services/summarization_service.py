"""Summarization service wrapping the external model call.

Turns one validated request into one provider call and classifies whatever
comes back into the application's error taxonomy:
- Safety block reported by the provider → ContentBlockedAppError (caller's input)
- Anything else (network, quota, timeout, bad shape) → LLMAppError (our side)

There are no retries: one attempt per request.
"""

from __future__ import annotations

import asyncio
import logging
import time

from summarize_api.adapters.llm.base import AbstractLLMClient, ContentBlockedError
from summarize_api.core.errors import ContentBlockedAppError, LLMAppError
from summarize_api.schemas.summarize import SummaryRequest, SummaryResponse

logger = logging.getLogger(__name__)

CONTENT_BLOCKED_MESSAGE = "Content was blocked by safety filters."
UPSTREAM_FAILURE_MESSAGE = "Failed to generate summary."


def build_prompt(preamble: str, text: str) -> str:
    """Concatenate the fixed instruction preamble with the submitted text."""
    return preamble + text


class SummarizationService:
    """Single-attempt summarization with failure classification.

    Attributes:
        llm: LLM client adapter producing plain text.
        preamble: Instruction text prepended to every submission.
        timeout_seconds: Optional upper bound on the provider call.
    """

    def __init__(
        self,
        llm: AbstractLLMClient,
        *,
        preamble: str,
        timeout_seconds: float | None = None,
    ) -> None:
        self.llm = llm
        self.preamble = preamble
        self.timeout_seconds = timeout_seconds

    async def _call_provider(self, prompt: str) -> str:
        call = self.llm.generate_text(prompt)
        if self.timeout_seconds is None:
            return await call
        return await asyncio.wait_for(call, timeout=self.timeout_seconds)

    async def summarize(self, request: SummaryRequest) -> SummaryResponse:
        """Summarize validated text.

        Args:
            request: Request that already passed the admission gates.

        Returns:
            SummaryResponse with the model's summary.

        Raises:
            ContentBlockedAppError: If the provider's safety filter withheld the output.
            LLMAppError: For any other provider failure; detail is logged, not returned.
        """
        prompt = build_prompt(self.preamble, request.text)
        provider = self.llm.provider
        start = time.perf_counter()

        try:
            summary = await self._call_provider(prompt)
        except ContentBlockedError as exc:
            logger.warning(
                "summarize.content_blocked",
                extra={"provider": exc.provider, "block_reason": exc.reason},
            )
            raise ContentBlockedAppError(
                code="content_blocked",
                message=CONTENT_BLOCKED_MESSAGE,
                details={"provider": exc.provider, "hint": exc.reason or ""},
            ) from exc
        except Exception as exc:
            logger.error(
                "summarize.upstream_failed",
                extra={
                    "provider": provider,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                    "timeout_s": self.timeout_seconds,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
                exc_info=True,
            )
            raise LLMAppError(
                code="upstream_failure",
                message=UPSTREAM_FAILURE_MESSAGE,
                details={"provider": provider},
            ) from exc

        logger.info(
            "summarize.completed",
            extra={
                "provider": provider,
                "input_chars": len(request.text),
                "summary_chars": len(summary),
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return SummaryResponse(summary=summary)
