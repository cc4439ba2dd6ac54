"""FastAPI dependencies wiring the admission pipeline together.

The LLM client is built once per process; the pipeline itself is cheap and is
assembled per request from current settings so the limiter picks up
configuration changes.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from summarize_api.adapters.llm.base import AbstractLLMClient
from summarize_api.adapters.llm.factory import create_llm_client
from summarize_api.core.config import settings
from summarize_api.core.rate_limit import get_rate_limiter
from summarize_api.services.admission_service import AdmissionPipeline
from summarize_api.services.summarization_service import SummarizationService

_llm_client: AbstractLLMClient | None = None


def get_llm_client() -> AbstractLLMClient:
    """Return the process-wide LLM client, creating it on first use.

    Raises:
        ConfigurationAppError: If provider settings are invalid.
    """
    global _llm_client

    if _llm_client is None:
        _llm_client = create_llm_client()
    return _llm_client


async def get_admission_pipeline(
    llm: Annotated[AbstractLLMClient, Depends(get_llm_client)],
) -> AdmissionPipeline:
    summarizer = SummarizationService(
        llm,
        preamble=settings.app.summary_prompt,
        timeout_seconds=settings.llm.timeout_seconds,
    )
    return AdmissionPipeline(
        summarizer=summarizer,
        rate_limiter=get_rate_limiter() if settings.app.rate_limit_enabled else None,
        min_text_chars=settings.app.min_text_chars,
        max_text_chars=settings.app.max_text_chars,
    )
