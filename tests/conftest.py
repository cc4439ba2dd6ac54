"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins the environment before settings are imported so no developer
.env file or real provider credential leaks into the test run.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("LLM_MODEL", "gemini-1.5-flash-latest")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any, Iterator

import pytest

from summarize_api.adapters.llm.base import AbstractLLMClient
from summarize_api.core.rate_limit import reset_rate_limiter


class FakeClock:
    """Deterministic clock used to test expiration logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeLLMClient(AbstractLLMClient):
    """In-memory LLM client recording prompts.

    Returns ``summary`` or raises ``error`` when one is set.
    """

    provider = "fake"

    def __init__(self, summary: str = "A short summary.", error: BaseException | None = None) -> None:
        self.summary = summary
        self.error = error
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.summary


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture(autouse=True)
def _fresh_rate_limiter() -> Iterator[None]:
    """Every test starts with empty rate limit counters."""
    reset_rate_limiter()
    yield
    reset_rate_limiter()
