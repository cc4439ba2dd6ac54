"""LLM adapter layer - abstracts over summarization providers."""

from summarize_api.adapters.llm.base import AbstractLLMClient, ContentBlockedError
from summarize_api.adapters.llm.factory import create_llm_client
from summarize_api.adapters.llm.gemini_client import GeminiClient
from summarize_api.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "ContentBlockedError",
    "GeminiClient",
    "OpenAIClient",
    "create_llm_client",
]
