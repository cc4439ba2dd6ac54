"""OpenAI LLM client adapter."""

from typing import Any

from openai import AsyncOpenAI

from summarize_api.adapters.llm.base import AbstractLLMClient, ContentBlockedError


class OpenAIClient(AbstractLLMClient):
    """Client for calling OpenAI chat completions and returning plain text.

    Uses the official OpenAI Python SDK with async support. SDK-level retries
    are disabled: each summarization request makes exactly one attempt.
    """

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI-compatible APIs.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
        )
        self.model = model

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        """Generate a summary using OpenAI chat completions.

        Args:
            prompt: Prompt to send as the user message.
            **kwargs: Provider options (temperature, max_tokens, top_p, etc.).

        Returns:
            str: Model output text.

        Raises:
            ContentBlockedError: If no choice came back or the content filter stopped generation.
            RuntimeError: If the API call fails or returns no content.
        """
        temperature = kwargs.pop("temperature", 0.3)

        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
        }

        # Pass through additional parameters if provided
        allowed_params = {"max_tokens", "top_p", "seed"}
        for param in allowed_params:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except Exception as exc:
            raise RuntimeError(f"OpenAI API error: {str(exc)}") from exc

        if not response.choices:
            raise ContentBlockedError(self.provider)

        choice = response.choices[0]
        if choice.finish_reason == "content_filter":
            raise ContentBlockedError(self.provider, reason="content_filter")

        content = choice.message.content
        if not content or not content.strip():
            raise RuntimeError("LLM returned empty response")

        return content.strip()
