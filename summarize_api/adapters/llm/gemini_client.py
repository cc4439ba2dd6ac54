"""Google Gemini LLM client adapter."""

from typing import Any

from google import genai

from summarize_api.adapters.llm.base import AbstractLLMClient, ContentBlockedError

# Finish reasons that mean the candidate was withheld by a safety mechanism
_SAFETY_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII"}


def _reason_name(reason: Any) -> str | None:
    if reason is None:
        return None
    return str(getattr(reason, "value", reason))


class GeminiClient(AbstractLLMClient):
    """Client for calling Gemini ``generate_content`` and returning plain text.

    Uses the official ``google-genai`` SDK through its async surface
    (``client.aio``).
    """

    provider = "gemini"

    def __init__(self, api_key: str, model: str) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key for authentication.
            model: Model name (e.g., "gemini-1.5-flash-latest").
        """
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        """Generate a summary using Gemini.

        Args:
            prompt: Prompt to send as the single content part.
            **kwargs: Generation options (temperature, max_output_tokens, top_p).

        Returns:
            str: Model output text.

        Raises:
            ContentBlockedError: If zero candidates came back, or the only
                candidate was stopped for safety without producing text.
            RuntimeError: If the API call fails or returns no text.
        """
        allowed_params = {"temperature", "max_output_tokens", "top_p"}
        config = {k: v for k, v in kwargs.items() if k in allowed_params}

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config or None,
            )
        except Exception as exc:
            raise RuntimeError(f"Gemini API error: {str(exc)}") from exc

        if not response.candidates:
            feedback = response.prompt_feedback
            block_reason = feedback.block_reason if feedback is not None else None
            raise ContentBlockedError(self.provider, reason=_reason_name(block_reason))

        text = response.text
        if text and text.strip():
            return text.strip()

        finish_reason = _reason_name(response.candidates[0].finish_reason)
        if finish_reason in _SAFETY_FINISH_REASONS:
            raise ContentBlockedError(self.provider, reason=finish_reason)

        raise RuntimeError(f"LLM returned empty response (finish_reason={finish_reason})")
