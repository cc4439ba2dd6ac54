from abc import ABC, abstractmethod
from typing import Any


class ContentBlockedError(RuntimeError):
	"""Raised by a client when the provider's safety mechanism withheld all output.

	Attributes:
		provider: Provider name that reported the block.
		reason: Provider-specific block/finish reason, if any was reported.
	"""

	def __init__(self, provider: str, reason: str | None = None) -> None:
		super().__init__(f"{provider} blocked the content (reason: {reason or 'unspecified'})")
		self.provider = provider
		self.reason = reason


class AbstractLLMClient(ABC):
	"""Interface for LLM clients that turn a prompt into plain text."""

	provider: str = "unknown"

	@abstractmethod
	async def generate_text(self, prompt: str, **kwargs: Any) -> str:
		"""Generate a plain-text completion for the prompt.

		Args:
			prompt: Full prompt (instruction preamble plus user text).
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			str: The model's text output, stripped.

		Raises:
			ContentBlockedError: If the provider returned no output because of a safety block.
			RuntimeError: If the provider call fails or the response has an unexpected shape.
		"""
		...
