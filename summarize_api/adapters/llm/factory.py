"""Factory pattern for creating LLM client instances."""

from summarize_api.adapters.llm.base import AbstractLLMClient
from summarize_api.adapters.llm.gemini_client import GeminiClient
from summarize_api.adapters.llm.openai_client import OpenAIClient
from summarize_api.core.config import settings
from summarize_api.core.errors import ConfigurationAppError

SUPPORTED_PROVIDERS = ("gemini", "openai")


def create_llm_client() -> AbstractLLMClient:
    """Factory function to instantiate LLM clients based on provider.

    Reads configuration from summarize_api.core.config.settings (Pydantic Settings).
    Validates provider-specific requirements and routes to appropriate client.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ConfigurationAppError: If the provider is unknown or its credential is missing.
    """
    provider = settings.llm.provider.lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
            ),
        )

    if not settings.llm.api_key:
        raise ConfigurationAppError(
            code="llm_missing_api_key",
            message=f"{provider} provider requires LLM_API_KEY environment variable",
            details={"provider": provider},
        )

    if provider == "gemini":
        return GeminiClient(api_key=settings.llm.api_key, model=settings.llm.model)

    return OpenAIClient(
        api_key=settings.llm.api_key,
        model=settings.llm.model,
        base_url=settings.llm.base_url,
    )
