"""Provider factory functions.

Singleton pattern for the LLM provider instance.
"""

from career_pathway.providers.config import ProviderConfig
from career_pathway.providers.llm.base import LLMProvider
from career_pathway.providers.llm.claude_adapter import ClaudeAdapter
from career_pathway.providers.llm.openai_adapter import OpenAIAdapter

_llm_provider: LLMProvider | None = None


def get_llm_provider(config: ProviderConfig | None = None) -> LLMProvider:
    """Get or create the LLM provider singleton.

    WHY SINGLETON:
    - Reuses HTTP connections across interview turns
    - Consistent configuration across the app

    Args:
        config: Optional provider configuration. If None and no provider
            exists, builds one from application settings.

    Returns:
        LLMProvider instance.

    Raises:
        ValueError: If the configured provider is unknown.
        AuthenticationError: If the selected provider has no API key.
    """
    global _llm_provider

    if _llm_provider is None:
        if config is None:
            config = ProviderConfig.from_settings()

        if config.llm_provider == "claude":
            _llm_provider = ClaudeAdapter(config)
        elif config.llm_provider == "openai":
            _llm_provider = OpenAIAdapter(config)
        else:
            raise ValueError(f"Unknown LLM provider: {config.llm_provider}")

    return _llm_provider


def reset_providers() -> None:
    """Reset provider singletons.

    Used in tests to ensure isolation between test cases.
    """
    global _llm_provider
    _llm_provider = None
