"""Provider configuration management.

Centralized configuration for the LLM provider used by the advisory
and free-text extraction calls.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from career_pathway.core.config import Settings


@dataclass
class ProviderConfig:
    """Centralized provider configuration.

    Attributes:
        llm_provider: Which LLM provider to use ("claude", "openai").
        anthropic_api_key: Anthropic API key.
        openai_api_key: OpenAI API key.
        claude_model_routing: Override model routing for Claude.
        openai_model_routing: Override model routing for OpenAI.
        default_max_tokens: Default max output tokens.
        default_temperature: Default sampling temperature.
        max_retries: Max retry attempts for transient errors.
        retry_base_delay_ms: Base delay for exponential backoff.
        retry_max_delay_ms: Max delay cap for exponential backoff.
    """

    # Provider selection
    llm_provider: str = "claude"

    # API keys
    anthropic_api_key: str | None = None
    openai_api_key: str | None = None

    # Model routing (can override defaults)
    claude_model_routing: dict[str, str] | None = None
    openai_model_routing: dict[str, str] | None = None

    # Defaults
    default_max_tokens: int = 2000
    default_temperature: float = 0.2

    # Retry policy
    # WHY ONLY ONE RETRY: every call already sits under a per-turn timeout,
    # and a failed call degrades to the deterministic path anyway.
    max_retries: int = 1
    retry_base_delay_ms: int = 500
    retry_max_delay_ms: int = 4000

    @classmethod
    def from_settings(cls, app_settings: "Settings | None" = None) -> "ProviderConfig":
        """Build configuration from application settings.

        Args:
            app_settings: Settings instance. Defaults to the module-level
                settings loaded from the environment.

        Returns:
            ProviderConfig instance.
        """
        if app_settings is None:
            from career_pathway.core.config import settings as app_settings

        return cls(
            llm_provider=app_settings.llm_provider,
            anthropic_api_key=app_settings.anthropic_api_key or None,
            openai_api_key=app_settings.openai_api_key or None,
            default_max_tokens=app_settings.advisory_max_tokens,
            default_temperature=app_settings.advisory_temperature,
        )
