"""Tests for provider factory and configuration."""

from unittest.mock import patch

import pytest

from career_pathway.core.config import Settings
from career_pathway.providers.config import ProviderConfig
from career_pathway.providers.errors import AuthenticationError
from career_pathway.providers.factory import get_llm_provider, reset_providers


@pytest.fixture(autouse=True)
def clean_singleton():
    """Reset the provider singleton around each test."""
    reset_providers()
    yield
    reset_providers()


class TestGetLLMProvider:
    """Tests for get_llm_provider()."""

    def test_builds_claude_adapter(self):
        """claude selects the Anthropic adapter."""
        with patch("career_pathway.providers.llm.claude_adapter.AsyncAnthropic"):
            provider = get_llm_provider(
                ProviderConfig(llm_provider="claude", anthropic_api_key="k")
            )

        assert provider.provider_name == "claude"

    def test_builds_openai_adapter(self):
        """openai selects the OpenAI adapter."""
        with patch("career_pathway.providers.llm.openai_adapter.AsyncOpenAI"):
            provider = get_llm_provider(
                ProviderConfig(llm_provider="openai", openai_api_key="k")
            )

        assert provider.provider_name == "openai"

    def test_singleton(self):
        """Later calls return the cached instance."""
        with patch("career_pathway.providers.llm.claude_adapter.AsyncAnthropic"):
            first = get_llm_provider(ProviderConfig(anthropic_api_key="k"))
            second = get_llm_provider()

        assert first is second

    def test_unknown_provider(self):
        """Unknown providers raise ValueError."""
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            get_llm_provider(ProviderConfig(llm_provider="unknown"))

    def test_missing_key_raises(self):
        """A provider without a key raises AuthenticationError."""
        with pytest.raises(AuthenticationError):
            get_llm_provider(ProviderConfig(llm_provider="openai"))


class TestProviderConfigFromSettings:
    """Tests for ProviderConfig.from_settings()."""

    def test_copies_provider_fields(self):
        """Provider choice, keys and advisory defaults come from settings."""
        app_settings = Settings(
            _env_file=None,
            llm_provider="openai",
            openai_api_key="sk-test",
            advisory_max_tokens=800,
            advisory_temperature=0.3,
        )

        config = ProviderConfig.from_settings(app_settings)

        assert config.llm_provider == "openai"
        assert config.openai_api_key == "sk-test"
        assert config.anthropic_api_key is None
        assert config.default_max_tokens == 800
        assert config.default_temperature == 0.3
        assert config.max_retries == 1
