"""Shared dependencies for API endpoints.

WHY DEPENDENCY INJECTION:
- Endpoints never build providers themselves
- Tests override the provider through the factory singleton
- A missing API key degrades to the deterministic interview instead of
  failing the request
"""

from typing import Annotated

import structlog
from fastapi import Depends

from career_pathway.core.config import settings
from career_pathway.providers.config import ProviderConfig
from career_pathway.providers.errors import AuthenticationError
from career_pathway.providers.factory import get_llm_provider
from career_pathway.providers.llm.base import LLMProvider
from career_pathway.services.advisory_client import Advisor, LLMAdvisor
from career_pathway.services.free_text_extractor import FreeTextExtractor

logger = structlog.get_logger()


def get_optional_llm_provider() -> LLMProvider | None:
    """Return the LLM provider, or None when LLM calls are unavailable.

    Returns None when advisory calls are disabled in settings or the
    configured provider has no API key.
    """
    if not settings.advisory_enabled:
        return None
    try:
        return get_llm_provider()
    except AuthenticationError:
        logger.warning("llm_provider_unavailable", provider=settings.llm_provider)
        return None


OptionalLLMProvider = Annotated[LLMProvider | None, Depends(get_optional_llm_provider)]


def get_advisor(provider: OptionalLLMProvider) -> Advisor | None:
    """Build the advisory client for a request.

    Args:
        provider: LLM provider, or None (injected).

    Returns:
        LLMAdvisor bound to settings, or None to keep deterministic
        messages.
    """
    if provider is None:
        return None
    return LLMAdvisor(
        provider,
        ProviderConfig.from_settings(),
        timeout=settings.advisory_timeout_seconds,
        temperature=settings.advisory_temperature,
        max_tokens=settings.advisory_max_tokens,
        repair_temperature=settings.repair_temperature,
    )


def get_extractor(provider: OptionalLLMProvider) -> FreeTextExtractor | None:
    """Build the free-text extractor for a request.

    Args:
        provider: LLM provider, or None (injected).

    Returns:
        FreeTextExtractor bound to settings, or None to ignore free text.
    """
    if provider is None:
        return None
    return FreeTextExtractor(
        provider,
        timeout=settings.extraction_timeout_seconds,
        temperature=settings.extraction_temperature,
        max_tokens=settings.extraction_max_tokens,
        min_confidence=settings.extraction_min_confidence,
    )


AdvisorDep = Annotated[Advisor | None, Depends(get_advisor)]
ExtractorDep = Annotated[FreeTextExtractor | None, Depends(get_extractor)]
