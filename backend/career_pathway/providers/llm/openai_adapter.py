"""OpenAI adapter, selected with LLM_PROVIDER=openai.

OpenAI keeps system messages inline and has a native JSON response
format, so messages pass through unchanged.
"""

import time
from typing import TYPE_CHECKING

import openai
import structlog
from openai import AsyncOpenAI

from career_pathway.providers.errors import (
    AuthenticationError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TransientError,
    bad_request_error,
    retry_after_seconds,
)
from career_pathway.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    TaskType,
)

if TYPE_CHECKING:
    from career_pathway.providers.config import ProviderConfig

logger = structlog.get_logger()

DEFAULT_OPENAI_ROUTING: dict[str, str] = {
    TaskType.CAREER_ADVISORY.value: "gpt-4o",
    TaskType.FREE_TEXT_EXTRACTION.value: "gpt-4o-mini",
}
DEFAULT_OPENAI_MODEL = "gpt-4o"

_HANDLED_SDK_ERRORS = (
    openai.RateLimitError,
    openai.AuthenticationError,
    openai.NotFoundError,
    openai.BadRequestError,
    openai.InternalServerError,
    openai.APIConnectionError,
)


def _classify_openai_error(error: Exception) -> ProviderError:
    """Translate an OpenAI SDK exception into the provider taxonomy."""
    message = str(error)
    if isinstance(error, openai.RateLimitError):
        return RateLimitError(
            message, retry_after_seconds=retry_after_seconds(error.response)
        )
    if isinstance(error, openai.AuthenticationError):
        return AuthenticationError(message)
    if isinstance(error, openai.NotFoundError):
        return ModelNotFoundError(message)
    if isinstance(error, openai.BadRequestError):
        return bad_request_error(message)
    # APITimeoutError subclasses APIConnectionError
    if isinstance(error, openai.APIConnectionError | openai.InternalServerError):
        return TransientError(message)
    return ProviderError(message)


class OpenAIAdapter(LLMProvider):
    """LLMProvider backed by the OpenAI Chat Completions API."""

    @property
    def provider_name(self) -> str:
        """Return 'openai' for logging."""
        return "openai"

    def __init__(self, config: "ProviderConfig") -> None:
        """Build the OpenAI client.

        Raises:
            AuthenticationError: If no OpenAI API key is configured.
        """
        super().__init__(config)
        if not config.openai_api_key:
            raise AuthenticationError("OPENAI_API_KEY is not set")
        self.client = AsyncOpenAI(api_key=config.openai_api_key)
        self.model_routing = {
            **DEFAULT_OPENAI_ROUTING,
            **(config.openai_model_routing or {}),
        }

    async def complete(
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
        stop_sequences: list[str] | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Generate a completion with OpenAI."""
        model = self.get_model_for_task(task)
        tokens, temp = self.resolve_sampling(max_tokens, temperature)
        api_messages = [{"role": m.role, "content": m.content} for m in messages]
        response_format = {"type": "json_object"} if json_mode else openai.NOT_GIVEN
        log = logger.bind(provider="openai", model=model, task=task.value)
        log.info("llm_request_start", message_count=len(messages))

        started = time.monotonic()
        try:
            response = await self.client.chat.completions.create(
                model=model,
                max_tokens=tokens,
                temperature=temp,
                messages=api_messages,  # type: ignore[arg-type]
                stop=stop_sequences or openai.NOT_GIVEN,
                response_format=response_format,  # type: ignore[arg-type]
            )
        except _HANDLED_SDK_ERRORS as e:
            log.error("llm_request_failed", error=str(e), error_type=type(e).__name__)
            raise _classify_openai_error(e) from e
        latency_ms = (time.monotonic() - started) * 1000

        choice = response.choices[0]
        input_tokens = response.usage.prompt_tokens if response.usage else 0
        output_tokens = response.usage.completion_tokens if response.usage else 0
        log.info(
            "llm_request_complete",
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency_ms,
        )
        return LLMResponse(
            content=choice.message.content,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason=choice.finish_reason or "unknown",
            latency_ms=latency_ms,
        )

    def get_model_for_task(self, task: TaskType) -> str:
        """Return the routed model, or the default for unrouted tasks."""
        return self.model_routing.get(task.value, DEFAULT_OPENAI_MODEL)
