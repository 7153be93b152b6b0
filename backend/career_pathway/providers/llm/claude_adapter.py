"""Claude (Anthropic) adapter.

Default provider for the advisory call that phrases interview messages
and for free-text extraction. Anthropic takes the system prompt as its
own argument and has no JSON mode, so both are handled here.
"""

import time
from typing import TYPE_CHECKING

import anthropic
import structlog
from anthropic import AsyncAnthropic

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

# Extraction is a narrow classification job and runs on the cheaper model.
DEFAULT_CLAUDE_ROUTING: dict[str, str] = {
    TaskType.CAREER_ADVISORY.value: "claude-sonnet-4-20250514",
    TaskType.FREE_TEXT_EXTRACTION.value: "claude-3-5-haiku-latest",
}
DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"

_JSON_ONLY_INSTRUCTION = (
    "Respond ONLY with valid JSON. No explanations, no markdown, just the JSON object."
)

_HANDLED_SDK_ERRORS = (
    anthropic.RateLimitError,
    anthropic.AuthenticationError,
    anthropic.NotFoundError,
    anthropic.BadRequestError,
    anthropic.InternalServerError,
    anthropic.APIConnectionError,
)


def _classify_claude_error(error: Exception) -> ProviderError:
    """Translate an Anthropic SDK exception into the provider taxonomy."""
    message = str(error)
    if isinstance(error, anthropic.RateLimitError):
        return RateLimitError(
            message, retry_after_seconds=retry_after_seconds(error.response)
        )
    if isinstance(error, anthropic.AuthenticationError):
        return AuthenticationError(message)
    if isinstance(error, anthropic.NotFoundError):
        return ModelNotFoundError(message)
    if isinstance(error, anthropic.BadRequestError):
        return bad_request_error(message)
    # APITimeoutError subclasses APIConnectionError
    if isinstance(error, anthropic.APIConnectionError | anthropic.InternalServerError):
        return TransientError(message)
    return ProviderError(message)


def _split_system(messages: list[LLMMessage]) -> tuple[str | None, list[dict]]:
    """Pull system messages out of the conversation.

    Returns:
        Tuple of (system prompt or None, remaining messages as dicts).
        Several system messages are joined with blank lines.
    """
    system = [m.content for m in messages if m.role == "system"]
    conversation = [
        {"role": m.role, "content": m.content} for m in messages if m.role != "system"
    ]
    return ("\n\n".join(system) or None), conversation


class ClaudeAdapter(LLMProvider):
    """LLMProvider backed by the Anthropic Messages API."""

    @property
    def provider_name(self) -> str:
        """Return 'claude' for logging."""
        return "claude"

    def __init__(self, config: "ProviderConfig") -> None:
        """Build the Anthropic client.

        Raises:
            AuthenticationError: If no Anthropic API key is configured.
        """
        super().__init__(config)
        if not config.anthropic_api_key:
            raise AuthenticationError("ANTHROPIC_API_KEY is not set")
        self.client = AsyncAnthropic(api_key=config.anthropic_api_key)
        self.model_routing = {
            **DEFAULT_CLAUDE_ROUTING,
            **(config.claude_model_routing or {}),
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
        """Generate a completion with Claude.

        JSON mode is emulated by appending a JSON-only instruction to the
        system prompt.
        """
        model = self.get_model_for_task(task)
        system, conversation = _split_system(messages)
        if json_mode:
            system = (
                f"{system}\n\nIMPORTANT: {_JSON_ONLY_INSTRUCTION}"
                if system
                else _JSON_ONLY_INSTRUCTION
            )
        tokens, temp = self.resolve_sampling(max_tokens, temperature)
        log = logger.bind(provider="claude", model=model, task=task.value)
        log.info("llm_request_start", message_count=len(messages))

        started = time.monotonic()
        try:
            response = await self.client.messages.create(
                model=model,
                max_tokens=tokens,
                temperature=temp,
                system=system or anthropic.NOT_GIVEN,
                messages=conversation,  # type: ignore[arg-type]
                stop_sequences=stop_sequences or anthropic.NOT_GIVEN,
            )
        except _HANDLED_SDK_ERRORS as e:
            log.error("llm_request_failed", error=str(e), error_type=type(e).__name__)
            raise _classify_claude_error(e) from e
        latency_ms = (time.monotonic() - started) * 1000

        text = "".join(b.text for b in response.content if b.type == "text")
        usage = response.usage
        log.info(
            "llm_request_complete",
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            latency_ms=latency_ms,
        )
        return LLMResponse(
            content=text or None,
            model=model,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            finish_reason=response.stop_reason or "unknown",
            latency_ms=latency_ms,
        )

    def get_model_for_task(self, task: TaskType) -> str:
        """Return the routed model, or the default for unrouted tasks."""
        return self.model_routing.get(task.value, DEFAULT_CLAUDE_MODEL)
