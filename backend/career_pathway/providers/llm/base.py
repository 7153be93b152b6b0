"""Abstract base class and types for LLM providers.

LLMProvider interface with TaskType routing, provider-agnostic message
types, and JSON mode.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from career_pathway.providers.config import ProviderConfig


class TaskType(Enum):
    """Task types for model routing.

    WHY ENUM: Explicit task types prevent typos. Each adapter's routing
    table maps these to specific models.
    """

    CAREER_ADVISORY = "career_advisory"
    FREE_TEXT_EXTRACTION = "free_text_extraction"


@dataclass
class LLMMessage:
    """Provider-agnostic message format.

    Anthropic takes the system prompt as a separate argument, OpenAI keeps
    it in the message list. This normalizes both.

    Attributes:
        role: Message role ("system", "user", "assistant").
        content: Text content.
    """

    role: str
    content: str


@dataclass
class LLMResponse:
    """Provider-agnostic response format.

    Attributes:
        content: Text response (None if the provider returned no text).
        model: Actual model used (for logging).
        input_tokens: Number of input tokens used.
        output_tokens: Number of output tokens generated.
        finish_reason: Why generation stopped ("stop", "max_tokens", ...).
        latency_ms: Response time in milliseconds.
    """

    content: str | None
    model: str
    input_tokens: int
    output_tokens: int
    finish_reason: str
    latency_ms: float


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    WHY ABSTRACT CLASS:
    - Enforces consistent interface across providers
    - Makes testing via mock implementations trivial
    """

    def __init__(self, config: "ProviderConfig") -> None:
        """Initialize with provider configuration.

        Args:
            config: Provider configuration including API keys and defaults.
        """
        self.config = config

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider identifier (e.g., 'claude', 'openai')."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
        stop_sequences: list[str] | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Generate a completion.

        Args:
            messages: Conversation as list of LLMMessage.
            task: Task type for model routing.
            max_tokens: Override default max tokens.
            temperature: Override default temperature.
            stop_sequences: Custom stop sequences.
            json_mode: If True, enforce JSON output format.

        Returns:
            LLMResponse with the generated content.

        Raises:
            ProviderError: On API failure.
            RateLimitError: If rate limited.

        JSON Mode:
            When json_mode=True:
            - OpenAI: Sets response_format={"type": "json_object"}
            - Anthropic: Adds "Respond only with valid JSON" to system prompt
        """
        ...

    def resolve_sampling(
        self, max_tokens: int | None, temperature: float | None
    ) -> tuple[int, float]:
        """Fill unset max_tokens and temperature from the config defaults."""
        return (
            self.config.default_max_tokens if max_tokens is None else max_tokens,
            self.config.default_temperature if temperature is None else temperature,
        )

    @abstractmethod
    def get_model_for_task(self, task: TaskType) -> str:
        """Return the model identifier for a given task.

        Args:
            task: The task type to get the model for.

        Returns:
            Model identifier string.
        """
        ...
