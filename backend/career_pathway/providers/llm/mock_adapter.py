"""Mock LLM provider for testing.

MockLLMProvider enables unit testing of the advisory loop without hitting
real LLM APIs.
"""

from collections.abc import Sequence
from typing import Any

from career_pathway.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    TaskType,
)


class MockLLMProvider(LLMProvider):
    """Mock provider for testing.

    Responses are configured per TaskType. A response may be a string
    (returned on every call), a sequence of strings (returned one per call,
    the last one repeating), or an exception instance (raised on every call).

    Attributes:
        responses: Pre-configured responses keyed by TaskType.
        calls: Record of all method invocations for test assertions.
        last_task: The most recent TaskType used in a call.
    """

    @property
    def provider_name(self) -> str:
        """Return 'mock' for testing."""
        return "mock"

    def __init__(
        self,
        responses: dict[TaskType, str | Sequence[str] | Exception] | None = None,
    ) -> None:
        """Initialize mock provider with optional pre-configured responses.

        Args:
            responses: Dict mapping TaskType to response content. If not provided
                for a task, returns an empty string.
        """
        # No config needed for the mock
        self.responses: dict[TaskType, str | Sequence[str] | Exception] = (
            dict(responses) if responses else {}
        )
        self.calls: list[dict[str, Any]] = []
        self.last_task: TaskType | None = None

    def set_response(
        self, task: TaskType, content: str | Sequence[str] | Exception
    ) -> None:
        """Set or update the response for a specific task type.

        Args:
            task: The TaskType to configure.
            content: Response content, list of contents, or exception to raise.
        """
        self.responses[task] = content

    async def complete(
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
        stop_sequences: list[str] | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Generate a mock completion.

        Records the call for test assertions and returns a pre-configured
        response.

        Args:
            messages: Conversation as list of LLMMessage.
            task: Task type for response lookup.
            max_tokens: Recorded in kwargs.
            temperature: Recorded in kwargs.
            stop_sequences: Recorded in kwargs.
            json_mode: Recorded in kwargs.

        Returns:
            LLMResponse with configured content.

        Raises:
            Exception: The configured exception, if one was set for the task.
        """
        self.calls.append(
            {
                "method": "complete",
                "messages": messages,
                "task": task,
                "kwargs": {
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                    "stop_sequences": stop_sequences,
                    "json_mode": json_mode,
                },
            }
        )
        self.last_task = task

        configured = self.responses.get(task, "")
        if isinstance(configured, Exception):
            raise configured
        if isinstance(configured, str):
            content = configured
        else:
            call_index = len(self.calls_for_task(task)) - 1
            content = configured[min(call_index, len(configured) - 1)]

        return LLMResponse(
            content=content,
            model="mock-model",
            input_tokens=100,
            output_tokens=50,
            finish_reason="stop",
            latency_ms=10,
        )

    def get_model_for_task(self, _task: TaskType) -> str:
        """Return 'mock-model' for any task."""
        return "mock-model"

    def calls_for_task(self, task: TaskType) -> list[dict[str, Any]]:
        """Return recorded calls for one task type.

        Args:
            task: The TaskType to filter on.

        Returns:
            Recorded call dicts in call order.
        """
        return [c for c in self.calls if c["task"] == task]

    def assert_called_with_task(self, task: TaskType) -> None:
        """Test helper to verify a task was called.

        Args:
            task: The TaskType that should have been called.

        Raises:
            AssertionError: If the task was not called.
        """
        tasks_called = [c["task"] for c in self.calls]
        assert task in tasks_called, f"Expected {task}, got {tasks_called}"

    def assert_not_called(self) -> None:
        """Test helper to verify no completion was requested.

        Raises:
            AssertionError: If any call was recorded.
        """
        assert not self.calls, f"Expected no calls, got {len(self.calls)}"
