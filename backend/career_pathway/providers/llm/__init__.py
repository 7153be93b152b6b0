"""LLM provider module.

LLM provider interface and adapters.
"""

from career_pathway.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    TaskType,
)
from career_pathway.providers.llm.claude_adapter import ClaudeAdapter
from career_pathway.providers.llm.mock_adapter import MockLLMProvider
from career_pathway.providers.llm.openai_adapter import OpenAIAdapter

__all__ = [
    # Base types
    "LLMMessage",
    "LLMProvider",
    "LLMResponse",
    "TaskType",
    # Adapters
    "ClaudeAdapter",
    "MockLLMProvider",
    "OpenAIAdapter",
]
