"""Advisory client: model-phrased turns with a deterministic fallback.

The interview engine decides every question and every result. An advisor
is only asked to phrase the assistant message for that decision, through
one capability interface:

    Advisor.propose(context) -> Proposal | None

``LLMAdvisor`` asks the provider, validates the JSON reply and makes at
most one repair call. ``DeterministicAdvisor`` builds the message from the
engine's own decision and never fails. ``advise`` combines the two: the
model's message is used only when its proposal agrees with the engine,
otherwise the deterministic message is returned.

WHY NEVER RAISE:
A slow, unavailable or confused model must not stall the interview. Every
failure here is logged and degrades to the deterministic message.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import structlog

from career_pathway.core.prompt_sanitization import sanitize_user_text
from career_pathway.prompts.career_advisor import (
    ADVISORY_SYSTEM_PROMPT,
    build_advisory_prompt,
    build_repair_prompt,
)
from career_pathway.providers.config import ProviderConfig
from career_pathway.providers.errors import ProviderError
from career_pathway.providers.llm.base import LLMMessage, LLMProvider, TaskType
from career_pathway.providers.retry import with_retries
from career_pathway.schemas.career_assistant import SessionState
from career_pathway.services.answer_ledger import is_locked, locked_fields
from career_pathway.services.phase_controller import NextAction
from career_pathway.services.question_catalog import is_classification_question
from career_pathway.services.response_validator import (
    extract_json,
    validate_advisory_payload,
)

logger = structlog.get_logger()

RESULT_MESSAGE = "Here are your recommendations:"


# =============================================================================
# Types
# =============================================================================


@dataclass(frozen=True)
class AdvisoryContext:
    """Everything an advisor may look at for one turn.

    Attributes:
        state: Session state after the answer was committed and advanced.
        user_input: The user's answer this turn, as text.
        action: The engine's deterministic next action.
    """

    state: SessionState
    user_input: str
    action: NextAction


@dataclass(frozen=True)
class Proposal:
    """A schema-valid advisory reply, reduced to what is compared.

    Attributes:
        assistant_message: Proposed user-facing message.
        question_id: Proposed next question id, None when done.
        done: Whether the advisor proposed completing the interview.
    """

    assistant_message: str
    question_id: str | None
    done: bool


def deterministic_message(action: NextAction) -> str:
    """Return the rule-based message for an action."""
    if action.done or action.question is None:
        return RESULT_MESSAGE
    return f"Next: {action.question.text}"


def _proposal_from_payload(payload: dict[str, Any]) -> Proposal:
    question = payload.get("question")
    question_id = question.get("id") if isinstance(question, dict) else None
    return Proposal(
        assistant_message=payload["assistant_message"].strip(),
        question_id=question_id,
        done=payload["done"],
    )


# =============================================================================
# Advisors
# =============================================================================


class Advisor(ABC):
    """Capability interface for phrasing a turn."""

    @abstractmethod
    async def propose(self, context: AdvisoryContext) -> Proposal | None:
        """Propose a turn for the context.

        Args:
            context: The committed state and the engine's decision.

        Returns:
            A valid Proposal, or None when no usable proposal exists.
        """
        ...


class DeterministicAdvisor(Advisor):
    """Advisor that mirrors the engine's decision. Always succeeds."""

    async def propose(self, context: AdvisoryContext) -> Proposal:
        action = context.action
        return Proposal(
            assistant_message=deterministic_message(action),
            question_id=action.question.id if action.question else None,
            done=action.done,
        )


class LLMAdvisor(Advisor):
    """Provider-backed advisor with one bounded repair attempt.

    Each call is wrapped in ``with_retries`` for transient provider errors
    and bounded by ``timeout`` overall.
    """

    def __init__(
        self,
        provider: LLMProvider,
        config: ProviderConfig | None = None,
        *,
        timeout: float = 20.0,
        temperature: float = 0.2,
        max_tokens: int = 2000,
        repair_temperature: float = 0.1,
    ) -> None:
        """Initialize the advisor.

        Args:
            provider: LLM provider to call.
            config: Retry policy. Defaults to ProviderConfig().
            timeout: Bound on each call, in seconds.
            temperature: Main call temperature.
            max_tokens: Output budget for both calls.
            repair_temperature: Repair call temperature.
        """
        self.provider = provider
        self.config = config or ProviderConfig()
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.repair_temperature = repair_temperature

    async def _complete(
        self, messages: list[LLMMessage], temperature: float
    ) -> str | None:
        """Run one model call. Returns None on timeout or provider error."""

        async def call() -> str | None:
            response = await self.provider.complete(
                messages=messages,
                task=TaskType.CAREER_ADVISORY,
                max_tokens=self.max_tokens,
                temperature=temperature,
                json_mode=True,
            )
            return response.content

        try:
            return await asyncio.wait_for(
                with_retries(call, self.config), timeout=self.timeout
            )
        except TimeoutError:
            logger.warning("advisory_fallback", reason="timeout")
            return None
        except ProviderError as e:
            logger.warning(
                "advisory_fallback",
                reason="provider_error",
                error_type=type(e).__name__,
            )
            return None

    @staticmethod
    def _check(raw: str | None) -> tuple[dict[str, Any] | None, list[str]]:
        payload = extract_json(raw)
        if payload is None:
            return None, ["response is not a JSON object"]
        return payload, validate_advisory_payload(payload)

    async def propose(self, context: AdvisoryContext) -> Proposal | None:
        state = context.state
        action = context.action
        messages = [
            LLMMessage(role="system", content=ADVISORY_SYSTEM_PROMPT),
            LLMMessage(
                role="user",
                content=build_advisory_prompt(
                    session=_session_payload(state),
                    locked_fields=locked_fields(state),
                    last_question_id=state.last_question_id,
                    user_input=context.user_input,
                    next_question=action.question,
                    done=action.done,
                ),
            ),
        ]

        raw = await self._complete(messages, self.temperature)
        if raw is None:
            return None
        payload, errors = self._check(raw)
        if not errors and payload is not None:
            return _proposal_from_payload(payload)

        logger.warning("advisory_response_invalid", attempt=1, errors=errors)
        logger.info("advisory_repair_attempt", error_count=len(errors))
        messages = [
            *messages,
            LLMMessage(role="assistant", content=raw or "(empty reply)"),
            LLMMessage(
                role="user",
                content=build_repair_prompt(
                    errors=errors, last_question_id=state.last_question_id
                ),
            ),
        ]

        raw = await self._complete(messages, self.repair_temperature)
        if raw is None:
            return None
        payload, errors = self._check(raw)
        if not errors and payload is not None:
            return _proposal_from_payload(payload)

        logger.warning("advisory_response_invalid", attempt=2, errors=errors)
        logger.warning("advisory_fallback", reason="repair_failed")
        return None


def _sanitize_answer(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_user_text(value)
    if isinstance(value, list):
        return [_sanitize_answer(item) for item in value]
    return value


def _session_payload(state: SessionState) -> dict[str, Any]:
    """Serialize the parts of the state the model may see."""
    return {
        "phase": state.phase.value,
        "path": state.path.value if state.path else None,
        "answers": {key: _sanitize_answer(v) for key, v in state.answers.items()},
        "preferences": {
            key: _sanitize_answer(v) for key, v in state.preferences.items()
        },
        "confidence_score": state.confidence_score,
        "asked_question_ids": list(state.asked_question_ids),
    }


# =============================================================================
# Decision
# =============================================================================


def _is_forbidden(state: SessionState, question_id: str) -> bool:
    return (
        is_locked(state, question_id)
        or question_id == state.last_question_id
        or (state.path is not None and is_classification_question(question_id))
    )


async def advise(advisor: Advisor, context: AdvisoryContext) -> str:
    """Return the assistant message for a turn.

    The advisor's message is kept only when its proposal agrees with the
    engine: the same question id, or both done. A proposal naming a
    locked or repeated question is intercepted and logged.

    Args:
        advisor: Advisor to consult.
        context: The committed state and the engine's decision.

    Returns:
        The assistant message to send.
    """
    action = context.action
    fallback = deterministic_message(action)

    proposal = await advisor.propose(context)
    if proposal is None:
        return fallback

    if action.done:
        agrees = proposal.done
    else:
        agrees = (
            not proposal.done
            and action.question is not None
            and proposal.question_id == action.question.id
        )
    if agrees:
        return proposal.assistant_message

    if proposal.question_id and _is_forbidden(context.state, proposal.question_id):
        logger.warning(
            "locked_question_intercepted",
            proposed_question_id=proposal.question_id,
            question_id=action.question.id if action.question else None,
        )
    else:
        logger.info(
            "advisory_proposal_overridden",
            proposed_question_id=proposal.question_id,
            proposed_done=proposal.done,
            done=action.done,
        )
    return fallback
