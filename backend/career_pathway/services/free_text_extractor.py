"""Free-text extraction service.

Mines optional free-form text for answers to allow-listed fields.

WHY TWO STEPS:
- ``extract_fields`` talks to the model and may fail or time out. It never
  raises; an unavailable model simply yields an empty extraction.
- ``merge_extraction`` is pure. It applies the confidence threshold and the
  locking rule, so structured answers always win over inferred ones.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import structlog

from career_pathway.core.errors import ValidationError
from career_pathway.prompts.career_advisor import (
    EXTRACTION_ALLOWED_FIELDS,
    EXTRACTION_SYSTEM_PROMPT,
    build_extraction_prompt,
)
from career_pathway.providers.errors import ProviderError
from career_pathway.providers.llm.base import LLMMessage, LLMProvider, TaskType
from career_pathway.schemas.career_assistant import SessionState
from career_pathway.services.answer_ledger import commit, is_locked, locked_fields
from career_pathway.services.path_sequences import sequence_fields
from career_pathway.services.question_catalog import (
    get_question,
    normalize_answer,
)
from career_pathway.services.response_validator import extract_json

logger = structlog.get_logger()

DEFAULT_MIN_CONFIDENCE = 0.6

__all__ = [
    "EXTRACTION_ALLOWED_FIELDS",
    "ExtractionResult",
    "FreeTextExtractor",
    "extract_fields",
    "merge_extraction",
    "parse_extraction",
]


@dataclass(frozen=True)
class ExtractionResult:
    """Field/value pairs proposed by the model.

    Attributes:
        fields: Proposed raw values keyed by allow-listed field id.
        confidence: Model's overall certainty in [0, 1].
    """

    fields: dict[str, Any] = field(default_factory=dict)
    confidence: float = 0.0

    @property
    def is_empty(self) -> bool:
        """True when nothing was proposed."""
        return not self.fields


EMPTY_EXTRACTION = ExtractionResult()


# =============================================================================
# Parsing
# =============================================================================


def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    return min(max(float(value), 0.0), 1.0)


def parse_extraction(raw: str | None) -> ExtractionResult:
    """Parse the extraction reply.

    Fields outside the allow-list are dropped here; values are validated
    later, at merge time.

    Args:
        raw: Raw model output.

    Returns:
        ExtractionResult, empty if the reply is not a usable JSON object.
    """
    payload = extract_json(raw)
    if payload is None:
        return EMPTY_EXTRACTION

    extracted = payload.get("extracted")
    if not isinstance(extracted, dict):
        return EMPTY_EXTRACTION

    fields = {
        field_id: value
        for field_id, value in extracted.items()
        if field_id in EXTRACTION_ALLOWED_FIELDS and value not in (None, "", [])
    }
    return ExtractionResult(
        fields=fields,
        confidence=_coerce_confidence(payload.get("confidence")),
    )


# =============================================================================
# Model Call
# =============================================================================


async def extract_fields(
    provider: LLMProvider,
    free_text: str,
    state: SessionState,
    *,
    timeout: float,
    temperature: float = 0.1,
    max_tokens: int = 500,
) -> ExtractionResult:
    """Ask the model to map free text onto allow-listed fields.

    Args:
        provider: LLM provider to call.
        free_text: The user's unstructured text.
        state: Current session state (locked fields are excluded).
        timeout: Bound on the call, in seconds.
        temperature: Sampling temperature.
        max_tokens: Output budget.

    Returns:
        The parsed extraction. Empty on timeout, provider error or an
        unusable reply.
    """
    prompt = build_extraction_prompt(
        free_text=free_text,
        locked_fields=locked_fields(state),
    )
    messages = [
        LLMMessage(role="system", content=EXTRACTION_SYSTEM_PROMPT),
        LLMMessage(role="user", content=prompt),
    ]

    try:
        response = await asyncio.wait_for(
            provider.complete(
                messages=messages,
                task=TaskType.FREE_TEXT_EXTRACTION,
                max_tokens=max_tokens,
                temperature=temperature,
                json_mode=True,
            ),
            timeout=timeout,
        )
    except TimeoutError:
        logger.warning("free_text_extraction_failed", reason="timeout")
        return EMPTY_EXTRACTION
    except ProviderError as e:
        logger.warning(
            "free_text_extraction_failed",
            reason="provider_error",
            error_type=type(e).__name__,
        )
        return EMPTY_EXTRACTION

    result = parse_extraction(response.content)
    logger.debug(
        "free_text_extraction_complete",
        field_count=len(result.fields),
        confidence=result.confidence,
    )
    return result


# =============================================================================
# Merge
# =============================================================================


def merge_extraction(
    state: SessionState,
    result: ExtractionResult,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> SessionState:
    """Merge extracted values into the answers of unlocked fields.

    Args:
        state: Session state after the structured answer was committed.
        result: Extraction to merge.
        min_confidence: Overall confidence required to merge anything.

    Returns:
        A new SessionState, or the same state when nothing was merged.
    """
    if result.is_empty:
        return state

    if result.confidence < min_confidence:
        logger.info(
            "free_text_extraction_discarded",
            reason="low_confidence",
            confidence=result.confidence,
            field_count=len(result.fields),
        )
        return state

    merged: list[str] = []
    # A conditional follow-up joins the sequence only once its parent is
    # merged, so fields outside it are retried until a pass merges nothing
    pending = dict(result.fields)
    progressed = True
    while pending and progressed:
        progressed = False
        for field_id, raw_value in list(pending.items()):
            if is_locked(state, field_id):
                del pending[field_id]
                logger.info(
                    "free_text_extraction_discarded",
                    reason="field_locked",
                    field_id=field_id,
                )
                continue

            if field_id not in sequence_fields(state.path, state.answers):
                continue
            del pending[field_id]

            question = get_question(field_id)
            if question is None:
                continue
            try:
                value = normalize_answer(question, raw_value)
            except ValidationError:
                logger.info(
                    "free_text_extraction_discarded",
                    reason="invalid_value",
                    field_id=field_id,
                )
                continue
            if value is None:
                continue

            state = commit(state, field_id, value)
            merged.append(field_id)
            progressed = True

    for field_id in pending:
        logger.info(
            "free_text_extraction_discarded",
            reason="not_in_sequence",
            field_id=field_id,
        )

    if merged:
        logger.info("free_text_extraction_merged", field_ids=merged)
    return state


# =============================================================================
# Extractor
# =============================================================================


class FreeTextExtractor:
    """Provider-backed extractor bound to its call and merge settings."""

    def __init__(
        self,
        provider: LLMProvider,
        *,
        timeout: float = 10.0,
        temperature: float = 0.1,
        max_tokens: int = 500,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    ) -> None:
        self.provider = provider
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.min_confidence = min_confidence

    async def apply(self, free_text: str, state: SessionState) -> SessionState:
        """Extract from free text and merge into the state.

        Args:
            free_text: The user's unstructured text.
            state: Session state after the structured answer was committed.

        Returns:
            The state with any accepted values merged.
        """
        result = await extract_fields(
            self.provider,
            free_text,
            state,
            timeout=self.timeout,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return merge_extraction(state, result, self.min_confidence)
