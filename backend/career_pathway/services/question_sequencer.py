"""Question sequencer.

Pure functions that compute the next unanswered question from a session
state. Nothing here mutates state.

Phase separation is absolute: once a path is set, classification question
ids are never returned, and ``ensure_askable`` rejects them even if some
upstream step asks for one.
"""

import structlog

from career_pathway.schemas.career_assistant import (
    Phase,
    Question,
    SessionState,
)
from career_pathway.services import confidence_scorer
from career_pathway.services.answer_ledger import is_locked
from career_pathway.services.path_sequences import (
    classification_fields,
    preference_fields,
    required_fields,
)
from career_pathway.services.question_catalog import (
    get_question,
    is_classification_question,
)

logger = structlog.get_logger()

DEFAULT_RESULT_THRESHOLD = 0.8


class LockedQuestionError(Exception):
    """Raised when a question that must not be asked is about to be emitted.

    Covers locked (already answered) fields and classification questions
    after the path is set.
    """

    def __init__(self, question_id: str, reason: str) -> None:
        self.question_id = question_id
        self.reason = reason
        super().__init__(f"Question '{question_id}' cannot be asked: {reason}")


def _first_unlocked(state: SessionState, question_ids: list[str]) -> Question | None:
    for question_id in question_ids:
        if not is_locked(state, question_id):
            return get_question(question_id)
    return None


def next_classification_question(state: SessionState) -> Question | None:
    """Return the first unanswered classification question.

    Returns None once a path is set or classification is complete.
    """
    if state.path is not None:
        return None
    return _first_unlocked(state, classification_fields(state.answers))


def classification_complete(state: SessionState) -> bool:
    """True when every applicable classification question is answered."""
    return all(
        is_locked(state, question_id)
        for question_id in classification_fields(state.answers)
    )


def next_path_question(state: SessionState) -> Question | None:
    """Return the first unanswered required question for the path."""
    if state.path is None:
        return None
    return _first_unlocked(state, required_fields(state.path, state.answers))


def next_preference_question(
    state: SessionState,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> Question | None:
    """Return the next preference-gate question, if the gate should run.

    The gate only opens after every required question is answered, and
    only while confidence is below the result threshold.
    """
    if state.path is None or state.preference_gate_done:
        return None
    if not confidence_scorer.required_complete(state):
        return None
    if confidence_scorer.score(state) >= threshold:
        return None
    return _first_unlocked(state, preference_fields(state.path, state.answers))


def preference_gate_finished(
    state: SessionState,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> bool:
    """True when the preference gate has nothing left to ask."""
    if state.path is None or not confidence_scorer.required_complete(state):
        return False
    return next_preference_question(state, threshold) is None


def next_question(
    state: SessionState,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> Question | None:
    """Return the next question for the current phase, or None if done.

    Args:
        state: Current session state.
        threshold: Confidence at which the preference gate closes.

    Returns:
        The next Question, or None when the phase has no more questions.
    """
    if state.phase == Phase.RESULT:
        return None
    if state.phase == Phase.CLASSIFY or state.path is None:
        return next_classification_question(state)
    return next_path_question(state) or next_preference_question(state, threshold)


def ensure_askable(state: SessionState, question: Question) -> Question:
    """Guard a question before it leaves the subsystem.

    Args:
        state: Session state the question will be emitted with.
        question: Question about to be emitted.

    Returns:
        The same question if it may be asked.

    Raises:
        LockedQuestionError: If the field is locked, or it is a
            classification question and the path is already set.
    """
    if is_locked(state, question.id):
        raise LockedQuestionError(question.id, "already answered")
    if state.path is not None and is_classification_question(question.id):
        raise LockedQuestionError(question.id, "classification is complete")
    return question


def next_askable_question(
    state: SessionState,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> Question | None:
    """Return the next question with the emission guard applied.

    Any question the guard rejects is logged and skipped, and the sequencer
    is asked again as if that field were answered. The returned question is
    always safe to emit.
    """
    probe = state
    while True:
        question = next_question(probe, threshold)
        if question is None:
            return None
        try:
            return ensure_askable(state, question)
        except LockedQuestionError as e:
            logger.warning(
                "locked_question_intercepted",
                question_id=e.question_id,
                reason=e.reason,
            )
            probe = probe.model_copy(
                update={"answers": {**probe.answers, question.id: None}}
            )
