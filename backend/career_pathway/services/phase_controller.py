"""Phase controller: the CLASSIFY -> PATH -> RESULT state machine.

``advance`` is a pure, idempotent transition over a SessionState:

- CLASSIFY -> PATH fires once, when no classification question remains.
  The path is resolved and locked and the classification is snapshotted.
- PATH -> RESULT fires when no question remains (preference gate
  included), confidence reaches the threshold and every required field is
  locked. All three conditions must hold.
- RESULT is terminal. A RESULT state without a result gets one generated.
  A client-held RESULT state whose gate is closed is rejected up front.

Phases never regress and a set path is never changed, whatever the input.
"""

from dataclasses import dataclass

import structlog

from career_pathway.core.errors import ValidationError
from career_pathway.schemas.career_assistant import (
    Phase,
    Question,
    RecommendationResult,
    SessionState,
)
from career_pathway.services import confidence_scorer
from career_pathway.services.path_resolver import (
    classification_snapshot,
    resolve_path_from_answers,
)
from career_pathway.services.question_sequencer import (
    DEFAULT_RESULT_THRESHOLD,
    classification_complete,
    next_question,
    preference_gate_finished,
)
from career_pathway.services.recommendation_engine import build_result

logger = structlog.get_logger()


@dataclass(frozen=True)
class NextAction:
    """What the controller will do next for a state.

    Attributes:
        phase: Phase after advancing.
        question: Next question to ask, or None when done.
        done: True when the interview is complete.
        result: Final recommendation when done.
    """

    phase: Phase
    question: Question | None
    done: bool
    result: RecommendationResult | None


def result_gate_open(
    state: SessionState,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> bool:
    """True when a final recommendation may be produced.

    Requires a resolved path (classification complete), every required
    field locked, and confidence at or above the threshold.
    """
    return (
        state.path is not None
        and confidence_scorer.required_complete(state)
        and confidence_scorer.score(state) >= threshold
    )


def check_client_state(
    state: SessionState,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> None:
    """Reject a client-held state that claims a phase it has not earned.

    A RESULT state must pass the result gate on its own answers.

    Raises:
        ValidationError: If the state is in RESULT with the gate closed.
    """
    if state.phase == Phase.RESULT and not result_gate_open(state, threshold):
        raise ValidationError(
            "Session state is in RESULT but the result gate is not open",
            details=[
                {
                    "field": "state.phase",
                    "confidence_score": confidence_scorer.score(state),
                    "required_complete": confidence_scorer.required_complete(state),
                }
            ],
        )


def _enter_path(state: SessionState) -> SessionState:
    path = resolve_path_from_answers(state.answers)
    logger.info("path_resolved", path=path.value)
    return state.model_copy(
        update={
            "phase": Phase.PATH,
            "path": path,
            "classification": classification_snapshot(state.answers),
        }
    )


def advance(
    state: SessionState,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> SessionState:
    """Apply every transition the state qualifies for.

    Args:
        state: Session state after the latest answer was committed.
        threshold: Confidence required by the result gate.

    Returns:
        The advanced state. Calling advance again on the output returns an
        equal state.
    """
    if state.path is None:
        if not classification_complete(state):
            return state
        state = _enter_path(state)
    else:
        update: dict = {}
        if state.phase == Phase.CLASSIFY:
            update["phase"] = Phase.PATH
        if state.classification is None:
            update["classification"] = classification_snapshot(state.answers)
        if update:
            state = state.model_copy(update=update)

    state = state.model_copy(
        update={"confidence_score": confidence_scorer.score(state)}
    )

    if not state.preference_gate_done and preference_gate_finished(state, threshold):
        state = state.model_copy(update={"preference_gate_done": True})

    if state.phase == Phase.RESULT:
        if state.result is None:
            state = state.model_copy(update={"result": build_result(state)})
        return state

    if next_question(state, threshold) is None and result_gate_open(state, threshold):
        logger.info(
            "result_gate_passed",
            path=state.path.value if state.path else None,
            confidence=state.confidence_score,
        )
        state = state.model_copy(
            update={"phase": Phase.RESULT, "result": build_result(state)}
        )
    return state


def next_action(
    state: SessionState,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> NextAction:
    """Return the deterministic next action for an already-advanced state."""
    if state.phase == Phase.RESULT:
        return NextAction(
            phase=Phase.RESULT, question=None, done=True, result=state.result
        )
    return NextAction(
        phase=state.phase,
        question=next_question(state, threshold),
        done=False,
        result=None,
    )
