"""Interview turn LangGraph graph.

LangGraph graph that runs one request/response cycle of the interview:

    commit_answer → advance_phase → [conditional] →
        ├─ free text pending → extract_free_text → advance_phase
        ├─ advisory applies  → consult_advisor → finalize_response
        └─ otherwise         → finalize_response
    finalize_response → END

Ordering matters: the structured answer is committed before anything
else runs, free text is merged only after it, and the response question
is always the controller's own, passed through the emission guard.
"""

from typing import Any

import structlog
from langgraph.graph import END, StateGraph

from career_pathway.agents.state import InterviewTurnState
from career_pathway.core.errors import ValidationError
from career_pathway.schemas.career_assistant import (
    Phase,
    SessionState,
    TurnRequest,
    TurnResponse,
)
from career_pathway.services.advisory_client import (
    Advisor,
    AdvisoryContext,
    advise,
    deterministic_message,
)
from career_pathway.services.answer_ledger import commit, is_locked
from career_pathway.services.free_text_extractor import FreeTextExtractor
from career_pathway.services.micro_status import micro_status
from career_pathway.services.path_sequences import sequence_fields
from career_pathway.services.phase_controller import (
    NextAction,
    advance,
    check_client_state,
    next_action,
)
from career_pathway.services.question_catalog import (
    get_question,
    is_classification_question,
    normalize_answer,
)
from career_pathway.services.question_sequencer import (
    DEFAULT_RESULT_THRESHOLD,
    next_askable_question,
)

logger = structlog.get_logger()


# =============================================================================
# Helpers
# =============================================================================


def _answer_text(request: TurnRequest) -> str:
    if isinstance(request.user_input, list):
        return ", ".join(item for item in request.user_input if item)
    return request.user_input or ""


def _state_updates(before: SessionState, after: SessionState) -> dict[str, Any]:
    """Return the keys whose values changed, with nulls stripped."""
    old = before.model_dump(mode="json")
    new = after.model_dump(mode="json")
    return {
        key: value
        for key, value in new.items()
        if value is not None and old.get(key) != value
    }


def _guarded_action(session: SessionState, threshold: float) -> NextAction:
    action = next_action(session, threshold)
    if action.done:
        return action
    return NextAction(
        phase=action.phase,
        question=next_askable_question(session, threshold),
        done=False,
        result=None,
    )


# =============================================================================
# Node Functions
# =============================================================================


async def commit_answer_node(state: InterviewTurnState) -> InterviewTurnState:
    """Commit the user's structured answer to the ledger.

    The question being answered is ``current_question_id``, falling back
    to the state's ``last_question_id``. Answers to locked questions, to
    classification questions after the path is set, to questions outside
    the active sequence, or arriving in the RESULT phase are skipped
    without error.

    Raises:
        ValidationError: If the client state claims RESULT with the result
            gate closed, the question id is unknown, or the answer does not
            fit the question's options.
    """
    request = state["request"]
    session = request.state
    check_client_state(session, state.get("threshold", DEFAULT_RESULT_THRESHOLD))
    updates: InterviewTurnState = {
        **state,
        "initial_session": session,
        "session": session,
        "answer_text": _answer_text(request),
        "extraction_done": False,
        "assistant_message": None,
    }

    if not request.has_answer():
        return updates

    question_id = request.current_question_id or session.last_question_id
    if question_id is None:
        logger.info("answer_not_committed", reason="no_question")
        return updates

    question = get_question(question_id)
    if question is None:
        raise ValidationError(
            f"Unknown question id '{question_id}'",
            details=[{"field": "current_question_id", "question_id": question_id}],
        )

    skip_reason = None
    if session.phase == Phase.RESULT:
        skip_reason = "interview_complete"
    elif is_locked(session, question_id):
        skip_reason = "field_locked"
    elif session.path is not None and is_classification_question(question_id):
        skip_reason = "classification_complete"
    if skip_reason:
        logger.info(
            "answer_not_committed", question_id=question_id, reason=skip_reason
        )
        return updates

    value = normalize_answer(question, request.user_input)
    if value is None:
        return updates

    if question_id not in sequence_fields(session.path, session.answers):
        logger.info(
            "answer_not_committed", question_id=question_id, reason="not_in_sequence"
        )
        return updates

    return {**updates, "session": commit(session, question_id, value)}


async def advance_phase_node(state: InterviewTurnState) -> InterviewTurnState:
    """Apply every phase transition the committed state qualifies for."""
    threshold = state.get("threshold", DEFAULT_RESULT_THRESHOLD)
    return {**state, "session": advance(state["session"], threshold)}


async def extract_free_text_node(state: InterviewTurnState) -> InterviewTurnState:
    """Merge values mined from free text into unlocked fields."""
    extractor = state["extractor"]
    free_text = state["request"].free_text or ""
    session = await extractor.apply(free_text, state["session"])
    return {**state, "session": session, "extraction_done": True}


async def consult_advisor_node(state: InterviewTurnState) -> InterviewTurnState:
    """Ask the advisor to phrase the controller's decision."""
    session = state["session"]
    threshold = state.get("threshold", DEFAULT_RESULT_THRESHOLD)
    action = _guarded_action(session, threshold)
    message = await advise(
        state["advisor"],
        AdvisoryContext(
            state=session,
            user_input=state["answer_text"],
            action=action,
        ),
    )
    return {**state, "assistant_message": message}


async def finalize_response_node(state: InterviewTurnState) -> InterviewTurnState:
    """Build the turn response from the controller's own next action.

    Records the emitted question in ``asked_question_ids`` and
    ``last_question_id``, and computes ``state_updates`` against the state
    the client sent.
    """
    session = state["session"]
    threshold = state.get("threshold", DEFAULT_RESULT_THRESHOLD)
    action = _guarded_action(session, threshold)
    question = action.question

    if question is not None:
        asked = list(session.asked_question_ids)
        if question.id not in asked:
            asked.append(question.id)
        session = session.model_copy(
            update={"asked_question_ids": asked, "last_question_id": question.id}
        )

    response = TurnResponse(
        path=session.path,
        phase=session.phase,
        assistant_message=(
            state.get("assistant_message") or deterministic_message(action)
        ),
        question=question,
        allow_free_text=session.phase == Phase.PATH and question is not None,
        state_updates=_state_updates(state["initial_session"], session),
        done=action.done,
        confidence_score=session.confidence_score,
        result=action.result,
        status=micro_status(session.phase, question.id if question else None),
    )

    logger.info(
        "interview_turn_complete",
        phase=session.phase.value,
        path=session.path.value if session.path else None,
        question_id=question.id if question else None,
        done=action.done,
        confidence=session.confidence_score,
    )
    return {**state, "session": session, "response": response}


# =============================================================================
# Routing
# =============================================================================


def route_after_advance(state: InterviewTurnState) -> str:
    """Route after the phase controller has run.

    Free text is merged once, only after the path is set and before the
    result. The advisor is consulted only for a turn that started in the
    PATH phase and carried an answer.

    Returns:
        Name of the next node.
    """
    session = state["session"]
    request = state["request"]

    if (
        request.free_text
        and state.get("extractor") is not None
        and not state.get("extraction_done")
        and session.path is not None
        and session.phase != Phase.RESULT
    ):
        return "extract_free_text"

    if (
        state.get("advisor") is not None
        and state["initial_session"].phase == Phase.PATH
        and state["answer_text"]
    ):
        return "consult_advisor"

    return "finalize_response"


# =============================================================================
# Graph Construction
# =============================================================================


def create_interview_graph() -> StateGraph:
    """Create the interview turn LangGraph graph.

    Graph structure:
        commit_answer → advance_phase → [conditional] →
            ├─ extract_free_text → advance_phase
            ├─ consult_advisor → finalize_response → END
            └─ finalize_response → END

    Returns:
        Configured StateGraph (not compiled).
    """
    graph = StateGraph(InterviewTurnState)

    graph.add_node("commit_answer", commit_answer_node)
    graph.add_node("advance_phase", advance_phase_node)
    graph.add_node("extract_free_text", extract_free_text_node)
    graph.add_node("consult_advisor", consult_advisor_node)
    graph.add_node("finalize_response", finalize_response_node)

    graph.set_entry_point("commit_answer")
    graph.add_edge("commit_answer", "advance_phase")

    graph.add_conditional_edges(
        "advance_phase",
        route_after_advance,
        {
            "extract_free_text": "extract_free_text",
            "consult_advisor": "consult_advisor",
            "finalize_response": "finalize_response",
        },
    )

    # Extraction may unlock a transition, so the controller runs again
    graph.add_edge("extract_free_text", "advance_phase")
    graph.add_edge("consult_advisor", "finalize_response")
    graph.add_edge("finalize_response", END)

    return graph


# =============================================================================
# Singleton Graph Instance
# =============================================================================

_interview_graph: StateGraph | None = None


def get_interview_graph() -> StateGraph:
    """Get the compiled interview graph.

    Returns:
        Compiled graph ready for invocation.
    """
    global _interview_graph
    if _interview_graph is None:
        _interview_graph = create_interview_graph().compile()
    return _interview_graph


def reset_interview_graph() -> None:
    """Reset the interview graph singleton.

    Useful for testing to ensure clean state.
    """
    global _interview_graph
    _interview_graph = None


# =============================================================================
# Convenience Functions
# =============================================================================


async def run_interview_turn(
    request: TurnRequest,
    *,
    advisor: Advisor | None = None,
    extractor: FreeTextExtractor | None = None,
    threshold: float = DEFAULT_RESULT_THRESHOLD,
) -> TurnResponse:
    """Run one interview turn.

    Args:
        request: The client's turn request.
        advisor: Advisor for phrasing. None keeps deterministic messages.
        extractor: Free-text extractor. None ignores free text.
        threshold: Confidence required by the result gate.

    Returns:
        The turn response.

    Raises:
        ValidationError: If the answered question is unknown or the answer
            does not fit it.

    Example:
        >>> response = await run_interview_turn(TurnRequest())
        >>> response.question.id
        'edu'
    """
    initial_state: InterviewTurnState = {
        "request": request,
        "advisor": advisor,
        "extractor": extractor,
        "threshold": threshold,
    }

    graph = get_interview_graph()
    final_state = await graph.ainvoke(initial_state)
    return final_state["response"]
