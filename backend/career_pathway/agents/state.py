"""LangGraph state schema for one interview turn.

WHY LANGGRAPH:
A turn is a short pipeline with one loop (free-text extraction feeds back
into the phase controller) and one optional step (the advisory call).
Modelling it as a graph keeps each step a small async node that takes the
state and returns an updated copy, and makes the routing explicit and
testable.

The graph is never checkpointed: the Session State is round-tripped by
the client, so the graph state only lives for the duration of a request.
"""

from typing import TypedDict

from career_pathway.schemas.career_assistant import (
    SessionState,
    TurnRequest,
    TurnResponse,
)
from career_pathway.services.advisory_client import Advisor
from career_pathway.services.free_text_extractor import FreeTextExtractor


class InterviewTurnState(TypedDict, total=False):
    """State carried through the interview turn graph.

    Attributes:
        request: The incoming turn request.
        advisor: Advisor to consult for phrasing, or None to skip.
        extractor: Free-text extractor, or None to skip extraction.
        threshold: Confidence required by the result gate.
        initial_session: Session state exactly as the client sent it.
        session: Working session state, updated by each node.
        answer_text: The user's answer rendered as text (empty if none).
        extraction_done: True once free text has been merged.
        assistant_message: Message chosen by the advisory step.
        response: Final turn response.
    """

    # Inputs
    request: TurnRequest
    advisor: Advisor | None
    extractor: FreeTextExtractor | None
    threshold: float

    # Working state
    initial_session: SessionState
    session: SessionState
    answer_text: str
    extraction_done: bool

    # Output
    assistant_message: str | None
    response: TurnResponse
