"""Career assistant API router.

This module provides:
- POST /turn: Run one interview turn
- GET /questions/{question_id}: Read a catalog question definition

The endpoint is stateless: the client sends its whole Session State on
every turn and merges ``state_updates`` from the reply.
"""

from fastapi import APIRouter, Request

from career_pathway.agents.interview_graph import run_interview_turn
from career_pathway.api.deps import AdvisorDep, ExtractorDep
from career_pathway.core.config import settings
from career_pathway.core.errors import NotFoundError
from career_pathway.core.rate_limiting import limiter
from career_pathway.core.responses import DataResponse
from career_pathway.schemas.career_assistant import (
    Question,
    TurnRequest,
    TurnResponse,
)
from career_pathway.services.question_catalog import get_question

router = APIRouter()


@router.post("/turn")
@limiter.limit(settings.rate_limit_llm)
async def take_turn(
    request: Request,  # noqa: ARG001
    body: TurnRequest,
    advisor: AdvisorDep,
    extractor: ExtractorDep,
) -> DataResponse[TurnResponse]:
    """Commit the user's answer and return the next step.

    Security: Rate limited, since one turn may make several LLM calls.

    Args:
        request: HTTP request (required by the rate limiter).
        body: Session state, answer and optional free text.
        advisor: Advisory client, or None (injected).
        extractor: Free-text extractor, or None (injected).

    Returns:
        DataResponse with the turn response.

    Raises:
        ValidationError: If the answered question is unknown or the answer
            does not fit it.
    """
    response = await run_interview_turn(
        body,
        advisor=advisor,
        extractor=extractor,
        threshold=settings.result_confidence_threshold,
    )
    return DataResponse(data=response)


@router.get("/questions/{question_id}")
async def read_question(question_id: str) -> DataResponse[Question]:
    """Return the catalog definition of a question.

    Raises:
        NotFoundError: If the question id is unknown.
    """
    question = get_question(question_id)
    if question is None:
        raise NotFoundError("Question", question_id)
    return DataResponse(data=question)
