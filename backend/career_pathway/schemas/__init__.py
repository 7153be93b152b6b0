"""Pydantic request/response schemas for API endpoints."""

from career_pathway.schemas.career_assistant import (
    CareerPath,
    Classification,
    Direction,
    DirectionActions,
    MicroStatus,
    Phase,
    Question,
    QuestionOption,
    RecommendationResult,
    SessionState,
    TurnRequest,
    TurnResponse,
)

__all__ = [
    # Enums
    "CareerPath",
    "Phase",
    # Questions
    "Question",
    "QuestionOption",
    # Recommendation
    "Direction",
    "DirectionActions",
    "RecommendationResult",
    # Session state
    "Classification",
    "SessionState",
    # Turn contract
    "MicroStatus",
    "TurnRequest",
    "TurnResponse",
]
