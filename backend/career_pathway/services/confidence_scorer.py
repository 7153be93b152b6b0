"""Confidence scorer.

Completion confidence for the active path:

    score = 0.7 * (required answered / required total)
          + 0.3 * (preferences answered / preferences total)

When a path has no preference questions the full weight falls on the
required fields. With no path yet the score is 0.0. Scores are rounded to
three decimals so that 0.7 + 0.1 compares as 0.8 at the result gate.
"""

from dataclasses import dataclass

from career_pathway.schemas.career_assistant import SessionState
from career_pathway.services.path_sequences import preference_fields, required_fields

REQUIRED_WEIGHT = 0.7
PREFERENCE_WEIGHT = 0.3

_SCORE_PRECISION = 3


@dataclass(frozen=True)
class ConfidenceBreakdown:
    """Counts behind a confidence score.

    Attributes:
        required_answered: Required fields that are locked.
        required_total: Required fields for the path (conditionals expanded).
        preference_answered: Preference-gate fields that are locked.
        preference_total: Preference-gate fields for the path.
        score: Weighted confidence in [0, 1].
    """

    required_answered: int
    required_total: int
    preference_answered: int
    preference_total: int
    score: float


def breakdown(state: SessionState) -> ConfidenceBreakdown:
    """Compute the confidence score with its underlying counts."""
    if state.path is None:
        return ConfidenceBreakdown(0, 0, 0, 0, 0.0)

    answers = state.answers
    required = required_fields(state.path, answers)
    preferences = preference_fields(state.path, answers)

    required_answered = sum(1 for field_id in required if field_id in answers)
    preference_answered = sum(1 for field_id in preferences if field_id in answers)

    required_ratio = required_answered / len(required) if required else 1.0
    if preferences:
        raw = (
            REQUIRED_WEIGHT * required_ratio
            + PREFERENCE_WEIGHT * preference_answered / len(preferences)
        )
    else:
        raw = required_ratio

    return ConfidenceBreakdown(
        required_answered=required_answered,
        required_total=len(required),
        preference_answered=preference_answered,
        preference_total=len(preferences),
        score=round(min(1.0, raw), _SCORE_PRECISION),
    )


def score(state: SessionState) -> float:
    """Return the completion confidence for the session's path."""
    return breakdown(state).score


def required_complete(state: SessionState) -> bool:
    """True once every required field of the path is locked."""
    if state.path is None:
        return False
    return all(
        field_id in state.answers
        for field_id in required_fields(state.path, state.answers)
    )
