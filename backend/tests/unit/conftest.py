"""Shared fixtures for unit tests that need a session mid-interview.

Names describe where the session stands in the interview so tests read
as "given a session that has finished its required questions ...".
"""

from collections.abc import Callable
from typing import Any

import pytest

from career_pathway.schemas.career_assistant import CareerPath, Phase, SessionState
from career_pathway.services.path_resolver import classification_snapshot

_FIRST_WORK_ENTRY_ANSWERS: dict[str, Any] = {
    "edu": "no",
    "exp": "no",
    "goal_gate": "main_job",
    "priorities": ["stability"],
    "physical_ability": "no_limitations",
    "people_comfort": "okay_sometimes",
    "language": "comfortable",
    "transport": "no_licence",
    "training_openness": "no_work_soon",
}


@pytest.fixture
def make_session() -> Callable[..., SessionState]:
    """Build a PATH-phase session from answers.

    Returns:
        Function taking (answers, path) and returning a SessionState with
        the classification snapshot filled in.
    """

    def _make(
        answers: dict[str, Any],
        path: CareerPath = CareerPath.FIRST_WORK_ENTRY,
        **extra: Any,
    ) -> SessionState:
        return SessionState(
            phase=Phase.PATH,
            path=path,
            classification=classification_snapshot(answers),
            answers=dict(answers),
            **extra,
        )

    return _make


@pytest.fixture
def first_work_entry_answers() -> dict[str, Any]:
    """Every required PATH_1 answer, with the preference gate still open."""
    return dict(_FIRST_WORK_ENTRY_ANSWERS)


@pytest.fixture
def required_complete_session(
    make_session: Callable[..., SessionState],
    first_work_entry_answers: dict[str, Any],
) -> SessionState:
    """PATH_1 session with every required field locked and no preferences."""
    return make_session(first_work_entry_answers)
