"""Tests for the phase controller.

Tests:
- CLASSIFY -> PATH resolves and locks the path
- PATH -> RESULT requires no question left, confidence and required fields
- advance() is idempotent and never regresses the phase or changes the path
- Client-held RESULT states must pass the result gate
"""

import pytest

from career_pathway.core.errors import ValidationError
from career_pathway.schemas.career_assistant import CareerPath, Phase, SessionState
from career_pathway.services.phase_controller import (
    advance,
    check_client_state,
    next_action,
    result_gate_open,
)


class TestClassifyToPath:
    """Tests for the CLASSIFY -> PATH transition."""

    def test_incomplete_classification_stays(self):
        """Nothing changes until every classification answer is locked."""
        state = SessionState(answers={"edu": "yes"})
        assert advance(state) == state

    def test_resolves_path_once_complete(self):
        """Completing classification enters PATH with the resolved path."""
        state = advance(SessionState(answers={"edu": "yes", "exp": "no"}))

        assert state.phase == Phase.PATH
        assert state.path == CareerPath.EDUCATION_ENTRY
        assert state.classification.education == "yes"
        assert state.classification.experience_related_to_education is None
        assert state.confidence_score == 0.0

    def test_waits_for_rel_when_both_yes(self):
        """Both yes keeps the session in CLASSIFY until rel is answered."""
        state = advance(SessionState(answers={"edu": "yes", "exp": "yes"}))
        assert state.phase == Phase.CLASSIFY

        answers = {**state.answers, "rel": "yes"}
        state = advance(state.model_copy(update={"answers": answers}))
        assert state.path == CareerPath.CAREER_ADJUSTMENT

    def test_path_is_never_changed(self, make_session):
        """A set path survives classification answers that disagree with it."""
        state = make_session(
            {"edu": "no", "exp": "no"}, CareerPath.EXPERIENCE_TRANSITION
        )
        assert advance(state).path == CareerPath.EXPERIENCE_TRANSITION


class TestPathToResult:
    """Tests for the PATH -> RESULT transition."""

    def test_required_complete_opens_preference_gate(self, required_complete_session):
        """At 0.7 confidence the session stays in PATH for the gate."""
        state = advance(required_complete_session)

        assert state.phase == Phase.PATH
        assert state.confidence_score == 0.7
        assert state.preference_gate_done is False
        assert state.result is None

    def test_preference_answer_reaches_result(
        self, make_session, first_work_entry_answers
    ):
        """One preference answer lifts confidence over the threshold."""
        state = make_session({**first_work_entry_answers, "work_style": "fixed_place"})
        state = advance(state)

        assert state.phase == Phase.RESULT
        assert state.confidence_score == 0.85
        assert state.preference_gate_done is True
        assert state.result is not None
        assert state.result.next_step == "CREATE_CV"

    def test_skipped_gate_goes_straight_to_result(
        self, make_session, first_work_entry_answers
    ):
        """PATH_1 with any_job_now needs no preference questions."""
        answers = {**first_work_entry_answers, "priorities": ["any_job_now"]}
        state = make_session(answers)
        state = advance(state)

        assert state.phase == Phase.RESULT
        assert state.confidence_score == 1.0

    def test_no_result_while_required_missing(
        self, make_session, first_work_entry_answers
    ):
        """A missing required field blocks the result, whatever the threshold."""
        answers = dict(first_work_entry_answers)
        del answers["training_openness"]
        state = make_session(answers)

        assert result_gate_open(state, threshold=0.0) is False
        assert advance(state, threshold=0.0).phase == Phase.PATH

    def test_result_gate_needs_path(self):
        """The result gate is closed before classification completes."""
        assert result_gate_open(SessionState(), threshold=0.0) is False


class TestAdvanceInvariants:
    """Tests for idempotence and monotonicity."""

    def test_advance_is_idempotent(self, make_session, first_work_entry_answers):
        """Advancing an advanced state returns an equal state."""
        for answers in (
            {"edu": "no"},
            {"edu": "no", "exp": "no"},
            first_work_entry_answers,
            {**first_work_entry_answers, "work_style": "either"},
        ):
            once = advance(SessionState(answers=answers))
            assert advance(once) == once

    def test_result_phase_is_terminal(self, make_session, first_work_entry_answers):
        """RESULT stays RESULT and keeps its result."""
        state = advance(
            make_session({**first_work_entry_answers, "work_style": "either"})
        )
        again = advance(state)

        assert again.phase == Phase.RESULT
        assert again.result == state.result

    def test_result_phase_without_result_gets_one(
        self, make_session, first_work_entry_answers
    ):
        """A RESULT state missing its payload has one generated."""
        answers = {**first_work_entry_answers, "work_style": "either"}
        state = make_session(answers).model_copy(update={"phase": Phase.RESULT})
        assert advance(state).result is not None


class TestNextAction:
    """Tests for next_action()."""

    def test_path_action_carries_question(self, required_complete_session):
        """In PATH the action names the next question."""
        action = next_action(advance(required_complete_session))

        assert action.done is False
        assert action.question.id == "work_style"
        assert action.result is None

    def test_result_action_is_done(self, make_session, first_work_entry_answers):
        """In RESULT the action is done with the result attached."""
        answers = {**first_work_entry_answers, "work_style": "either"}
        state = advance(make_session(answers))
        action = next_action(state)

        assert action.done is True
        assert action.question is None
        assert action.result == state.result


class TestCheckClientState:
    """Tests for check_client_state()."""

    def test_result_with_closed_gate_rejected(self):
        """A RESULT state with missing required answers is a 400."""
        state = SessionState(
            phase=Phase.RESULT,
            path=CareerPath.EXPERIENCE_TRANSITION,
            answers={"edu": "no", "exp": "yes"},
        )

        with pytest.raises(ValidationError) as exc_info:
            check_client_state(state)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details[0]["confidence_score"] == 0.0
        assert exc_info.value.details[0]["required_complete"] is False

    def test_result_below_threshold_rejected(self, required_complete_session):
        """Required answers alone do not earn RESULT below the threshold."""
        state = required_complete_session.model_copy(update={"phase": Phase.RESULT})

        with pytest.raises(ValidationError):
            check_client_state(state)

    def test_earned_result_accepted(self, make_session, first_work_entry_answers):
        """A RESULT state reached through the gate passes."""
        answers = {**first_work_entry_answers, "work_style": "either"}
        state = advance(make_session(answers))

        assert state.phase == Phase.RESULT
        check_client_state(state)

    def test_path_phase_not_checked(self, make_session):
        """Only RESULT is gated; an early PATH state is a normal session."""
        check_client_state(make_session({"edu": "no", "exp": "no"}))
