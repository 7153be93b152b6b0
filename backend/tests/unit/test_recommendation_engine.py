"""Tests for the recommendation engine.

Tests the per-path generators and the shared result contract:
- 1-3 work-now directions (1-2 for career adjustment)
- improve-later only for users open to training
- exactly two distinct avoid lines
- every direction carries three bullets and follow-up links
"""

import pytest

from career_pathway.schemas.career_assistant import CareerPath, SessionState
from career_pathway.services.direction_catalog import (
    CLEANER,
    CONSTRUCTION,
    DIGITAL,
    HOSPITALITY,
    OFFICE_ADMIN,
    SECURITY,
    WAREHOUSE,
)
from career_pathway.services.recommendation_engine import (
    GENERIC_AVOID,
    _finalize_avoid,
    build_result,
    recommend,
    recommend_career_adjustment,
    recommend_career_redirection,
    recommend_education_entry,
    recommend_experience_transition,
    recommend_first_work_entry,
)


def _ids(directions):
    return [direction.id for direction in directions or []]


class TestFinalizeAvoid:
    """Tests for avoid-line padding."""

    def test_keeps_first_two_distinct(self):
        """Duplicates collapse and only two lines are kept."""
        assert _finalize_avoid(["a", "a", "b", "c"]) == ["a", "b"]

    def test_pads_with_fillers(self):
        """Missing lines come from the fillers in order."""
        assert _finalize_avoid([], "x", "y") == ["x", "y"]

    def test_generic_line_is_last_resort(self):
        """The generic line fills the gap when fillers repeat."""
        assert _finalize_avoid(["x"], "x") == ["x", GENERIC_AVOID]


class TestFirstWorkEntry:
    """Tests for PATH_1 recommendations."""

    def test_entry_level_directions(self, first_work_entry_answers):
        """No limits gives warehouse, hospitality and cleaning."""
        result = recommend_first_work_entry(first_work_entry_answers)

        assert _ids(result.work_now) == [WAREHOUSE, HOSPITALITY, CLEANER]
        assert result.improve_later is None
        assert result.avoid == [
            "Jobs requiring travel between sites",
            "Roles requiring extensive training or qualifications",
        ]

    def test_limits_fall_back_to_defaults(self, first_work_entry_answers):
        """When every candidate is filtered out, defaults are used."""
        answers = {
            **first_work_entry_answers,
            "physical_ability": "health_limitations",
            "people_comfort": "prefer_not",
        }
        result = recommend_first_work_entry(answers)

        assert _ids(result.work_now) == [WAREHOUSE, CLEANER]
        assert result.avoid == [
            "Heavy manual roles with long standing or lifting",
            "Customer-facing roles with constant interaction",
        ]

    def test_training_unlocks_improve_later(self, first_work_entry_answers):
        """Open to training adds licence directions, capped at two."""
        answers = {
            **first_work_entry_answers,
            "training_openness": "yes_short",
            "transport": "car",
        }
        result = recommend_first_work_entry(answers)

        assert _ids(result.improve_later) == [SECURITY, WAREHOUSE]
        assert result.improve_later[0].title == "Security & Facilities (SIA Licence)"


class TestExperienceTransition:
    """Tests for PATH_2 recommendations."""

    def test_customer_pressure_excludes_hospitality(self):
        """Leaving customer pressure removes hospitality from work-now."""
        answers = {
            "goal_gate": "main_job",
            "experience_field": "hospitality_restaurants",
            "change_reason": "burnout_stress",
            "move_away": ["customer_pressure"],
            "physical_ability": "no_limitations",
            "training_openness": "yes_short",
        }
        result = recommend_experience_transition(answers)

        assert HOSPITALITY not in _ids(result.work_now)
        assert _ids(result.work_now) == [SECURITY]
        assert _ids(result.improve_later) == [SECURITY]
        assert result.avoid[0] == "Customer-facing roles with high pressure"
        expected_opening = "With your experience in hospitality restaurants,"
        assert result.summary.startswith(expected_opening)

    def test_trades_build_on_experience(self):
        """Trades experience leads to maintenance and warehouse work."""
        answers = {"goal_gate": "main_job", "experience_field": "trades"}
        result = recommend_experience_transition(answers)

        assert _ids(result.work_now) == ["maintenance-facilities", WAREHOUSE]
        assert result.improve_later is None


class TestEducationEntry:
    """Tests for PATH_3 recommendations."""

    def test_studying_gets_part_time_roles(self):
        """Students get roles that fit around study."""
        answers = {
            "study_status": "studying",
            "people_comfort": "okay_sometimes",
            "physical_ability": "no_limitations",
            "language": "fluent",
        }
        result = recommend_education_entry(answers)

        assert _ids(result.work_now) == [HOSPITALITY, WAREHOUSE, OFFICE_ADMIN]
        assert result.avoid[0] == "Heavy full-time roles that conflict with studies"

    def test_completed_with_training_in_it(self):
        """Completed IT education adds an advanced digital direction."""
        answers = {
            "study_status": "completed",
            "education_field": "it_digital",
            "language": "comfortable",
            "training_openness": "maybe_depends",
        }
        result = recommend_education_entry(answers)

        assert _ids(result.work_now) == [OFFICE_ADMIN, DIGITAL]
        assert result.improve_later[0].title == "Digital & AI-Adjacent Roles (Advanced)"


class TestCareerRedirection:
    """Tests for PATH_4 recommendations."""

    def test_moving_away_from_physical_work(self):
        """Physical directions are filtered when the user leaves physical work."""
        answers = {
            "goal_gate": "main_job",
            "education_field": "it_digital",
            "experience_field": "construction_labour",
            "move_away": ["physical_work"],
            "language": "comfortable",
            "physical_ability": "no_limitations",
            "people_comfort": "okay_sometimes",
        }
        result = recommend_career_redirection(answers)

        assert _ids(result.work_now) == [OFFICE_ADMIN, DIGITAL, HOSPITALITY]
        assert not {WAREHOUSE, CLEANER, CONSTRUCTION} & set(_ids(result.work_now))
        assert result.avoid == [
            "Heavy manual roles with long standing/lifting",
            "Roles that don't leverage your transferable skills",
        ]
        assert "IT/digital" in result.summary


class TestCareerAdjustment:
    """Tests for PATH_5 recommendations."""

    def test_client_facing_under_customer_pressure(self):
        """Client-facing roles under customer pressure move to back-office."""
        answers = {
            "current_role_type": "client_facing",
            "pressure_source": "customer_pressure",
            "language": "fluent",
        }
        result = recommend_career_adjustment(answers)

        assert _ids(result.work_now) == [OFFICE_ADMIN, DIGITAL]
        assert result.work_now[0].title == "Office & Admin Support (Back-Office)"
        assert result.avoid == [
            "Customer-facing roles with high interaction pressure",
            "Entry-level roles that don't leverage your education and experience",
        ]

    def test_work_now_capped_at_two(self):
        """Career adjustment never offers more than two work-now directions."""
        result = recommend_career_adjustment(
            {"current_role_type": "mixed", "language": "fluent"}
        )
        assert len(result.work_now) <= 2


class TestResultContract:
    """Contract checks that hold for every generator."""

    @pytest.mark.parametrize(
        "generator",
        [
            recommend_first_work_entry,
            recommend_experience_transition,
            recommend_education_entry,
            recommend_career_redirection,
            recommend_career_adjustment,
        ],
    )
    @pytest.mark.parametrize(
        "answers",
        [
            {},
            {"physical_ability": "health_limitations", "people_comfort": "prefer_not"},
            {"training_openness": "yes_short", "language": "basic", "transport": "car"},
            {
                "move_away": ["customer_pressure", "physical_work"],
                "goal_gate": "side_income",
            },
        ],
    )
    def test_contract(self, generator, answers):
        """Every result satisfies the shape of a recommendation."""
        result = generator(answers)

        assert 1 <= len(result.work_now) <= 3
        assert len(result.avoid) == 2
        assert result.avoid[0] != result.avoid[1]
        assert result.next_step == "CREATE_CV"
        for direction in [*result.work_now, *(result.improve_later or [])]:
            assert len(direction.why) == 3
            assert len(direction.chips) <= 4
            assert direction.actions is not None


class TestEntryPoints:
    """Tests for recommend() and build_result()."""

    def test_recommend_dispatches_on_path(self, make_session):
        """recommend() uses the generator for the session's path."""
        state = make_session(
            {"current_role_type": "client_facing", "language": "fluent"},
            CareerPath.CAREER_ADJUSTMENT,
        )
        assert _ids(recommend(state).work_now) == [OFFICE_ADMIN, DIGITAL]

    def test_recommend_defaults_to_first_work_entry(self):
        """Without a path the first-work-entry generator is used."""
        result = recommend(SessionState())
        assert _ids(result.work_now) == [WAREHOUSE, HOSPITALITY, CLEANER]

    def test_build_result_applies_preferences(
        self, make_session, first_work_entry_answers
    ):
        """Preference refinement runs on the generated result."""
        state = make_session(
            first_work_entry_answers,
            preferences={"customer_interaction": "prefer_minimal"},
        )
        assert _ids(build_result(state).work_now) == [WAREHOUSE, CLEANER]
