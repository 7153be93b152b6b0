"""Tests for direction rationale bullets and chips."""

from career_pathway.services.direction_catalog import (
    CLEANER,
    DIRECTION_TITLES,
    OFFICE_ADMIN,
    actions_for,
    direction_title,
)
from career_pathway.services.direction_reasons import (
    DEFAULT_BULLETS,
    build_reasons,
)


class TestBuildReasons:
    """Tests for build_reasons()."""

    def test_defaults_when_nothing_applies(self):
        """With no matching answers the neutral defaults are used."""
        reasons = build_reasons({}, "warehouse-logistics")

        assert reasons.bullets == list(DEFAULT_BULLETS)
        assert reasons.chips == ["Night shifts", "Fast entry"]

    def test_priority_bullets_come_first(self):
        """Priorities produce the leading bullets, padded to three."""
        reasons = build_reasons(
            {"priorities": ["flexibility", "stability"]}, "office-admin"
        )
        assert reasons.bullets == [
            "More stable shifts and consistent work",
            "Flexible scheduling options available",
            "Entry-friendly option in the UK",
        ]

    def test_always_three_distinct_bullets(self):
        """Many matching answers are still cut to three bullets."""
        answers = {
            "priorities": ["stability", "better_income"],
            "people_comfort": "comfortable",
            "goal_gate": "side_income",
            "experience_field": "hospitality_restaurants",
        }
        reasons = build_reasons(answers, "hospitality-front")

        assert len(reasons.bullets) == 3
        assert len(set(reasons.bullets)) == 3

    def test_chips_capped_at_four(self):
        """At most four chips are returned, in rule order."""
        answers = {
            "physical_ability": "light_physical",
            "goal_gate": "side_income",
            "training_openness": "yes_short",
            "language": "basic",
        }
        reasons = build_reasons(answers, "warehouse-logistics")

        assert reasons.chips == [
            "Low physical strain",
            "Flexible shifts",
            "Improve later",
            "Simple English",
        ]

    def test_licence_based_chip(self):
        """Training-open users see licence-based directions flagged."""
        answers = {"training_openness": "yes_short"}
        reasons = build_reasons(answers, "security-facilities")
        assert reasons.chips[0] == "Licence-based"

    def test_snake_case_ids_are_normalized(self):
        """Direction ids in snake case match the same keywords."""
        reasons = build_reasons(
            {"experience_field": "hospitality_restaurants"}, "hospitality_front"
        )
        assert "Builds on your existing experience" in reasons.bullets


class TestDirectionCatalog:
    """Tests for titles and follow-up links."""

    def test_title_with_qualifier(self):
        """A qualifier is appended in parentheses."""
        title = direction_title(OFFICE_ADMIN, "Advanced")
        assert title == "Office & Admin Support (Advanced)"

    def test_unknown_title_derived_from_id(self):
        """Unknown ids get a readable title."""
        assert direction_title("pet-care") == "Pet Care"

    def test_aliased_actions(self):
        """Directions whose action key differs still resolve their links."""
        actions = actions_for(CLEANER)
        assert actions.job_finder_url == "/jobs?query=cleaner"
        assert actions.build_path_url == "/build-your-path/cleaning"

    def test_every_catalog_direction_has_actions(self):
        """Each catalog direction maps to a build-your-path page."""
        for direction_id in DIRECTION_TITLES:
            build_path_url = actions_for(direction_id).build_path_url
            assert build_path_url.startswith("/build-your-path/")

    def test_unknown_direction_links(self):
        """Unknown ids get query links built from the title."""
        actions = actions_for("pet-care", "Pet Care")
        assert actions.job_finder_url == "/jobs?query=Pet%20Care"
        assert actions.build_path_url == "/build-your-path?tag=pet-care"
