"""Tests for micro status lines."""

import pytest

from career_pathway.schemas.career_assistant import Phase
from career_pathway.services.micro_status import (
    CLASSIFY_STATUS,
    DEFAULT_STATUS,
    RESULT_STATUS,
    micro_status,
)


class TestMicroStatus:
    """Tests for micro_status()."""

    def test_classify_phase(self):
        """Every classification turn gets the triage line."""
        assert micro_status(Phase.CLASSIFY, "edu") == CLASSIFY_STATUS

    def test_result_phase(self):
        """The result turn gets the summarising line."""
        assert micro_status(Phase.RESULT, None) == RESULT_STATUS
        assert RESULT_STATUS.chips == ["Work Now", "Improve Later"]

    @pytest.mark.parametrize(
        "question_id,line",
        [
            ("transport", "Checking travel options…"),
            ("language", "Checking communication & customer comfort…"),
            ("move_away", "Checking what you want to leave behind…"),
            ("warehouse_focus", "Checking warehouse experience type…"),
        ],
    )
    def test_question_specific_lines(self, question_id, line):
        """Known questions get their own line."""
        assert micro_status(Phase.PATH, question_id).line == line

    def test_unknown_question_gets_default(self):
        """Questions without a line get the generic one."""
        assert micro_status(Phase.PATH, "work_style") == DEFAULT_STATUS

    def test_chips_are_copies(self):
        """Returned chips can be changed without affecting later calls."""
        first = micro_status(Phase.PATH, "training_openness")
        first.chips.append("extra")
        assert micro_status(Phase.PATH, "training_openness").chips == [
            "Improve later",
            "Licences",
        ]
