"""Canonical question sequences per career path.

Sequences are data: ordered SequenceEntry lists whose optional predicate is
evaluated against the answers locked so far. A conditional follow-up (for
example trade_type after experience_field = trades) directly follows the
question its predicate reads, so it surfaces immediately after that
question is answered.

WHY DATA, NOT BRANCHES:
- Every path can be table-tested without driving a full interview
- The sequencer and confidence scorer share one definition of "required"
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from career_pathway.schemas.career_assistant import CareerPath

Answers = Mapping[str, Any]
Predicate = Callable[[Answers], bool]

# Transport answers that make driving work realistic
DRIVING_TRANSPORT: frozenset[str] = frozenset(
    {"car", "van_professional", "licence_no_car"}
)


# =============================================================================
# Sequence Entries
# =============================================================================


@dataclass(frozen=True)
class SequenceEntry:
    """One position in a canonical sequence.

    Attributes:
        question_id: Question asked at this position.
        predicate: Condition over locked answers; None means always asked.
    """

    question_id: str
    predicate: Predicate | None = None

    def applies(self, answers: Answers) -> bool:
        """True if this entry belongs to the sequence for these answers."""
        return self.predicate is None or self.predicate(answers)


def _equals(field_id: str, value: str) -> Predicate:
    return lambda answers: answers.get(field_id) == value


def _answered_and_not(field_id: str, value: str) -> Predicate:
    return lambda answers: field_id in answers and answers[field_id] != value


def _includes(field_id: str, value: str) -> Predicate:
    def predicate(answers: Answers) -> bool:
        current = answers.get(field_id)
        return isinstance(current, list) and value in current

    return predicate


def _entries(*question_ids: str) -> tuple[SequenceEntry, ...]:
    return tuple(SequenceEntry(qid) for qid in question_ids)


# =============================================================================
# Classification
# =============================================================================

CLASSIFICATION_SEQUENCE: tuple[SequenceEntry, ...] = (
    SequenceEntry("edu"),
    SequenceEntry("exp"),
    SequenceEntry(
        "rel",
        lambda answers: answers.get("edu") == "yes" and answers.get("exp") == "yes",
    ),
)


# =============================================================================
# Path Sequences
# =============================================================================

_EDUCATION_BLOCK: tuple[SequenceEntry, ...] = (
    SequenceEntry("education_level"),
    SequenceEntry("education_field"),
    SequenceEntry("it_focus", _equals("education_field", "it_digital")),
    SequenceEntry("care_focus", _equals("education_field", "healthcare_care")),
    SequenceEntry("education_field_other", _equals("education_field", "other")),
)

_EXPERIENCE_BLOCK: tuple[SequenceEntry, ...] = (
    SequenceEntry("experience_field"),
    SequenceEntry("trade_type", _equals("experience_field", "trades")),
    SequenceEntry(
        "warehouse_focus", _equals("experience_field", "warehouse_logistics")
    ),
    SequenceEntry("experience_field_other", _equals("experience_field", "other")),
)

CANONICAL_SEQUENCES: dict[CareerPath, tuple[SequenceEntry, ...]] = {
    CareerPath.FIRST_WORK_ENTRY: (
        SequenceEntry("goal_gate"),
        SequenceEntry("priorities", _answered_and_not("goal_gate", "not_sure")),
        *_entries(
            "physical_ability",
            "people_comfort",
            "language",
            "transport",
            "training_openness",
        ),
    ),
    CareerPath.EXPERIENCE_TRANSITION: (
        SequenceEntry("goal_gate"),
        *_EXPERIENCE_BLOCK,
        *_entries(
            "change_reason",
            "move_away",
            "strengths",
            "physical_ability",
            "people_comfort",
            "language",
            "transport",
            "training_openness",
        ),
    ),
    CareerPath.EDUCATION_ENTRY: (
        SequenceEntry("goal_gate"),
        *_EDUCATION_BLOCK,
        SequenceEntry("study_status"),
        SequenceEntry("work_during_study", _equals("study_status", "studying")),
        *_entries(
            "physical_ability",
            "people_comfort",
            "language",
            "transport",
            "training_openness",
        ),
    ),
    CareerPath.CAREER_REDIRECTION: (
        SequenceEntry("goal_gate"),
        *_EDUCATION_BLOCK,
        *_EXPERIENCE_BLOCK,
        *_entries(
            "change_reason",
            "move_away",
            "transferable_strengths",
            "language",
            "physical_ability",
            "people_comfort",
            "transport",
            "training_openness",
        ),
    ),
    CareerPath.CAREER_ADJUSTMENT: _entries(
        "goal_gate",
        "current_role_type",
        "adjustment_goal",
        "pressure_source",
        "change_level",
        "language",
        "physical_ability",
        "people_comfort",
        "transport",
        "training_openness",
    ),
}


# =============================================================================
# Preference Gate
# =============================================================================

_DRIVING_INTEREST_ENTRY = SequenceEntry(
    "driving_interest",
    lambda answers: answers.get("transport") in DRIVING_TRANSPORT,
)

PREFERENCE_SEQUENCES: dict[CareerPath, tuple[SequenceEntry, ...]] = {
    CareerPath.FIRST_WORK_ENTRY: (
        *_entries("work_style", "customer_interaction"),
        _DRIVING_INTEREST_ENTRY,
    ),
    CareerPath.EXPERIENCE_TRANSITION: (
        *_entries("work_style", "customer_interaction"),
        _DRIVING_INTEREST_ENTRY,
    ),
    CareerPath.EDUCATION_ENTRY: (
        *_entries("work_style", "customer_interaction"),
        _DRIVING_INTEREST_ENTRY,
    ),
    CareerPath.CAREER_REDIRECTION: (
        *_entries("work_style", "customer_interaction"),
        _DRIVING_INTEREST_ENTRY,
    ),
    CareerPath.CAREER_ADJUSTMENT: _entries("work_style", "customer_interaction"),
}


def _first_work_entry_skips_gate(answers: Answers) -> bool:
    """First-time job seekers who just want any job skip the preference gate.

    The gate still runs if any answer suggests the preferences could change
    the ranking: driving-capable transport, comfort with people, a side-income
    goal, or flexibility / better income among the priorities.
    """
    priorities = answers.get("priorities")
    if not isinstance(priorities, list) or "any_job_now" not in priorities:
        return False
    return not (
        answers.get("transport") in DRIVING_TRANSPORT
        or answers.get("people_comfort") == "comfortable"
        or answers.get("goal_gate") == "side_income"
        or "flexibility" in priorities
        or "better_income" in priorities
    )


# =============================================================================
# Expansion
# =============================================================================


def expand(sequence: tuple[SequenceEntry, ...], answers: Answers) -> list[str]:
    """Return the question ids of a sequence that apply to these answers."""
    return [entry.question_id for entry in sequence if entry.applies(answers)]


def classification_fields(answers: Answers) -> list[str]:
    """Return the classification question ids that apply to these answers."""
    return expand(CLASSIFICATION_SEQUENCE, answers)


def required_fields(path: CareerPath, answers: Answers) -> list[str]:
    """Return the required question ids for a path, conditionals expanded."""
    return expand(CANONICAL_SEQUENCES[path], answers)


def preference_fields(path: CareerPath, answers: Answers) -> list[str]:
    """Return the preference-gate question ids for a path.

    Empty when the first-work-entry skip rule holds.
    """
    if path is CareerPath.FIRST_WORK_ENTRY and _first_work_entry_skips_gate(answers):
        return []
    return expand(PREFERENCE_SEQUENCES[path], answers)


def sequence_fields(path: CareerPath | None, answers: Answers) -> set[str]:
    """Return every question id that may be answered at this point.

    Before the path is set only classification applies. Afterwards it is
    the path's required and preference questions, conditionals expanded.
    """
    if path is None:
        return set(classification_fields(answers))
    return set(required_fields(path, answers)) | set(preference_fields(path, answers))
