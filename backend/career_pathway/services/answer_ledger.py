"""Answer ledger: write-once field locking.

A field is locked as soon as its key exists in ``state.answers``, whatever
the value (an empty list or "no" still locks it). Every component checks
``is_locked`` before emitting a question or accepting an inferred value,
which is what keeps the interview from ever re-asking a question.
"""

from typing import Any

from career_pathway.schemas.career_assistant import SessionState

# Answers to these questions are also mirrored into state.preferences
PREFERENCE_GATE_FIELDS: tuple[str, ...] = (
    "work_style",
    "customer_interaction",
    "driving_interest",
)


class FieldLockedError(Exception):
    """Raised when committing to a field that already holds an answer.

    Committing to a locked field is a programming error: call sites must
    check ``is_locked`` first.
    """

    def __init__(self, field_id: str) -> None:
        self.field_id = field_id
        super().__init__(f"Field '{field_id}' is already answered and locked")


def is_locked(state: SessionState, field_id: str) -> bool:
    """Return True if the field has been answered.

    Presence defines locking, not truthiness.
    """
    return field_id in state.answers


def locked_fields(state: SessionState) -> list[str]:
    """Return the ids of all locked fields, in insertion order."""
    return list(state.answers)


def commit(state: SessionState, field_id: str, value: Any) -> SessionState:
    """Record an answer and lock the field.

    Args:
        state: Current session state (not modified).
        field_id: Question id being answered.
        value: Normalized answer value.

    Returns:
        A new SessionState with the answer recorded. Preference-gate
        answers are mirrored into ``preferences``.

    Raises:
        FieldLockedError: If the field is already locked.
    """
    if is_locked(state, field_id):
        raise FieldLockedError(field_id)

    update: dict[str, Any] = {"answers": {**state.answers, field_id: value}}
    if field_id in PREFERENCE_GATE_FIELDS:
        update["preferences"] = {**state.preferences, field_id: value}
    return state.model_copy(update=update)
