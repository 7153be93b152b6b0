"""Micro status lines.

A short, truthful progress line plus keyword chips for every response,
chosen from the phase and the id of the next question.
"""

from career_pathway.schemas.career_assistant import MicroStatus, Phase

CLASSIFY_STATUS = MicroStatus(
    line="Got it. I'll ask a couple of quick basics to place you on the right path.",
    chips=["Quick triage"],
)
RESULT_STATUS = MicroStatus(
    line="Summarising your situation and building your options…",
    chips=["Work Now", "Improve Later"],
)
DEFAULT_STATUS = MicroStatus(line="Selecting next question…", chips=[])

_QUESTION_STATUS: dict[str, tuple[str, list[str]]] = {
    "language": ("Checking communication & customer comfort…", ["Customer-facing"]),
    "people_comfort": (
        "Checking communication & customer comfort…",
        ["Customer-facing"],
    ),
    "transport": ("Checking travel options…", ["Transport"]),
    "training_openness": (
        "Seeing if short licences could open better options…",
        ["Improve later", "Licences"],
    ),
    "physical_ability": ("Checking physical requirements…", ["Low physical strain"]),
    "goal_gate": ("Understanding what you're looking for…", []),
    "priorities": ("Identifying what matters most to you…", []),
    "experience_field": ("Understanding your background…", []),
    "education_level": ("Reviewing your qualifications…", []),
    "education_field": ("Reviewing your qualifications…", []),
    "change_reason": ("Understanding why you're looking to change…", []),
    "move_away": ("Checking what you want to leave behind…", []),
    "strengths": ("Identifying your strengths…", []),
    "transferable_strengths": ("Identifying your strengths…", []),
    "study_status": ("Checking study situation…", []),
    "work_during_study": ("Checking study situation…", []),
    "current_role_type": ("Understanding your current role…", []),
    "adjustment_goal": ("Identifying what you want to adjust…", []),
    "pressure_source": ("Understanding current challenges…", []),
    "change_level": ("Assessing how much change you're open to…", []),
    "trade_type": ("Identifying specific trade…", []),
    "warehouse_focus": ("Checking warehouse experience type…", ["Night shifts"]),
}


def micro_status(phase: Phase, next_question_id: str | None) -> MicroStatus:
    """Return the status line for a response.

    Args:
        phase: Phase of the response.
        next_question_id: Id of the question being asked, None when done.

    Returns:
        MicroStatus with a line and 0-2 chips.
    """
    if phase == Phase.CLASSIFY:
        return CLASSIFY_STATUS
    if phase == Phase.RESULT or next_question_id is None:
        return RESULT_STATUS

    entry = _QUESTION_STATUS.get(next_question_id)
    if entry is None:
        return DEFAULT_STATUS
    line, chips = entry
    return MicroStatus(line=line, chips=list(chips))
