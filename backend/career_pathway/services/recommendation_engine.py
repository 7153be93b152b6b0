"""Recommendation engine.

One generator per career path turns the locked answers into a
RecommendationResult: 1-3 "work now" directions, optional "improve later"
directions (only for users open to short training), and exactly two
distinct "avoid" lines. The preference refiner then re-ranks the work-now
list without adding directions.

Generators are pure functions over the answers mapping and never fail:
when every candidate is filtered out, a default direction is used.
"""

from collections.abc import Callable, Mapping
from typing import Any

import structlog

from career_pathway.schemas.career_assistant import (
    CareerPath,
    Direction,
    RecommendationResult,
    SessionState,
)
from career_pathway.services.direction_catalog import (
    CARE,
    CLEANER,
    CONSTRUCTION,
    DIGITAL,
    DRIVING,
    HOSPITALITY,
    MAINTENANCE,
    OFFICE_ADMIN,
    SECURITY,
    WAREHOUSE,
    actions_for,
    direction_title,
)
from career_pathway.services.direction_reasons import build_reasons
from career_pathway.services.path_sequences import DRIVING_TRANSPORT
from career_pathway.services.preference_refiner import refine

logger = structlog.get_logger()

Answers = Mapping[str, Any]

MAX_WORK_NOW = 3
MAX_IMPROVE_LATER = 2
AVOID_COUNT = 2

NEXT_STEP = "CREATE_CV"

# Last-resort avoid line when every path-specific filler is already used
GENERIC_AVOID = "Roles with unclear hours or pay"

_TRAINING_OPEN = frozenset({"yes_short", "maybe_depends"})
_PHYSICAL_LIMITS = frozenset({"prefer_non_physical", "health_limitations"})
_COMFORTABLE_LANGUAGE = frozenset({"comfortable", "fluent"})

_FIELD_LABELS: dict[str, str] = {
    "it_digital": "IT/digital",
    "design_creative": "design/creative",
    "healthcare_care": "healthcare/care",
    "hospitality_restaurants": "hospitality/restaurants",
    "warehouse_logistics": "warehouse/logistics",
    "construction_labour": "construction/labour",
    "retail_customer": "retail/customer-facing",
    "office_admin": "office/admin",
}


# =============================================================================
# Helpers
# =============================================================================


class _Directions:
    """Ordered direction list that ignores repeated direction ids."""

    def __init__(self, answers: Answers) -> None:
        self._answers = answers
        self.items: list[Direction] = []

    def add(self, direction_id: str, qualifier: str | None = None) -> None:
        if any(item.id == direction_id for item in self.items):
            return
        reasons = build_reasons(self._answers, direction_id)
        title = direction_title(direction_id, qualifier)
        self.items.append(
            Direction(
                id=direction_id,
                title=title,
                why=reasons.bullets,
                chips=reasons.chips,
                actions=actions_for(direction_id, title),
            )
        )

    def __len__(self) -> int:
        return len(self.items)


def _finalize_avoid(lines: list[str], *fillers: str) -> list[str]:
    """Return exactly two distinct avoid lines, padding with fillers."""
    unique: list[str] = []
    for line in (*lines, *fillers, GENERIC_AVOID):
        if line not in unique:
            unique.append(line)
        if len(unique) == AVOID_COUNT:
            break
    return unique


def _field_text(value: Any) -> str:
    if not isinstance(value, str) or not value:
        return "your field"
    return _FIELD_LABELS.get(value, value.replace("_", " "))


def _multi(answers: Answers, field_id: str) -> list[str]:
    value = answers.get(field_id)
    return value if isinstance(value, list) else []


def _result(
    summary: str,
    work_now: _Directions,
    improve_later: _Directions,
    avoid: list[str],
    work_now_limit: int = MAX_WORK_NOW,
) -> RecommendationResult:
    return RecommendationResult(
        summary=summary,
        work_now=work_now.items[:work_now_limit],
        improve_later=improve_later.items[:MAX_IMPROVE_LATER] or None,
        avoid=avoid,
        next_step=NEXT_STEP,
    )


# =============================================================================
# PATH_1: no education, no experience
# =============================================================================


def recommend_first_work_entry(answers: Answers) -> RecommendationResult:
    """Entry-level roles with immediate openings."""
    physical = answers.get("physical_ability")
    people = answers.get("people_comfort")
    training_open = answers.get("training_openness") in _TRAINING_OPEN
    can_do_physical = physical not in _PHYSICAL_LIMITS

    work_now = _Directions(answers)
    if can_do_physical:
        work_now.add(WAREHOUSE)
    if people != "prefer_not":
        work_now.add(HOSPITALITY)
    if can_do_physical:
        work_now.add(CLEANER)
    if training_open and len(work_now) < MAX_WORK_NOW:
        work_now.add(SECURITY)
    if not work_now:
        work_now.add(WAREHOUSE)
    if len(work_now) == 1:
        work_now.add(CLEANER)

    improve_later = _Directions(answers)
    if training_open:
        improve_later.add(SECURITY, "SIA Licence")
        if physical != "health_limitations":
            improve_later.add(WAREHOUSE, "Forklift Licence")
        if physical in ("no_limitations", "light_physical"):
            improve_later.add(CONSTRUCTION, "CSCS Card")
        if (
            answers.get("transport") in DRIVING_TRANSPORT
            and answers.get("driving_interest") != "no"
        ):
            improve_later.add(DRIVING, "Professional Licence")

    avoid: list[str] = []
    if physical in _PHYSICAL_LIMITS:
        avoid.append("Heavy manual roles with long standing or lifting")
    if people == "prefer_not":
        avoid.append("Customer-facing roles with constant interaction")
    if answers.get("language") == "basic":
        avoid.append("Roles requiring complex communication")
    if answers.get("transport") == "no_licence":
        avoid.append("Jobs requiring travel between sites")

    return _result(
        "Starting from scratch with no formal education or work experience, we "
        "recommend focusing on entry-level roles that offer immediate work "
        "opportunities while building your skills. These directions provide a "
        "solid foundation for your career journey in the UK.",
        work_now,
        improve_later,
        _finalize_avoid(avoid, "Roles requiring extensive training or qualifications"),
    )


# =============================================================================
# PATH_2: experience, no education
# =============================================================================


def recommend_experience_transition(answers: Answers) -> RecommendationResult:
    """Roles that build on the user's work background."""
    goal = answers.get("goal_gate")
    field = answers.get("experience_field")
    change_reason = answers.get("change_reason")
    move_away = _multi(answers, "move_away")
    physical = answers.get("physical_ability")
    training_open = answers.get("training_openness") in _TRAINING_OPEN

    work_now = _Directions(answers)
    if field == "hospitality_restaurants":
        if (
            "customer_pressure" not in move_away
            and answers.get("people_comfort") != "prefer_not"
        ):
            work_now.add(HOSPITALITY)
    elif field in ("trades", "construction_labour"):
        work_now.add(MAINTENANCE)
        if physical not in _PHYSICAL_LIMITS:
            work_now.add(WAREHOUSE)
    elif field == "warehouse_logistics":
        work_now.add(WAREHOUSE)
    elif field == "cleaning":
        work_now.add(CLEANER)
    if goal == "side_income":
        work_now.add(SECURITY)
    if not work_now:
        work_now.add(SECURITY)

    improve_later = _Directions(answers)
    if training_open:
        if change_reason == "burnout_stress" or "high_stress" in move_away:
            improve_later.add(SECURITY, "SIA Licence")
        if (
            change_reason == "low_income" or "unstable_income" in move_away
        ) and physical != "health_limitations":
            improve_later.add(WAREHOUSE, "Forklift Licence")
        if (
            change_reason == "physical_strain" or physical in _PHYSICAL_LIMITS
        ) and answers.get("language") in _COMFORTABLE_LANGUAGE:
            improve_later.add(OFFICE_ADMIN)
        if not improve_later:
            improve_later.add(SECURITY, "SIA Licence")

    avoid: list[str] = []
    if "customer_pressure" in move_away:
        avoid.append("Customer-facing roles with high pressure")
    if physical in _PHYSICAL_LIMITS:
        avoid.append("Heavy manual roles requiring physical strength")
    if "high_stress" in move_away:
        avoid.append("High-pressure fast-paced roles")
    if "unstable_income" in move_away:
        avoid.append("Commission-only or unstable gig work")

    parts: list[str] = []
    if isinstance(field, str) and field:
        parts.append(f"With your experience in {field.replace('_', ' ')},")
    parts.append(
        "we recommend focusing on roles that build on your work background "
        "while addressing your transition goals."
    )
    if goal == "side_income":
        parts.append("These options offer flexible scheduling for side income.")
    else:
        parts.append(
            "These directions provide stable full-time opportunities with clear "
            "progression paths."
        )

    return _result(
        " ".join(parts),
        work_now,
        improve_later,
        _finalize_avoid(
            avoid,
            "Roles requiring extensive training or qualifications",
            "Roles that don't match your experience background",
        ),
    )


# =============================================================================
# PATH_3: education, no experience
# =============================================================================


def recommend_education_entry(answers: Answers) -> RecommendationResult:
    """Part-time roles around study, or entry roles using the education."""
    study_status = answers.get("study_status")
    field = answers.get("education_field")
    people = answers.get("people_comfort")
    physical = answers.get("physical_ability")
    language_ok = answers.get("language") in _COMFORTABLE_LANGUAGE
    training_open = answers.get("training_openness") in _TRAINING_OPEN
    studying = study_status == "studying"

    work_now = _Directions(answers)
    if studying:
        if people != "prefer_not":
            work_now.add(HOSPITALITY)
        if physical not in _PHYSICAL_LIMITS:
            work_now.add(WAREHOUSE)
        if language_ok:
            work_now.add(OFFICE_ADMIN)
    elif study_status == "completed":
        if language_ok:
            work_now.add(OFFICE_ADMIN)
            work_now.add(DIGITAL)
        wants_customers = people == "comfortable" and len(work_now) < 2
        if (not language_ok or wants_customers) and people != "prefer_not":
            work_now.add(HOSPITALITY)
    if not work_now:
        work_now.add(OFFICE_ADMIN if language_ok else WAREHOUSE)

    improve_later = _Directions(answers)
    if training_open:
        if field == "business_administration":
            improve_later.add(OFFICE_ADMIN, "Advanced")
        elif field == "it_digital":
            improve_later.add(DIGITAL, "Advanced")
        elif field == "healthcare_care":
            improve_later.add(CARE)
        elif field == "education":
            improve_later.add(OFFICE_ADMIN, "School Support")
        elif field == "design_creative":
            improve_later.add(DIGITAL, "Creative")
        if not improve_later and language_ok:
            improve_later.add(OFFICE_ADMIN, "Advanced")

    avoid: list[str] = []
    if studying:
        avoid.append("Heavy full-time roles that conflict with studies")
    if physical in _PHYSICAL_LIMITS:
        avoid.append("Heavy manual roles requiring physical strength")
    if people == "prefer_not":
        avoid.append("Customer-facing roles with constant interaction")
    if answers.get("language") == "basic":
        avoid.append("Roles requiring complex communication")

    parts = ["With your education but no work experience,"]
    if studying:
        parts.append(
            "we recommend part-time friendly roles that work around your studies."
        )
    else:
        parts.append(
            "we recommend entry-level roles that leverage your education while "
            "building practical experience."
        )
    if isinstance(field, str) and field:
        background = field.replace("_", " ")
        parts.append(f"These directions align with your {background} background.")

    return _result(
        " ".join(parts),
        work_now,
        improve_later,
        _finalize_avoid(avoid, "Roles requiring extensive training or qualifications"),
    )


# =============================================================================
# PATH_4: education + unrelated experience
# =============================================================================


def recommend_career_redirection(answers: Answers) -> RecommendationResult:
    """Transferable directions that avoid starting from zero."""
    goal = answers.get("goal_gate")
    physical = answers.get("physical_ability")
    people = answers.get("people_comfort")
    language_ok = answers.get("language") in _COMFORTABLE_LANGUAGE
    education_field = answers.get("education_field")
    experience_field = answers.get("experience_field")
    move_away = _multi(answers, "move_away")
    training_open = answers.get("training_openness") in _TRAINING_OPEN

    away_customers = "customer_pressure" in move_away
    away_physical = "physical_work" in move_away
    away_stress = "high_stress" in move_away
    has_physical_limits = physical in _PHYSICAL_LIMITS

    candidates = _Directions(answers)
    if language_ok:
        candidates.add(OFFICE_ADMIN)
        if education_field in ("it_digital", "engineering", "design_creative"):
            candidates.add(DIGITAL)

    if goal == "side_income":
        if not away_physical and physical != "health_limitations":
            candidates.add(SECURITY)
            candidates.add(WAREHOUSE)
        if not away_customers and people != "prefer_not":
            candidates.add(HOSPITALITY)
    elif goal == "main_job":
        if not away_physical and not has_physical_limits:
            candidates.add(WAREHOUSE)
        if not away_customers and people != "prefer_not" and not away_stress:
            candidates.add(HOSPITALITY)

    work_now = _Directions(answers)
    for direction in candidates.items:
        if away_customers and direction.id in (HOSPITALITY, CARE):
            continue
        if away_physical and direction.id in (CONSTRUCTION, WAREHOUSE, CLEANER):
            continue
        if away_stress and direction.id == HOSPITALITY:
            continue
        work_now.items.append(direction)
    if not work_now:
        work_now.add(OFFICE_ADMIN)

    improve_later = _Directions(answers)
    if training_open:
        improve_later.add(SECURITY, "with SIA licence")
        if not away_physical:
            improve_later.add(WAREHOUSE, "with forklift licence")
        if language_ok:
            improve_later.add(DIGITAL, "with basic training")
        if experience_field in ("trades", "construction_labour"):
            improve_later.add(MAINTENANCE)
        if (
            answers.get("transport") in DRIVING_TRANSPORT
            and answers.get("driving_interest") != "no"
        ):
            improve_later.add(DRIVING, "with professional licence")

    avoid: list[str] = []
    if away_physical:
        avoid.append("Heavy manual roles with long standing/lifting")
    if away_customers:
        avoid.append("Customer-facing roles with constant interaction")
    if away_stress:
        avoid.append("High-pressure fast-paced environments")
    if has_physical_limits and not away_physical:
        avoid.append("Heavy manual roles requiring physical strength")
    if answers.get("language") == "basic":
        avoid.append("Roles requiring complex communication")

    summary = (
        "You have education and experience in different fields. We focused on "
        "transferable directions that don't require starting from zero. With your "
        f"education in {_field_text(education_field)} and experience in "
        f"{_field_text(experience_field)}, these recommendations leverage your "
        "existing skills while redirecting your career."
    )
    return _result(
        summary,
        work_now,
        improve_later,
        _finalize_avoid(avoid, "Roles that don't leverage your transferable skills"),
    )


# =============================================================================
# PATH_5: education + related experience
# =============================================================================

_ROLE_TYPE_DIRECTIONS: dict[str, tuple[str, str]] = {
    "specialist_technical": (DIGITAL, OFFICE_ADMIN),
    "operational_hands_on": (MAINTENANCE, OFFICE_ADMIN),
    "client_facing": (OFFICE_ADMIN, DIGITAL),
    "supervisory_team_lead": (OFFICE_ADMIN, DIGITAL),
}

_PRESSURE_AVOID: dict[str, str] = {
    "long_hours": "Shift-heavy roles with irregular hours",
    "tight_deadlines": "High-pressure operational roles with tight deadlines",
    "customer_pressure": "Customer-facing roles with high interaction pressure",
    "physical_effort": "Heavy manual roles requiring significant physical effort",
    "high_responsibility": "High-stakes management roles with heavy responsibility",
    "unclear_expectations": (
        "Roles with unclear expectations and ambiguous responsibilities"
    ),
}

# (role type, pressure source) -> qualifier on the primary direction
_PRIMARY_QUALIFIERS: dict[tuple[str, str], str] = {
    ("operational_hands_on", "physical_effort"): "Lighter Roles",
    ("client_facing", "customer_pressure"): "Back-Office",
    ("supervisory_team_lead", "high_responsibility"): "Coordination",
}


def recommend_career_adjustment(answers: Answers) -> RecommendationResult:
    """Adjustments that reduce pressure without restarting."""
    role_type = answers.get("current_role_type")
    pressure = answers.get("pressure_source")
    language_ok = answers.get("language") in _COMFORTABLE_LANGUAGE
    training_open = answers.get("training_openness") in _TRAINING_OPEN

    work_now = _Directions(answers)
    if isinstance(role_type, str) and role_type in _ROLE_TYPE_DIRECTIONS:
        primary, secondary = _ROLE_TYPE_DIRECTIONS[role_type]
        work_now.add(primary, _PRIMARY_QUALIFIERS.get((role_type, pressure)))
        # Supervisors under high responsibility get the secondary regardless
        forced = (
            role_type == "supervisory_team_lead" and pressure == "high_responsibility"
        )
        if language_ok or forced:
            work_now.add(secondary)
    else:
        work_now.add(OFFICE_ADMIN)
        if language_ok:
            work_now.add(DIGITAL)
    work_now.items = work_now.items[:2]
    if not work_now:
        work_now.add(OFFICE_ADMIN)
    if len(work_now) == 1 and language_ok:
        work_now.add(DIGITAL)

    improve_later = _Directions(answers)
    if training_open:
        if role_type in ("specialist_technical", "mixed"):
            improve_later.add(DIGITAL, "Skills Upgrade")
        if language_ok:
            improve_later.add(OFFICE_ADMIN, "Advanced")
        if role_type in ("operational_hands_on", "mixed"):
            improve_later.add(MAINTENANCE, "Advanced")

    avoid: list[str] = []
    if isinstance(pressure, str) and pressure in _PRESSURE_AVOID:
        avoid.append(_PRESSURE_AVOID[pressure])
    if answers.get("physical_ability") in _PHYSICAL_LIMITS:
        avoid.append("Heavy manual roles requiring physical strength")
    if answers.get("language") == "basic":
        avoid.append(
            "Roles requiring complex communication and advanced language skills"
        )

    return _result(
        "You have education and related experience. We focused on adjustments "
        "that reduce pressure without restarting from zero. These recommendations "
        "build on your existing background while addressing the specific "
        "pressures you're facing.",
        work_now,
        improve_later,
        _finalize_avoid(
            avoid, "Entry-level roles that don't leverage your education and experience"
        ),
        work_now_limit=2,
    )


# =============================================================================
# Entry Points
# =============================================================================

_GENERATORS: dict[CareerPath, Callable[[Answers], RecommendationResult]] = {
    CareerPath.FIRST_WORK_ENTRY: recommend_first_work_entry,
    CareerPath.EXPERIENCE_TRANSITION: recommend_experience_transition,
    CareerPath.EDUCATION_ENTRY: recommend_education_entry,
    CareerPath.CAREER_REDIRECTION: recommend_career_redirection,
    CareerPath.CAREER_ADJUSTMENT: recommend_career_adjustment,
}


def recommend(state: SessionState) -> RecommendationResult:
    """Run the path generator for the session (first-work-entry if unset)."""
    path = state.path or CareerPath.FIRST_WORK_ENTRY
    return _GENERATORS[path](state.answers)


def build_result(state: SessionState) -> RecommendationResult:
    """Generate the final recommendation and apply preference refinement.

    Args:
        state: Session state with the path's required fields locked.

    Returns:
        The refined RecommendationResult.
    """
    result = refine(recommend(state), state.preferences)
    logger.info(
        "recommendation_built",
        path=state.path.value if state.path else None,
        work_now=[direction.id for direction in result.work_now],
        improve_later=[direction.id for direction in result.improve_later or []],
    )
    return result
