"""Canonical question catalog.

Static registry of every question the interview can ask, plus answer
normalization against each question's option set.

Classification questions (edu, exp, rel) decide the path. Path questions
are asked in the per-path order defined in path_sequences. Preference-gate
questions (work_style, customer_interaction, driving_interest) only re-rank
the final recommendation.
"""

from typing import Any

from career_pathway.core.errors import ValidationError
from career_pathway.schemas.career_assistant import Question, QuestionOption

# =============================================================================
# Catalog Construction
# =============================================================================


def _question(
    question_id: str,
    text: str,
    options: list[tuple[str, str]],
    *,
    multi: bool = False,
    max_select: int | None = None,
) -> Question:
    return Question(
        id=question_id,
        text=text,
        type="multi" if multi else "single",
        options=[QuestionOption(value=value, label=label) for value, label in options],
        max_select=max_select,
    )


_YES_NO = [("no", "No"), ("yes", "Yes")]

_CATALOG_QUESTIONS: tuple[Question, ...] = (
    # ---- Classification ----
    _question("edu", "Do you have any formal education or qualifications?", _YES_NO),
    _question("exp", "Do you have work experience?", _YES_NO),
    _question(
        "rel",
        "Is your work experience related to your education?",
        [("yes", "Yes"), ("no", "No"), ("not_sure", "Not sure")],
    ),
    # ---- Shared path questions ----
    _question(
        "goal_gate",
        "What are you looking for right now?",
        [
            ("main_job", "A full-time / main job"),
            ("side_income", "A part-time / side income"),
            ("study_work", "Work while studying"),
            ("not_sure", "Not sure"),
        ],
    ),
    _question(
        "priorities",
        "What matters most to you right now? (Pick up to 2)",
        [
            ("stability", "Stability"),
            ("less_stress", "Less stress"),
            ("better_income", "Better income"),
            ("flexibility", "Flexibility"),
            ("physical_ease", "Physical ease"),
            ("any_job_now", "Any job for now"),
        ],
        multi=True,
        max_select=2,
    ),
    _question(
        "physical_ability",
        "What is your physical ability level?",
        [
            ("no_limitations", "No limitations"),
            ("light_physical", "Light physical work only"),
            ("prefer_non_physical", "Prefer non-physical work"),
            ("health_limitations", "Health limitations"),
        ],
    ),
    _question(
        "people_comfort",
        "How comfortable are you working with people?",
        [
            ("prefer_not", "Prefer not to"),
            ("okay_sometimes", "Okay sometimes"),
            ("comfortable", "Comfortable with people"),
        ],
    ),
    _question(
        "language",
        "What is your English language level?",
        [
            ("basic", "Basic"),
            ("simple_instructions", "Can follow simple instructions"),
            ("comfortable", "Comfortable"),
            ("fluent", "Fluent"),
        ],
    ),
    _question(
        "transport",
        "What is your transport situation?",
        [
            ("no_licence", "No licence"),
            ("licence_no_car", "Licence but no car"),
            ("car", "Car"),
            ("van_professional", "Van / professional vehicle"),
        ],
    ),
    _question(
        "training_openness",
        "Are you open to training?",
        [
            ("yes_short", "Yes, short courses or licences"),
            ("maybe_depends", "Maybe, depends on time/cost"),
            ("no_work_soon", "No, I want to work as soon as possible"),
        ],
    ),
    # ---- Experience ----
    _question(
        "experience_field",
        "What field is your work experience in?",
        [
            ("hospitality_restaurants", "Hospitality / restaurants"),
            ("warehouse_logistics", "Warehouse / logistics"),
            ("cleaning", "Cleaning"),
            ("construction_labour", "Construction / labour"),
            ("trades", "Trades (mechanic / tailor / carpentry / skilled)"),
            ("retail_customer", "Retail / customer-facing"),
            ("office_admin", "Office / admin"),
            ("other", "Other (specify)"),
        ],
    ),
    _question("experience_field_other", "Briefly describe your field (1-3 words).", []),
    _question(
        "trade_type",
        "What type of trade?",
        [
            ("mechanic", "Mechanic"),
            ("tailoring", "Tailoring"),
            ("carpentry", "Carpentry"),
            ("electrical_helper", "Electrical helper"),
            ("plumbing_helper", "Plumbing helper"),
            ("other_trade", "Other trade"),
        ],
    ),
    _question(
        "warehouse_focus",
        "What warehouse focus area?",
        [
            ("picking_packing", "Picking / packing"),
            ("forklift_machinery", "Forklift / machinery"),
            ("dispatch_loading", "Dispatch / loading"),
            ("not_sure", "Not sure"),
        ],
    ),
    _question(
        "change_reason",
        "Why do you want to change?",
        [
            ("burnout_stress", "Burnout / stress"),
            ("physical_strain", "Physical strain"),
            ("low_income", "Low income"),
            ("no_growth", "No growth"),
            ("unstable_work", "Unstable work"),
            ("want_different", "Want something different"),
        ],
    ),
    _question(
        "move_away",
        "What do you want to move away from? (Pick up to 2)",
        [
            ("physical_work", "Physical work"),
            ("long_hours", "Long hours"),
            ("customer_pressure", "Customer pressure"),
            ("high_stress", "High stress"),
            ("unstable_income", "Unstable income"),
            ("repetitive_tasks", "Repetitive tasks"),
        ],
        multi=True,
        max_select=2,
    ),
    _question(
        "strengths",
        "What are your main strengths? (Pick up to 2)",
        [
            ("reliability", "Reliability"),
            ("working_under_pressure", "Working under pressure"),
            ("teamwork", "Teamwork"),
            ("speed_efficiency", "Speed / efficiency"),
            ("attention_to_detail", "Attention to detail"),
            ("problem_solving", "Problem solving"),
            ("organisation", "Organisation"),
        ],
        multi=True,
        max_select=2,
    ),
    _question(
        "transferable_strengths",
        "What transferable strengths do you have? (Pick up to 2)",
        [
            ("organisation_planning", "Organisation / planning"),
            ("reliability_consistency", "Reliability / consistency"),
            ("problem_solving", "Problem solving"),
            ("attention_to_detail", "Attention to detail"),
            ("communication", "Communication"),
            ("teamwork", "Teamwork"),
            ("working_under_pressure", "Working under pressure"),
        ],
        multi=True,
        max_select=2,
    ),
    # ---- Education ----
    _question(
        "education_level",
        "What is your education level?",
        [
            ("high_school", "High school"),
            ("college_diploma", "College / diploma"),
            ("university_degree", "University degree"),
            ("postgraduate", "Postgraduate"),
        ],
    ),
    _question(
        "education_field",
        "What field is your education in?",
        [
            ("business_administration", "Business / administration"),
            ("it_digital", "IT / digital"),
            ("engineering", "Engineering"),
            ("design_creative", "Design / creative"),
            ("healthcare_care", "Healthcare / care"),
            ("education", "Education"),
            ("other", "Other (specify)"),
        ],
    ),
    _question("education_field_other", "Briefly describe your field (1-3 words).", []),
    _question(
        "it_focus",
        "What IT focus area?",
        [
            ("it_support_helpdesk", "IT Support / Helpdesk"),
            ("qa_testing", "QA / Testing"),
            ("data_admin", "Data / Admin"),
            ("content_digital_support", "Content / Digital support"),
            ("not_sure", "Not sure"),
        ],
    ),
    _question(
        "care_focus",
        "What care focus area?",
        [
            ("care_support_non_medical", "Care support (non-medical)"),
            ("nhs_support_roles", "NHS support roles"),
            ("admin_in_healthcare", "Admin in healthcare"),
            ("not_sure", "Not sure"),
        ],
    ),
    _question(
        "study_status",
        "What is your current study status?",
        [("studying", "Currently studying"), ("completed", "Completed")],
    ),
    _question(
        "work_during_study",
        "Are you looking to work during your studies?",
        [("yes", "Yes"), ("no", "No"), ("maybe", "Maybe")],
    ),
    # ---- Career adjustment ----
    _question(
        "current_role_type",
        "What type of role are you currently in?",
        [
            ("specialist_technical", "Specialist / technical"),
            ("operational_hands_on", "Operational / hands-on"),
            ("client_facing", "Client-facing"),
            ("supervisory_team_lead", "Supervisory / team lead"),
            ("mixed", "Mixed"),
        ],
    ),
    _question(
        "adjustment_goal",
        "What is your adjustment goal?",
        [
            ("less_stress", "Less stress"),
            ("better_balance", "Better work-life balance"),
            ("stable_income", "More stable income"),
            ("lighter_workload", "Lighter workload"),
            ("different_environment", "Different environment (new company/team)"),
            ("not_sure", "Not sure"),
        ],
    ),
    _question(
        "pressure_source",
        "What is the main source of pressure?",
        [
            ("long_hours", "Long hours"),
            ("high_responsibility", "High responsibility"),
            ("physical_effort", "Physical effort"),
            ("customer_pressure", "Customer pressure"),
            ("tight_deadlines", "Tight deadlines"),
            ("unclear_expectations", "Unclear expectations"),
        ],
    ),
    _question(
        "change_level",
        "What level of change are you looking for?",
        [
            ("small_changes", "Small changes (same field, different environment)"),
            (
                "moderate_changes",
                "Moderate changes (similar role, lighter responsibilities)",
            ),
            ("not_sure", "Not sure"),
        ],
    ),
    # ---- Preference gate ----
    _question(
        "work_style",
        "How do you prefer to work?",
        [
            ("fixed_place", "Fixed place (same location)"),
            ("moving_delivery", "Moving / delivery"),
            ("either", "Either is fine"),
        ],
    ),
    _question(
        "customer_interaction",
        "How do you feel about dealing with customers?",
        [
            ("prefer_minimal", "Prefer minimal interaction"),
            ("comfortable", "Comfortable"),
            ("prefer_customer_facing", "Prefer customer-facing work"),
        ],
    ),
    _question(
        "driving_interest",
        "Are you interested in driving or delivery-type work?",
        [("yes", "Yes"), ("no", "No"), ("not_sure", "Not sure")],
    ),
)

QUESTION_CATALOG: dict[str, Question] = {q.id: q for q in _CATALOG_QUESTIONS}

CLASSIFICATION_QUESTION_IDS: tuple[str, ...] = ("edu", "exp", "rel")

FREE_TEXT_QUESTION_IDS: frozenset[str] = frozenset(
    {"education_field_other", "experience_field_other"}
)

# Longest accepted answer for a free-text-only question
MAX_FREE_TEXT_ANSWER_LENGTH = 100

_CLASSIFICATION_ALIASES: dict[str, str] = {
    "yes": "yes",
    "y": "yes",
    "no": "no",
    "n": "no",
    "not sure": "not_sure",
    "unsure": "not_sure",
    "not_sure": "not_sure",
}


# =============================================================================
# Lookup
# =============================================================================


def get_question(question_id: str) -> Question | None:
    """Return the question definition for an id, or None if unknown."""
    return QUESTION_CATALOG.get(question_id)


def is_classification_question(question_id: str) -> bool:
    """True for edu, exp and rel."""
    return question_id in CLASSIFICATION_QUESTION_IDS


# =============================================================================
# Normalization
# =============================================================================


def normalize_classification_value(value: str) -> str:
    """Normalize a yes/no/not-sure style answer.

    Args:
        value: Raw answer text.

    Returns:
        "yes", "no" or "not_sure" for recognised spellings, otherwise the
        trimmed lower-cased input.
    """
    cleaned = value.strip().lower()
    return _CLASSIFICATION_ALIASES.get(cleaned, cleaned)


def _match_option(question: Question, raw: str) -> str:
    """Resolve one raw selection to an option value by value or label."""
    candidate = raw.strip()
    if question.id in CLASSIFICATION_QUESTION_IDS:
        candidate = normalize_classification_value(candidate)
    lowered = candidate.lower()
    for option in question.options:
        if lowered in (option.value.lower(), option.label.lower()):
            return option.value
    raise ValidationError(
        f"'{candidate}' is not a valid option for question '{question.id}'",
        details=[
            {
                "field": "user_input",
                "question_id": question.id,
                "allowed": question.option_values(),
            }
        ],
    )


def _as_selections(question: Question, raw: Any) -> list[str]:
    if isinstance(raw, str):
        parts = raw.split(",") if question.type == "multi" else [raw]
    elif isinstance(raw, list | tuple):
        parts = [item for item in raw if isinstance(item, str)]
    else:
        raise ValidationError(
            f"Unsupported answer type for question '{question.id}'",
        )
    return [part.strip() for part in parts if part.strip()]


def normalize_answer(question: Question, raw: Any) -> str | list[str] | None:
    """Normalize a raw answer against a question definition.

    Single-select answers become one option value, multi-select answers a
    de-duplicated list of option values in the order given, and
    free-text-only answers the trimmed text.

    Args:
        question: The question being answered.
        raw: String (comma-separated for multi-select) or list of strings.

    Returns:
        The normalized answer, or None when the input carries no answer.

    Raises:
        ValidationError: If a selection matches no option, a single-select
            question receives several selections, or a multi-select
            question receives more than max_select selections.
    """
    if question.free_text_only:
        text = " ".join(_as_selections(question, raw)) if raw is not None else ""
        text = text.strip()[:MAX_FREE_TEXT_ANSWER_LENGTH]
        return text or None

    selections = _as_selections(question, raw) if raw is not None else []
    if not selections:
        return None

    values: list[str] = []
    for selection in selections:
        value = _match_option(question, selection)
        if value not in values:
            values.append(value)

    if question.type == "single":
        if len(values) > 1:
            raise ValidationError(
                f"Question '{question.id}' accepts a single answer",
                details=[{"field": "user_input", "question_id": question.id}],
            )
        return values[0]

    if question.max_select is not None and len(values) > question.max_select:
        raise ValidationError(
            f"Question '{question.id}' accepts at most {question.max_select} answers",
            details=[
                {
                    "field": "user_input",
                    "question_id": question.id,
                    "max_select": question.max_select,
                }
            ],
        )
    return values
