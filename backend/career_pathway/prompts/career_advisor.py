"""Career advisor prompt templates.

Contains three prompt sets:
1. Advisory: phrase the next step of the interview as a JSON turn response
2. Repair: correct a malformed advisory response once
3. Free-text extraction: map unstructured text onto allow-listed fields

The advisory model only decorates the deterministic next step. The prompts
hand it the question that will be asked, so a good reply simply agrees.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from career_pathway.core.prompt_sanitization import sanitize_user_text
from career_pathway.schemas.career_assistant import Question
from career_pathway.services.question_catalog import QUESTION_CATALOG

# =============================================================================
# Advisory Prompts
# =============================================================================

# WHY: The system prompt fixes the output contract. Phrasing quality is
# secondary; a reply that breaks the contract is repaired or discarded.

ADVISORY_SYSTEM_PROMPT = """You are a friendly UK careers adviser running a short guided interview.

The interview engine has already decided the next step. Your job is to write
the assistant_message that introduces it and to return the full turn response.

Rules:
1. Respond with a single JSON object and nothing else.
2. assistant_message: at most 2 short sentences. When a question follows,
   lead into it (for example "Thanks. Next question:").
3. Never ask about a field listed under "Locked fields".
4. Never repeat the question listed as "Previous question".
5. Use the "Next question" exactly as given, or set done=true with a result
   only when the engine says the interview is complete.
6. Plain, supportive language. No promises about pay or job offers.

JSON shape:
{
  "path": "PATH_1" | ... | "PATH_5" | null,
  "phase": "CLASSIFY" | "PATH" | "RESULT",
  "assistant_message": string,
  "question": {"id": string, "text": string, "type": "single" | "multi",
               "options": [{"value": string, "label": string}],
               "max_select": number | null} | null,
  "allow_free_text": boolean,
  "state_updates": object,
  "done": boolean,
  "confidence_score": number,
  "result": null | {"summary": string,
                    "work_now": [{"id": string, "title": string, "why": [3 strings]}],
                    "improve_later": [...] | null,
                    "avoid": [2 strings],
                    "next_step": "CREATE_CV"}
}"""

_ADVISORY_USER_TEMPLATE = """Session:
{session_json}

Locked fields: {locked_fields}
Previous question: {last_question_id}

User answer: {user_input}

Engine decision: {decision}
Next question:
{next_question_json}

Write the turn response."""


def _question_payload(question: Question | None) -> str:
    if question is None:
        return "null"
    return json.dumps(question.model_dump(mode="json"), ensure_ascii=False)


def build_advisory_prompt(
    *,
    session: Mapping[str, Any],
    locked_fields: Iterable[str],
    last_question_id: str | None,
    user_input: str,
    next_question: Question | None,
    done: bool,
) -> str:
    """Build the advisory user prompt.

    The user's own text is sanitized; the session payload only carries ids,
    option values and engine-generated text.

    Args:
        session: Serialized session state (phase, path, answers, confidence).
        locked_fields: Ids of answered fields.
        last_question_id: Question asked in the previous turn.
        user_input: The user's latest answer.
        next_question: Question the engine will ask, or None when done.
        done: True if the engine is about to return the result.

    Returns:
        Formatted user prompt string for LLM completion.
    """
    decision = (
        "interview complete, return done=true with a result"
        if done
        else "ask the next question below"
    )
    return _ADVISORY_USER_TEMPLATE.format(
        session_json=json.dumps(session, ensure_ascii=False, default=str),
        locked_fields=", ".join(locked_fields) or "none",
        last_question_id=last_question_id or "none",
        user_input=sanitize_user_text(user_input) or "(no answer)",
        decision=decision,
        next_question_json=_question_payload(next_question),
    )


# =============================================================================
# Repair Prompt
# =============================================================================

_REPAIR_USER_TEMPLATE = """Your previous reply could not be used:
{errors}

Previous question (do not repeat it): {last_question_id}

Return ONLY the corrected JSON object, following every rule and the JSON
shape in the instructions. Keep assistant_message to 1-2 sentences."""


def build_repair_prompt(*, errors: list[str], last_question_id: str | None) -> str:
    """Build the corrective instruction for the single repair attempt.

    Args:
        errors: Validation errors found in the previous reply.
        last_question_id: Question asked in the previous turn.

    Returns:
        Formatted repair prompt string.
    """
    error_lines = "\n".join(f"- {error}" for error in errors) or "- invalid JSON"
    return _REPAIR_USER_TEMPLATE.format(
        errors=error_lines,
        last_question_id=last_question_id or "none",
    )


# =============================================================================
# Free-Text Extraction Prompts
# =============================================================================

EXTRACTION_ALLOWED_FIELDS: tuple[str, ...] = (
    "edu",
    "exp",
    "goal_gate",
    "priorities",
    "physical_ability",
    "people_comfort",
    "language",
    "transport",
    "training_openness",
    "work_style",
    "customer_interaction",
    "driving_interest",
    "experience_field",
    "experience_field_other",
    "change_reason",
    "move_away",
    "strengths",
    "education_level",
    "education_field",
    "education_field_other",
    "transferable_strengths",
    "trade_type",
    "it_focus",
    "care_focus",
    "warehouse_focus",
)

EXTRACTION_SYSTEM_PROMPT = """You extract interview answers from a short piece of user text.

Rules:
1. Only extract fields that are clearly stated or directly implied.
2. Never invent values. Leave a field out when unsure.
3. Only use the fields and values listed below.
4. Never extract a field listed as locked.
5. Respond with JSON only: {"extracted": {"field": value}, "confidence": 0.0-1.0}
   where confidence is your overall certainty about the extraction."""

_EXTRACTION_USER_TEMPLATE = """Allowed fields and values:
{field_lines}

Locked fields (never extract): {locked_fields}

User text:
<user_text>
{free_text}
</user_text>"""


def _field_line(field_id: str) -> str:
    question = QUESTION_CATALOG[field_id]
    if question.free_text_only:
        return f"- {field_id}: free text, 1-3 words"
    values = " | ".join(question.option_values())
    if question.type == "multi":
        return f"- {field_id}: list of up to {question.max_select} from [{values}]"
    return f"- {field_id}: {values}"


def build_extraction_prompt(*, free_text: str, locked_fields: Iterable[str]) -> str:
    """Build the extraction user prompt.

    Locked fields are excluded from the allowed list as well as named, so
    the model is never offered a field that cannot be merged.

    Args:
        free_text: The user's unstructured text.
        locked_fields: Ids of answered fields.

    Returns:
        Formatted user prompt string.
    """
    locked = set(locked_fields)
    field_lines = "\n".join(
        _field_line(field_id)
        for field_id in EXTRACTION_ALLOWED_FIELDS
        if field_id not in locked
    )
    return _EXTRACTION_USER_TEMPLATE.format(
        field_lines=field_lines or "- none",
        locked_fields=", ".join(sorted(locked)) or "none",
        free_text=sanitize_user_text(free_text),
    )
