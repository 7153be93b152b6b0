"""Advisory response validation.

Parses the advisory model's raw text into JSON and checks it against the
turn-response contract. Validation returns a list of error strings rather
than raising: an invalid proposal is an expected outcome that triggers the
repair call, not an exception.
"""

import json
import re
from typing import Any

from career_pathway.services.question_catalog import FREE_TEXT_QUESTION_IDS

REQUIRED_KEYS: tuple[str, ...] = (
    "path",
    "phase",
    "assistant_message",
    "question",
    "allow_free_text",
    "state_updates",
    "done",
)

VALID_PHASES = frozenset({"CLASSIFY", "PATH", "RESULT"})
VALID_QUESTION_TYPES = frozenset({"single", "multi"})

MAX_MESSAGE_SENTENCES = 2
# Messages shorter than this are taken to be a bare "Next: ..." lead-in
_SHORT_MESSAGE_LENGTH = 30

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_BRACE_SPAN = re.compile(r"\{.*\}", re.DOTALL)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


# =============================================================================
# JSON Extraction
# =============================================================================


def _try_parse(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_json(raw: str | None) -> dict[str, Any] | None:
    """Extract a JSON object from model output.

    Tries a direct parse, then the contents of a fenced code block, then
    the outermost ``{...}`` span.

    Args:
        raw: Raw model output.

    Returns:
        The parsed object, or None if no JSON object could be recovered.
    """
    if not raw or not raw.strip():
        return None

    text = raw.strip()
    parsed = _try_parse(text)
    if parsed is not None:
        return parsed

    fenced = _FENCED_JSON.search(text)
    if fenced:
        parsed = _try_parse(fenced.group(1))
        if parsed is not None:
            return parsed

    span = _BRACE_SPAN.search(text)
    if span:
        return _try_parse(span.group(0))
    return None


# =============================================================================
# Assistant Message
# =============================================================================


def count_sentences(message: str) -> int:
    """Count sentences, splitting on runs of . ! ?"""
    return len([part for part in _SENTENCE_SPLIT.split(message) if part.strip()])


def validate_assistant_message(message: Any, has_question: bool) -> list[str]:
    """Check the assistant message is short and points at the question.

    Args:
        message: Proposed assistant_message.
        has_question: Whether the proposal carries a next question.

    Returns:
        List of error strings (empty if valid).
    """
    if not isinstance(message, str) or not message.strip():
        return ["assistant_message must be a non-empty string"]

    sentences = count_sentences(message)
    if sentences > MAX_MESSAGE_SENTENCES:
        return [f"assistant_message has {sentences} sentences (max 2)"]

    if has_question and sentences > 1:
        lowered = message.lower()
        refers_to_question = (
            "next" in lowered
            or "question" in lowered
            or len(lowered) < _SHORT_MESSAGE_LENGTH
        )
        if not refers_to_question:
            return ["assistant_message does not lead into the next question"]
    return []


# =============================================================================
# Payload Schema
# =============================================================================


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _validate_question(question: Any, done: Any) -> list[str]:
    if question is None:
        return ["question is required when done is false"] if done is False else []
    if not isinstance(question, dict):
        return ["question must be an object or null"]

    errors: list[str] = []
    if not isinstance(question.get("id"), str) or not question.get("id"):
        errors.append("question.id must be a non-empty string")
    if not isinstance(question.get("text"), str):
        errors.append("question.text must be a string")
    if question.get("type") not in VALID_QUESTION_TYPES:
        errors.append("question.type must be 'single' or 'multi'")

    options = question.get("options")
    if not isinstance(options, list):
        errors.append("question.options must be a list")
    else:
        for option in options:
            if not (
                isinstance(option, dict)
                and isinstance(option.get("value"), str)
                and isinstance(option.get("label"), str)
            ):
                errors.append("each option needs string value and label")
                break

    max_select = question.get("max_select")
    if max_select is not None and (
        isinstance(max_select, bool) or not isinstance(max_select, int)
    ):
        errors.append("question.max_select must be an integer when present")
    return errors


def _validate_directions(directions: Any, name: str) -> list[str]:
    if not isinstance(directions, list) or not 1 <= len(directions) <= 3:
        return [f"result.{name} must hold 1-3 directions"]
    for direction in directions:
        if not isinstance(direction, dict):
            return [f"result.{name} entries must be objects"]
        if not isinstance(direction.get("id"), str) or not isinstance(
            direction.get("title"), str
        ):
            return [f"result.{name} directions need string id and title"]
        why = direction.get("why")
        if not _is_str_list(why) or len(why) != 3:
            return [f"result.{name} directions need exactly 3 why bullets"]
    return []


def _validate_result(result: Any) -> list[str]:
    if not isinstance(result, dict):
        return ["result is required when done is true"]

    errors: list[str] = []
    if not isinstance(result.get("summary"), str):
        errors.append("result.summary must be a string")
    if not isinstance(result.get("next_step"), str):
        errors.append("result.next_step must be a string")
    avoid = result.get("avoid")
    if not _is_str_list(avoid) or len(avoid) != 2:
        errors.append("result.avoid must hold exactly 2 entries")
    errors.extend(_validate_directions(result.get("work_now"), "work_now"))
    if result.get("improve_later") is not None:
        errors.extend(_validate_directions(result["improve_later"], "improve_later"))
    return errors


def validate_advisory_payload(payload: Any) -> list[str]:
    """Check an advisory proposal against the turn-response contract.

    Args:
        payload: Parsed JSON proposal.

    Returns:
        List of error strings (empty if valid).
    """
    if not isinstance(payload, dict):
        return ["response must be a JSON object"]

    missing = [key for key in REQUIRED_KEYS if key not in payload]
    if missing:
        return [f"missing required keys: {', '.join(missing)}"]

    errors: list[str] = []
    done = payload["done"]
    if not isinstance(done, bool):
        errors.append("done must be a boolean")
    if not isinstance(payload["allow_free_text"], bool):
        errors.append("allow_free_text must be a boolean")
    if payload["phase"] not in VALID_PHASES:
        errors.append("phase must be CLASSIFY, PATH or RESULT")
    if payload["path"] is not None and not isinstance(payload["path"], str):
        errors.append("path must be a string or null")
    if not isinstance(payload["state_updates"], dict):
        errors.append("state_updates must be an object")

    confidence = payload.get("confidence_score")
    if confidence is not None and (
        isinstance(confidence, bool)
        or not isinstance(confidence, int | float)
        or not 0.0 <= confidence <= 1.0
    ):
        errors.append("confidence_score must be a number in [0, 1]")

    question = payload["question"]
    errors.extend(_validate_question(question, done))
    if done is True:
        errors.extend(_validate_result(payload.get("result")))
        if question is not None:
            errors.append("question must be null when done is true")
    elif done is False:
        if payload.get("result") is not None:
            errors.append("result must be null when done is false")
        # Options may only be empty for free-text-only questions
        if (
            isinstance(question, dict)
            and isinstance(question.get("options"), list)
            and not question["options"]
            and question.get("id") not in FREE_TEXT_QUESTION_IDS
        ):
            errors.append("question.options must not be empty when done is false")

    errors.extend(
        validate_assistant_message(
            payload["assistant_message"], has_question=isinstance(question, dict)
        )
    )
    return errors
