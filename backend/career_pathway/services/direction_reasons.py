"""Rationale bullets and chips for recommended directions.

Deterministic: every bullet and chip is derived from locked answers and
keywords in the direction id. Each direction gets exactly three bullets
(padded with neutral defaults) and at most four chips.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from career_pathway.services.path_sequences import DRIVING_TRANSPORT

BULLET_COUNT = 3
MAX_CHIPS = 4

DEFAULT_BULLETS: tuple[str, ...] = (
    "Entry-friendly option in the UK",
    "Fits your current preferences",
    "A practical next step",
)

_PRIORITY_BULLETS: tuple[tuple[str, str], ...] = (
    ("stability", "More stable shifts and consistent work"),
    ("flexibility", "Flexible scheduling options available"),
    ("physical_ease", "Lower physical strain requirements"),
    ("better_income", "Better earning potential in this field"),
)

_CUSTOMER_FACING = ("hospitality", "front", "care", "support")
_SIMPLE_COMMUNICATION = ("warehouse", "clean", "security")
_DRIVING = ("driving", "transport")
_NON_PHYSICAL = ("office", "admin", "digital", "security")
_LICENCE_BASED = ("security", "driving", "construction")
_SHIFT_WORK = ("hospitality", "clean", "warehouse")
_LOW_STRAIN = ("warehouse", "clean", "office", "admin")
_HANDS_ON = ("construction", "maintenance")
_FAST_ENTRY = ("warehouse", "clean", "hospitality", "security")

_TRAINING_OPEN = frozenset({"yes_short", "maybe_depends"})


@dataclass(frozen=True)
class Reasons:
    """Bullets and chips for one direction."""

    bullets: list[str]
    chips: list[str]


def _mentions(direction_id: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in direction_id for keyword in keywords)


def _experience_matches(experience_field: Any, direction_id: str) -> bool:
    if not isinstance(experience_field, str):
        return False
    return (
        ("hospitality" in experience_field and "hospitality" in direction_id)
        or ("warehouse" in experience_field and "warehouse" in direction_id)
        or ("trades" in experience_field and _mentions(direction_id, _HANDS_ON))
    )


def _append_unique(items: list[str], item: str) -> None:
    if item not in items:
        items.append(item)


def _bullets(answers: Mapping[str, Any], direction_id: str) -> list[str]:
    bullets: list[str] = []
    priorities = answers.get("priorities")
    if isinstance(priorities, list):
        for priority, bullet in _PRIORITY_BULLETS:
            if priority in priorities:
                _append_unique(bullets, bullet)

    if answers.get("people_comfort") == "comfortable" and _mentions(
        direction_id, _CUSTOMER_FACING
    ):
        _append_unique(bullets, "Matches your comfort with customers")
    if answers.get("language") == "basic" and _mentions(
        direction_id, _SIMPLE_COMMUNICATION
    ):
        _append_unique(bullets, "Simple communication requirements")
    if answers.get("transport") in DRIVING_TRANSPORT and _mentions(
        direction_id, _DRIVING
    ):
        _append_unique(bullets, "Fits your transport access")
    if answers.get("physical_ability") == "prefer_non_physical" and _mentions(
        direction_id, _NON_PHYSICAL
    ):
        _append_unique(bullets, "Lower physical strain")
    if answers.get("training_openness") in _TRAINING_OPEN and _mentions(
        direction_id, _LICENCE_BASED
    ):
        _append_unique(bullets, "Short training unlocks better opportunities")
    if answers.get("goal_gate") == "side_income" and _mentions(
        direction_id, _SHIFT_WORK
    ):
        _append_unique(bullets, "Flexible shifts for side income")
    if _experience_matches(answers.get("experience_field"), direction_id):
        _append_unique(bullets, "Builds on your existing experience")

    for default in DEFAULT_BULLETS:
        if len(bullets) >= BULLET_COUNT:
            break
        _append_unique(bullets, default)
    return bullets[:BULLET_COUNT]


def _chips(answers: Mapping[str, Any], direction_id: str) -> list[str]:
    chips: list[str] = []
    low_strain_wanted = answers.get("physical_ability") in (
        "prefer_non_physical",
        "light_physical",
    )
    if low_strain_wanted and _mentions(direction_id, _LOW_STRAIN):
        _append_unique(chips, "Low physical strain")
    if answers.get("people_comfort") in ("comfortable", "okay_sometimes") and (
        _mentions(direction_id, _CUSTOMER_FACING)
    ):
        _append_unique(chips, "Customer-facing")
    if answers.get("goal_gate") == "side_income" and _mentions(
        direction_id, _SHIFT_WORK
    ):
        _append_unique(chips, "Flexible shifts")
    if answers.get("training_openness") in _TRAINING_OPEN:
        if _mentions(direction_id, _LICENCE_BASED + ("transport",)):
            _append_unique(chips, "Licence-based")
        else:
            _append_unique(chips, "Improve later")
    if answers.get("driving_interest") == "yes" and _mentions(direction_id, _DRIVING):
        _append_unique(chips, "Driving")
    if answers.get("language") == "basic" and _mentions(
        direction_id, _SIMPLE_COMMUNICATION
    ):
        _append_unique(chips, "Simple English")
    if answers.get("experience_field") in ("trades", "construction_labour") and (
        _mentions(direction_id, _HANDS_ON)
    ):
        _append_unique(chips, "Hands-on")
    if answers.get("transport") in ("car", "van_professional") and _mentions(
        direction_id, _DRIVING
    ):
        _append_unique(chips, "Transport-friendly")
    if _mentions(direction_id, ("warehouse", "logistics")):
        _append_unique(chips, "Night shifts")
    if _mentions(direction_id, _FAST_ENTRY):
        _append_unique(chips, "Fast entry")
    return chips[:MAX_CHIPS]


def build_reasons(answers: Mapping[str, Any], direction_id: str) -> Reasons:
    """Build the three bullets and up to four chips for a direction.

    Args:
        answers: Locked answers of the session.
        direction_id: Direction id (kebab or snake case).

    Returns:
        Reasons with exactly three distinct bullets.
    """
    normalized_id = direction_id.lower().replace("_", "-")
    return Reasons(
        bullets=_bullets(answers, normalized_id),
        chips=_chips(answers, normalized_id),
    )
