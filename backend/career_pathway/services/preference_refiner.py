"""Preference refiner.

Re-ranks the work-now directions of a result using the preference-gate
answers. Refinement only filters and reorders; it never adds a direction.

| preference                                | effect                          |
|-------------------------------------------|---------------------------------|
| work_style = fixed_place                  | drop driving/delivery           |
| work_style = moving_delivery              | promote driving/delivery        |
| customer_interaction = prefer_minimal     | drop customer-facing            |
| customer_interaction = prefer_customer_facing | promote hospitality/front   |
| driving_interest = no                     | drop driving/delivery           |

If every direction is dropped, the first original direction is kept.
"""

from collections.abc import Mapping
from typing import Any

from career_pathway.schemas.career_assistant import Direction, RecommendationResult

MAX_WORK_NOW = 3

_DRIVING_KEYWORDS = ("driving", "transport", "delivery")
_CUSTOMER_FACING_KEYWORDS = ("hospitality", "care", "support", "front")
_HOSPITALITY_KEYWORDS = ("hospitality", "front")


def _matches(direction: Direction, keywords: tuple[str, ...]) -> bool:
    return any(keyword in direction.id for keyword in keywords)


def _without(directions: list[Direction], keywords: tuple[str, ...]) -> list[Direction]:
    return [d for d in directions if not _matches(d, keywords)]


def _promote(directions: list[Direction], keywords: tuple[str, ...]) -> list[Direction]:
    for index, direction in enumerate(directions):
        if _matches(direction, keywords):
            return [direction, *directions[:index], *directions[index + 1 :]]
    return directions


def refine(
    result: RecommendationResult,
    preferences: Mapping[str, Any],
) -> RecommendationResult:
    """Apply preference-gate answers to the work-now directions.

    Args:
        result: Deterministic recommendation.
        preferences: Preference-gate answers (work_style,
            customer_interaction, driving_interest).

    Returns:
        A copy of the result with work_now filtered, reordered and capped.
    """
    directions = list(result.work_now)

    work_style = preferences.get("work_style")
    if work_style == "fixed_place":
        directions = _without(directions, _DRIVING_KEYWORDS)
    elif work_style == "moving_delivery":
        directions = _promote(directions, _DRIVING_KEYWORDS)

    customer_interaction = preferences.get("customer_interaction")
    if customer_interaction == "prefer_minimal":
        directions = _without(directions, _CUSTOMER_FACING_KEYWORDS)
    elif customer_interaction == "prefer_customer_facing":
        directions = _promote(directions, _HOSPITALITY_KEYWORDS)

    if preferences.get("driving_interest") == "no":
        directions = _without(directions, _DRIVING_KEYWORDS)

    if not directions:
        directions = [result.work_now[0]]

    return result.model_copy(update={"work_now": directions[:MAX_WORK_NOW]})
