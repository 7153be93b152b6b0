"""Path resolver: classification answers -> career path.

| education | experience | related                   | path   |
|-----------|------------|---------------------------|--------|
| no        | no         | -                         | PATH_1 |
| no        | yes        | -                         | PATH_2 |
| yes       | no         | -                         | PATH_3 |
| yes       | yes        | no / not_sure / missing   | PATH_4 |
| yes       | yes        | yes                       | PATH_5 |

Any answer other than "yes" counts as "no", so the table is total.
"""

from collections.abc import Mapping
from typing import Any

from career_pathway.schemas.career_assistant import CareerPath, Classification


def resolve_path(
    education: str | None,
    experience: str | None,
    related: str | None = None,
) -> CareerPath:
    """Map the three classification answers to a career path.

    Args:
        education: Answer to "edu".
        experience: Answer to "exp".
        related: Answer to "rel" (only meaningful when both above are "yes").

    Returns:
        The resolved CareerPath.
    """
    has_education = education == "yes"
    has_experience = experience == "yes"

    if not has_education and not has_experience:
        return CareerPath.FIRST_WORK_ENTRY
    if not has_education:
        return CareerPath.EXPERIENCE_TRANSITION
    if not has_experience:
        return CareerPath.EDUCATION_ENTRY
    if related == "yes":
        return CareerPath.CAREER_ADJUSTMENT
    return CareerPath.CAREER_REDIRECTION


def resolve_path_from_answers(answers: Mapping[str, Any]) -> CareerPath:
    """Resolve the path from the edu/exp/rel entries of an answers mapping."""
    return resolve_path(answers.get("edu"), answers.get("exp"), answers.get("rel"))


def classification_snapshot(answers: Mapping[str, Any]) -> Classification:
    """Build the classification record from locked answers.

    experience_related_to_education is only carried when both education
    and experience are "yes".
    """
    education = answers.get("edu")
    experience = answers.get("exp")
    related = (
        answers.get("rel") if education == "yes" and experience == "yes" else None
    )
    return Classification(
        education=education,
        experience=experience,
        experience_related_to_education=related,
    )
