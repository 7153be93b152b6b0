"""Career assistant request/response schemas.

The Session State is owned by the client and round-tripped whole on every
turn; nothing here is persisted server-side. Services treat a SessionState
as a value and return updated copies via ``model_copy(update=...)``.

Models:
- SessionState: phase, classification, path, answers, preferences, result
- Question / QuestionOption: catalog question definitions
- Direction / RecommendationResult: final recommendation payload
- TurnRequest / TurnResponse: the per-turn HTTP contract
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# =============================================================================
# Enums
# =============================================================================


class Phase(str, Enum):
    """Coarse interview stage. Only ever advances CLASSIFY -> PATH -> RESULT."""

    CLASSIFY = "CLASSIFY"
    PATH = "PATH"
    RESULT = "RESULT"

    @property
    def rank(self) -> int:
        """Position in the phase order, used to enforce monotonicity."""
        return _PHASE_ORDER.index(self)


_PHASE_ORDER = (Phase.CLASSIFY, Phase.PATH, Phase.RESULT)


class CareerPath(str, Enum):
    """The five career-transition profiles.

    Values are the wire identifiers the client stores.
    """

    FIRST_WORK_ENTRY = "PATH_1"  # no education, no experience
    EXPERIENCE_TRANSITION = "PATH_2"  # experience, no education
    EDUCATION_ENTRY = "PATH_3"  # education, no experience
    CAREER_REDIRECTION = "PATH_4"  # education + unrelated experience
    CAREER_ADJUSTMENT = "PATH_5"  # education + related experience


# =============================================================================
# Question Definitions
# =============================================================================


class QuestionOption(BaseModel):
    """One selectable option: stored value plus display label."""

    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class Question(BaseModel):
    """Static question definition.

    Attributes:
        id: Stable question identifier (also the answer key).
        text: Prompt shown to the user.
        type: "single" or "multi" select.
        options: Selectable options. Empty for free-text-only questions.
        max_select: Maximum selections for multi-select questions.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    type: Literal["single", "multi"] = "single"
    options: list[QuestionOption] = Field(default_factory=list)
    max_select: int | None = None

    @property
    def free_text_only(self) -> bool:
        """True when the question takes a short typed answer instead of options."""
        return not self.options

    def option_values(self) -> list[str]:
        """Return the stored values of every option, in display order."""
        return [option.value for option in self.options]


# =============================================================================
# Recommendation Result
# =============================================================================


class DirectionActions(BaseModel):
    """Follow-up links offered with a direction."""

    job_finder_url: str
    build_path_url: str


class Direction(BaseModel):
    """A recommended work direction with exactly three rationale bullets."""

    id: str
    title: str
    why: list[str] = Field(..., min_length=3, max_length=3)
    chips: list[str] = Field(default_factory=list, max_length=4)
    actions: DirectionActions | None = None


class RecommendationResult(BaseModel):
    """Final recommendation payload, present only in the RESULT phase.

    Attributes:
        summary: One-paragraph explanation of the recommendation.
        work_now: 1-3 directions the user can start immediately.
        improve_later: 1-3 directions unlocked by short training, or None.
        avoid: Exactly two distinct things to steer away from.
        next_step: Always "CREATE_CV".
    """

    summary: str
    work_now: list[Direction] = Field(..., min_length=1, max_length=3)
    improve_later: list[Direction] | None = Field(default=None, max_length=3)
    avoid: list[str] = Field(..., min_length=2, max_length=2)
    next_step: Literal["CREATE_CV"] = "CREATE_CV"

    @field_validator("avoid")
    @classmethod
    def avoid_entries_unique(cls, v: list[str]) -> list[str]:
        """Validate the two avoid entries differ."""
        if len(set(v)) != len(v):
            msg = "avoid entries must be unique"
            raise ValueError(msg)
        return v


# =============================================================================
# Session State
# =============================================================================


class Classification(BaseModel):
    """Snapshot of the three classification answers.

    experience_related_to_education is only set when both education and
    experience are "yes".
    """

    education: str | None = None
    experience: str | None = None
    experience_related_to_education: str | None = None


class SessionState(BaseModel):
    """The complete, client-held interview state.

    Attributes:
        phase: Current interview phase. Never regresses.
        classification: Classification snapshot, set with the path.
        path: Resolved career path. Immutable once set.
        answers: Question id -> answer. Presence of a key locks the field.
        preferences: Preference-gate answers (mirrored from answers).
        confidence_score: Last computed completion confidence.
        result: Final recommendation, only in the RESULT phase.
        asked_question_ids: Ordered ids of every question emitted so far.
        last_question_id: Id of the question emitted in the previous turn.
        preference_gate_done: True once the preference gate is finished.
    """

    model_config = ConfigDict(extra="ignore")

    phase: Phase = Phase.CLASSIFY
    classification: Classification | None = None
    path: CareerPath | None = None
    answers: dict[str, Any] = Field(default_factory=dict)
    preferences: dict[str, Any] = Field(default_factory=dict)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    result: RecommendationResult | None = None
    asked_question_ids: list[str] = Field(default_factory=list)
    last_question_id: str | None = None
    preference_gate_done: bool = False

    @model_validator(mode="after")
    def phase_requires_path(self) -> "SessionState":
        """Validate that PATH and RESULT phases carry a resolved path."""
        if self.phase != Phase.CLASSIFY and self.path is None:
            msg = f"phase {self.phase.value} requires a path"
            raise ValueError(msg)
        return self


# =============================================================================
# Turn Contract
# =============================================================================


class MicroStatus(BaseModel):
    """Short progress line shown while the next step renders."""

    line: str
    chips: list[str] = Field(default_factory=list)


class TurnRequest(BaseModel):
    """Request body for POST /career-assistant/turn.

    Attributes:
        state: The client's persisted session state (empty on first call).
        user_input: Answer to current_question_id. A list for multi-select;
            an empty value means "no new answer".
        free_text: Optional unstructured text to mine for extra answers.
        current_question_id: Question being answered. Defaults to the
            state's last_question_id.
    """

    state: SessionState = Field(default_factory=SessionState)
    user_input: str | list[str] | None = ""
    free_text: str | None = Field(default=None, max_length=2000)
    current_question_id: str | None = None

    @field_validator("user_input", mode="before")
    @classmethod
    def strip_user_input(cls, v: Any) -> Any:
        """Strip whitespace from string input and list items."""
        if isinstance(v, str):
            return v.strip()
        if isinstance(v, list):
            return [item.strip() if isinstance(item, str) else item for item in v]
        return v

    @field_validator("free_text", "current_question_id", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat blank strings as absent."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def has_answer(self) -> bool:
        """True when user_input carries a non-empty answer."""
        if isinstance(self.user_input, list):
            return any(
                isinstance(item, str) and item.strip() for item in self.user_input
            )
        return bool(self.user_input)


class TurnResponse(BaseModel):
    """Response for one interview turn.

    done=False implies question is set; done=True implies result is set
    and question is None. state_updates holds only changed keys, with
    nulls stripped, and is merged by the client into its stored state.
    """

    path: CareerPath | None
    phase: Phase
    assistant_message: str
    question: Question | None
    allow_free_text: bool
    state_updates: dict[str, Any]
    done: bool
    confidence_score: float
    result: RecommendationResult | None
    status: MicroStatus
