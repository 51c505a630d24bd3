"""
Domain models for review scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum

from lexis.domain.constants import (
    COARSE_RATING_DAYS,
    DEFAULT_EASE_FACTOR,
    MAX_QUALITY,
    MIN_QUALITY,
    PASSING_QUALITY,
)

from .errors import InvalidGrade


class Outcome(Enum):
    """Resolved result of a single answer."""

    CORRECT = "correct"
    INCORRECT = "incorrect"

    @classmethod
    def from_bool(cls, correct: bool) -> "Outcome":
        return cls.CORRECT if correct else cls.INCORRECT


class MasteryLevel(IntEnum):
    """
    Ordered confidence buckets for a vocabulary item.

    Integer values match the 0-5 scale used by stored review records,
    so comparisons between levels are plain integer comparisons.
    """

    NEW = 0
    LEARNING = 1
    YOUNG = 2
    MATURE = 3
    PROFICIENT = 4
    MASTERED = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def demoted(self) -> "MasteryLevel":
        """One level down, never below NEW."""
        return MasteryLevel(max(self.value - 1, MasteryLevel.NEW.value))


@dataclass(frozen=True)
class ReviewState:
    """
    Scheduling state for one learner and one vocabulary item.

    Attributes:
        repetitions: Consecutive successful reviews since the last lapse.
        ease_factor: Interval growth multiplier (clamped to >= 1.3 before use).
        interval: Days until the item is due again (0 before the first review).
        next_review: When the item becomes due (None until first scheduled).
        last_reviewed: The `now` of the most recent review.
        mastery_level: Standing mastery level committed by the last review.
        recent_outcomes: Ring of the last two outcomes, oldest first.
        mastered_at: When the item last reached MASTERED.
    """

    repetitions: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    next_review: datetime | None = None
    last_reviewed: datetime | None = None
    mastery_level: MasteryLevel = MasteryLevel.NEW
    recent_outcomes: tuple[Outcome, ...] = field(default_factory=tuple)
    mastered_at: datetime | None = None


# ---------------------------------------------------------------------------
# Grades
# ---------------------------------------------------------------------------


def _require_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidGrade(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class QualityGrade:
    """SM-2 quality score: 0 = total failure, 5 = perfect recall."""

    quality: int

    def __post_init__(self):
        q = _require_int(self.quality, "quality")
        if not MIN_QUALITY <= q <= MAX_QUALITY:
            raise InvalidGrade(f"quality must be in [{MIN_QUALITY}, {MAX_QUALITY}], got {q}")

    @property
    def outcome(self) -> Outcome:
        return Outcome.from_bool(self.quality >= PASSING_QUALITY)


@dataclass(frozen=True)
class CoarseRating:
    """Rating for the lightweight review flow (1 = hard, 3 = easy)."""

    rating: int

    def __post_init__(self):
        r = _require_int(self.rating, "rating")
        if r not in COARSE_RATING_DAYS:
            raise InvalidGrade(
                f"rating must be in [{min(COARSE_RATING_DAYS)}, {max(COARSE_RATING_DAYS)}], got {r}"
            )


@dataclass(frozen=True)
class PassFail:
    """Binary correct/incorrect answer from the quiz flow."""

    correct: bool

    def __post_init__(self):
        if not isinstance(self.correct, bool):
            raise InvalidGrade(f"correct must be a bool, got {self.correct!r}")

    @property
    def outcome(self) -> Outcome:
        return Outcome.from_bool(self.correct)


Grade = QualityGrade | CoarseRating | PassFail


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CoarseSchedule:
    """Result of the coarse-rating path; `item_id` is echoed unchanged."""

    item_id: str | None
    rating: int
    days_until_review: int
    next_review: datetime


@dataclass(frozen=True)
class ReviewResult:
    """
    Outcome of scheduling one graded review.

    Attributes:
        state: The new review state to persist.
        next_review: When the item is due again.
        mastery_level: Level after this review.
        previous_level: Level before this review.
    """

    state: ReviewState
    next_review: datetime
    mastery_level: MasteryLevel
    previous_level: MasteryLevel

    @property
    def mastery_changed(self) -> bool:
        return self.mastery_level != self.previous_level

    @property
    def mastery_delta(self) -> int:
        return int(self.mastery_level) - int(self.previous_level)
