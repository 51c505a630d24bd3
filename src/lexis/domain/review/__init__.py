# Domain Review Package
from .errors import InvalidGrade, InvalidState, SchedulerError
from .models import (
    CoarseRating,
    CoarseSchedule,
    Grade,
    MasteryLevel,
    Outcome,
    PassFail,
    QualityGrade,
    ReviewResult,
    ReviewState,
)
from .ports import ReviewStateStore

__all__ = [
    "CoarseRating",
    "CoarseSchedule",
    "Grade",
    "InvalidGrade",
    "InvalidState",
    "MasteryLevel",
    "Outcome",
    "PassFail",
    "QualityGrade",
    "ReviewResult",
    "ReviewState",
    "ReviewStateStore",
    "SchedulerError",
]
