"""
Single entry point that schedules any Grade variant.

Keeps the three rating scales apart: callers hand over a typed grade and
never branch on raw integers themselves.
"""

from dataclasses import replace
from datetime import datetime

from lexis.domain.constants import MASTERY_REACTIVATION_DAYS
from lexis.domain.review.errors import InvalidGrade
from lexis.domain.review.models import (
    CoarseRating,
    Grade,
    PassFail,
    QualityGrade,
    ReviewResult,
    ReviewState,
)

from .coarse import step_simple
from .mastery import MasteryPolicy, classify, commit_level, record_outcome
from .pass_fail import step_pass_fail
from .sm2 import step, validate_state


def schedule(
    state: ReviewState,
    grade: Grade,
    now: datetime,
    policy: MasteryPolicy | None = None,
    reactivation_days: int = MASTERY_REACTIVATION_DAYS,
) -> ReviewResult:
    """
    Apply one graded review to a state.

    Args:
        state: Prior state of the item.
        grade: QualityGrade, PassFail or CoarseRating.
        now: Review time.
        policy: Mastery thresholds; the default policy if omitted.
        reactivation_days: Days after mastery before a mastered item is due again.

    Returns:
        ReviewResult carrying the new state, its due date and the level change.

    Raises:
        InvalidGrade: For an unknown grade type.
        InvalidState: If the prior state is malformed.
    """
    previous_level = classify(state, policy=policy)

    if isinstance(grade, QualityGrade):
        new_state = step(commit_level(state, policy), grade.quality, now)
        new_state = record_outcome(new_state, grade.outcome, now, policy)
    elif isinstance(grade, PassFail):
        new_state = step_pass_fail(state, grade.correct, now, policy, reactivation_days)
    elif isinstance(grade, CoarseRating):
        validate_state(state)
        coarse = step_simple(grade.rating, now)
        new_state = replace(state, next_review=coarse.next_review, last_reviewed=now)
    else:
        raise InvalidGrade(f"Unsupported grade: {grade!r}")

    return ReviewResult(
        state=new_state,
        next_review=new_state.next_review,
        mastery_level=classify(new_state, policy=policy),
        previous_level=previous_level,
    )
