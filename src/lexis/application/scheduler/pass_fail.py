"""
Binary correct/incorrect scheduler used by the quiz flow.

Intervals come from the mastery level instead of the SM-2 recurrence:
the ease factor only stretches intervals once an item is MATURE.
"""

import logging
from dataclasses import replace
from datetime import datetime

from lexis.domain.constants import LEVEL_INTERVAL_DAYS, MASTERY_REACTIVATION_DAYS
from lexis.domain.review.errors import InvalidGrade
from lexis.domain.review.models import MasteryLevel, Outcome, ReviewState

from .mastery import MasteryPolicy, commit_level, is_reactivated, record_outcome
from .sm2 import clamp_ease_factor, due_after, round_half_up, validate_state

logger = logging.getLogger(__name__)


def interval_for_level(level: MasteryLevel, ease_factor: float) -> int:
    """Days until the next review for an item sitting at `level`."""
    days = LEVEL_INTERVAL_DAYS[level]
    if level >= MasteryLevel.MATURE:
        days = int(round_half_up(days * clamp_ease_factor(ease_factor)))
    return days


def step_pass_fail(
    state: ReviewState,
    correct: bool,
    now: datetime,
    policy: MasteryPolicy | None = None,
    reactivation_days: int = MASTERY_REACTIVATION_DAYS,
) -> ReviewState:
    """
    Advance an item after a correct/incorrect answer.

    Repetitions grow by one on a correct answer and reset on a miss; the ease
    factor is clamped but not otherwise changed. A mastered item that has been
    reactivated is scheduled with the MATURE interval without lowering its level.

    Raises:
        InvalidGrade: If `correct` is not a bool.
        InvalidState: If the prior state is malformed.
    """
    if not isinstance(correct, bool):
        raise InvalidGrade(f"correct must be a bool, got {correct!r}")
    validate_state(state)

    reactivated = is_reactivated(state, now, reactivation_days)
    prior = commit_level(state, policy)
    repetitions = prior.repetitions + 1 if correct else 0
    updated = replace(
        prior,
        repetitions=repetitions,
        ease_factor=clamp_ease_factor(prior.ease_factor),
    )
    updated = record_outcome(updated, Outcome.from_bool(correct), now, policy)

    schedule_level = updated.mastery_level
    if reactivated:
        schedule_level = min(schedule_level, MasteryLevel.MATURE)
    interval = interval_for_level(schedule_level, updated.ease_factor)

    logger.debug(
        f"Pass/fail correct={correct}: level {prior.mastery_level.name}->"
        f"{updated.mastery_level.name}, interval {interval}d"
    )

    return replace(
        updated,
        interval=interval,
        next_review=due_after(now, interval),
        last_reviewed=now,
    )
