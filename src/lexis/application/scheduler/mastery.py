"""
Mastery classification and the consecutive-failure demotion rule.

Levels only move up through repetition growth and only move down when two
incorrect answers arrive back to back. This is a pure computation module
with no I/O.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from lexis.domain.constants import (
    DEFAULT_MASTERY_THRESHOLDS,
    DEMOTION_STREAK,
    MASTERY_REACTIVATION_DAYS,
    OUTCOME_WINDOW,
    SECONDS_PER_DAY,
)
from lexis.domain.review.models import MasteryLevel, Outcome, ReviewState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MasteryPolicy:
    """
    Repetition thresholds for each level above NEW.

    `thresholds[i]` is the number of consecutive successful reviews needed
    to reach `MasteryLevel(i + 1)`.
    """

    thresholds: tuple[int, ...] = DEFAULT_MASTERY_THRESHOLDS

    def __post_init__(self):
        expected = len(MasteryLevel) - 1
        if len(self.thresholds) != expected:
            raise ValueError(
                f"Expected {expected} mastery thresholds, got {len(self.thresholds)}"
            )
        if self.thresholds[0] < 1:
            raise ValueError("Mastery thresholds must be positive")
        if any(b <= a for a, b in zip(self.thresholds, self.thresholds[1:])):
            raise ValueError(f"Mastery thresholds must be strictly increasing: {self.thresholds}")

    def level_for(self, repetitions: int) -> MasteryLevel:
        """Level earned by a repetition count alone. Non-decreasing in `repetitions`."""
        reached = sum(1 for t in self.thresholds if repetitions >= t)
        return MasteryLevel(reached)


DEFAULT_POLICY = MasteryPolicy()


def consecutive_incorrect(outcomes: Iterable[Outcome]) -> int:
    """Count the trailing run of INCORRECT outcomes."""
    count = 0
    for outcome in reversed(tuple(outcomes)):
        if outcome is not Outcome.INCORRECT:
            break
        count += 1
    return count


def standing_level(state: ReviewState, policy: MasteryPolicy | None = None) -> MasteryLevel:
    """Committed level, raised to whatever the current repetitions have earned."""
    policy = policy or DEFAULT_POLICY
    return MasteryLevel(max(state.mastery_level, policy.level_for(state.repetitions)))


def classify(
    state: ReviewState,
    recent_outcomes: Iterable[Outcome] | None = None,
    policy: MasteryPolicy | None = None,
) -> MasteryLevel:
    """
    Classify an item into a mastery level.

    Args:
        state: The item's review state.
        recent_outcomes: Most recent outcomes, oldest first. Defaults to the
            ring stored on the state; only the last two are considered.
        policy: Repetition thresholds; the default policy if omitted.

    Returns:
        The standing level, or one level below it when the two most recent
        outcomes are both incorrect.
    """
    if recent_outcomes is None:
        recent_outcomes = state.recent_outcomes
    window = tuple(recent_outcomes)[-OUTCOME_WINDOW:]

    level = standing_level(state, policy)
    if consecutive_incorrect(window) >= DEMOTION_STREAK:
        return level.demoted()
    return level


def commit_level(state: ReviewState, policy: MasteryPolicy | None = None) -> ReviewState:
    """
    Store the classified level so a lapse that resets repetitions cannot lower it.

    A stored ring that already ends in a failure streak is settled here: its
    demotion is committed and the ring is cleared, so the next two misses
    demote again from the level the item is shown at.
    """
    level = classify(state, policy=policy)
    ring = state.recent_outcomes
    if level < standing_level(state, policy):
        ring = ()
    if level == state.mastery_level and ring == state.recent_outcomes:
        return state
    return replace(state, mastery_level=level, recent_outcomes=ring)


def record_outcome(
    state: ReviewState,
    outcome: Outcome,
    now: datetime,
    policy: MasteryPolicy | None = None,
) -> ReviewState:
    """
    Push an outcome into the ring and commit the resulting level.

    A demotion consumes the failure streak: the ring is cleared so that the
    same pair of failures is not applied again, and the next failure starts
    a new streak.
    """
    stored_level = state.mastery_level
    state = commit_level(state, policy)
    ring = (state.recent_outcomes + (outcome,))[-OUTCOME_WINDOW:]
    before = standing_level(state, policy)
    level = classify(state, ring, policy)

    if level < before:
        logger.debug(f"Demoting {before.name} -> {level.name} after {DEMOTION_STREAK} misses")
        ring = ()

    mastered_at = state.mastered_at
    if level == MasteryLevel.MASTERED and (
        stored_level != MasteryLevel.MASTERED or mastered_at is None
    ):
        mastered_at = now

    return replace(state, mastery_level=level, recent_outcomes=ring, mastered_at=mastered_at)


def is_reactivated(
    state: ReviewState,
    now: datetime,
    reactivation_days: int = MASTERY_REACTIVATION_DAYS,
) -> bool:
    """A mastered item comes back into rotation `reactivation_days` after mastery."""
    if state.mastery_level != MasteryLevel.MASTERED or state.mastered_at is None:
        return False
    elapsed_days = int((now - state.mastered_at).total_seconds() // SECONDS_PER_DAY)
    return elapsed_days > reactivation_days


def is_due(
    state: ReviewState,
    now: datetime,
    reactivation_days: int = MASTERY_REACTIVATION_DAYS,
    policy: MasteryPolicy | None = None,
) -> bool:
    """
    Check if an item should be shown at `now`.

    New items and items that were never scheduled are always due.
    """
    if classify(state, policy=policy) == MasteryLevel.NEW:
        return True
    if state.next_review is None:
        return True
    if now >= state.next_review:
        return True
    return is_reactivated(state, now, reactivation_days)
