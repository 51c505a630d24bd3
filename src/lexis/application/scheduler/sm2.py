"""
Quality-graded scheduler (SM-2 variant).

This is a pure computation module with no I/O. Rounding and clamp order
are fixed so that stored ease factors stay comparable across releases.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from lexis.domain.constants import (
    EASE_DECIMALS,
    FIRST_INTERVAL,
    LAPSE_INTERVAL,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    PASSING_QUALITY,
    SECOND_INTERVAL,
    SECONDS_PER_DAY,
)
from lexis.domain.review.errors import InvalidGrade, InvalidState
from lexis.domain.review.models import ReviewState

logger = logging.getLogger(__name__)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round half away from zero, using the shortest decimal form of `value`.

    `round()` would use banker's rounding and binary artifacts
    (e.g. 2.5 -> 2, 2.675 -> 2.67), which drifts stored values.
    """
    exponent = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def clamp_ease_factor(ease_factor: float) -> float:
    """Raise an ease factor to the 1.3 floor. Idempotent."""
    return max(MIN_EASE_FACTOR, ease_factor)


def validate_state(state: ReviewState) -> None:
    """
    Reject review state that cannot be scheduled.

    A low ease factor is not an error (it is clamped), but a non-finite one is.

    Raises:
        InvalidState: On a negative or fractional interval, negative repetitions
            or non-finite ease factor.
    """
    interval = state.interval
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise InvalidState(f"interval must be a whole number of days, got {interval!r}")
    if interval < 0:
        raise InvalidState(f"interval must be non-negative, got {interval}")

    if isinstance(state.repetitions, bool) or not isinstance(state.repetitions, int):
        raise InvalidState(f"repetitions must be an integer, got {state.repetitions!r}")
    if state.repetitions < 0:
        raise InvalidState(f"repetitions must be non-negative, got {state.repetitions}")

    if not isinstance(state.ease_factor, (int, float)) or not math.isfinite(state.ease_factor):
        raise InvalidState(f"ease factor must be finite, got {state.ease_factor!r}")


def validate_quality(quality: int) -> int:
    """
    Check that `quality` is an integer in [0, 5] and return it.

    Raises:
        InvalidGrade: On a non-integer (including bool) or out-of-range value.
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidGrade(f"quality must be an integer, got {quality!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidGrade(f"quality must be in [{MIN_QUALITY}, {MAX_QUALITY}], got {quality}")
    return quality


def next_ease_factor(ease_factor: float, quality: int) -> float:
    """Apply the SM-2 ease update, then round to 2 places and clamp."""
    miss = MAX_QUALITY - quality
    updated = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return clamp_ease_factor(round_half_up(updated, EASE_DECIMALS))


def due_after(now: datetime, interval: int) -> datetime:
    """`now` plus `interval` whole days."""
    return now + timedelta(seconds=interval * SECONDS_PER_DAY)


def step(state: ReviewState, quality: int, now: datetime) -> ReviewState:
    """
    Advance the SM-2 scheduling fields for one graded review.

    Mastery fields are left untouched; see `mastery.record_outcome`.

    Args:
        state: Prior state (the zero state for a never-reviewed item).
        quality: Recall quality in [0, 5].
        now: Review time; the next review is computed from it.

    Returns:
        New ReviewState with repetitions, ease_factor, interval,
        next_review and last_reviewed updated.

    Raises:
        InvalidGrade: If quality is outside [0, 5].
        InvalidState: If the prior state is malformed.
    """
    validate_quality(quality)
    validate_state(state)

    ease_factor = clamp_ease_factor(state.ease_factor)
    repetitions = state.repetitions

    if quality < PASSING_QUALITY:
        repetitions = 0
        interval = LAPSE_INTERVAL
    else:
        repetitions += 1
        if repetitions == 1:
            interval = FIRST_INTERVAL
        elif repetitions == 2:
            interval = SECOND_INTERVAL
        else:
            # Legacy rows can carry interval 0 with repetitions >= 2.
            interval = max(1, int(round_half_up(state.interval * ease_factor)))

    ease_factor = next_ease_factor(ease_factor, quality)
    next_review = due_after(now, interval)

    logger.debug(
        f"SM-2 step q={quality}: reps {state.repetitions}->{repetitions}, "
        f"interval {state.interval}->{interval}, ease {state.ease_factor}->{ease_factor}"
    )

    return replace(
        state,
        repetitions=repetitions,
        ease_factor=ease_factor,
        interval=interval,
        next_review=next_review,
        last_reviewed=now,
    )
