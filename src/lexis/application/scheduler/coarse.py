"""Coarse-rating scheduler for the lightweight review flow."""

import logging
from datetime import datetime

from lexis.domain.constants import COARSE_RATING_DAYS
from lexis.domain.review.models import CoarseRating, CoarseSchedule

from .sm2 import due_after

logger = logging.getLogger(__name__)


def step_simple(rating: int, now: datetime, item_id: str | None = None) -> CoarseSchedule:
    """
    Map a 1-3 rating to a fixed day offset (1 -> 1, 2 -> 3, 3 -> 7).

    Repetitions and ease factor are neither read nor written on this path.

    Raises:
        InvalidGrade: If rating is outside [1, 3].
    """
    rating = CoarseRating(rating).rating
    days = COARSE_RATING_DAYS[rating]
    logger.debug(f"Coarse rating {rating} for {item_id}: due in {days}d")
    return CoarseSchedule(
        item_id=item_id,
        rating=rating,
        days_until_review=days,
        next_review=due_after(now, days),
    )
