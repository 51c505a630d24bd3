"""
Review Service: application layer orchestrator.

Coordinates loading review state from the store, running the scheduler and
writing the result back.
"""

import logging
from datetime import datetime

from lexis.domain.constants import MASTERY_REACTIVATION_DAYS
from lexis.domain.review.models import Grade, ReviewResult, ReviewState
from lexis.domain.review.ports import ReviewStateStore

from .scheduler.engine import schedule
from .scheduler.mastery import MasteryPolicy, is_due

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for recording graded reviews.

    Follows Dependency Inversion: depends on the ReviewStateStore abstraction,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        store: ReviewStateStore,
        policy: MasteryPolicy | None = None,
        reactivation_days: int = MASTERY_REACTIVATION_DAYS,
    ):
        """
        Args:
            store: The repository (port) holding review state.
            policy: Optional mastery thresholds; uses the default policy if not provided.
            reactivation_days: Days after mastery before a mastered item is due again.
        """
        self._store = store
        self._policy = policy or MasteryPolicy()
        self._reactivation_days = reactivation_days

    def get_state(self, user_id: str, item_id: str) -> ReviewState:
        """Stored state for an item, or the zero state if it was never reviewed."""
        return self._store.get(user_id, item_id) or ReviewState()

    def review(self, user_id: str, item_id: str, grade: Grade, now: datetime) -> ReviewResult:
        """
        Schedule one graded review and persist the new state.

        Nothing is written if the grade or the stored state is invalid.

        Raises:
            InvalidGrade: If the grade is not a supported Grade variant.
            InvalidState: If the stored state is malformed.
        """
        with self._store.lock(user_id, item_id):
            prior = self.get_state(user_id, item_id)
            result = schedule(
                prior,
                grade,
                now,
                policy=self._policy,
                reactivation_days=self._reactivation_days,
            )
            self._store.put(user_id, item_id, result.state)

        if result.mastery_delta < 0:
            logger.info(
                f"Mastery lowered for {user_id}:{item_id}: "
                f"{result.previous_level.label} -> {result.mastery_level.label}"
            )
        else:
            logger.debug(
                f"Reviewed {user_id}:{item_id} with {grade}: "
                f"level {result.mastery_level.label}, next {result.next_review.isoformat()}"
            )
        return result

    def due_items(self, user_id: str, now: datetime) -> list[str]:
        """
        List the ids of a user's items due at `now`.

        Items that were never scheduled come first, then by due date, then by id.
        """
        due = [
            (state.next_review, item_id)
            for item_id, state in self._store.items(user_id)
            if is_due(state, now, self._reactivation_days, self._policy)
        ]
        due.sort(key=lambda pair: (pair[0] is not None, pair[0] or now, pair[1]))
        return [item_id for _, item_id in due]

    def reset_mastery(self, user_id: str, item_id: str) -> ReviewState:
        """Return an item to the zero state, as if it had never been reviewed."""
        with self._store.lock(user_id, item_id):
            self._store.delete(user_id, item_id)
        logger.info(f"Reset mastery for {user_id}:{item_id}")
        return ReviewState()
