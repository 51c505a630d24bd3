"""
In-memory review-state store.

Process-local and unpersisted: used by the CLI and tests, and as the reference
implementation of the ReviewStateStore port.
"""

import logging
import threading
from contextlib import AbstractContextManager

from lexis.domain.review.models import ReviewState
from lexis.domain.review.ports import ReviewStateStore

logger = logging.getLogger(__name__)


class InMemoryReviewStateStore(ReviewStateStore):
    """
    Dict-backed store keyed by (user_id, item_id).

    Each key gets its own lock so reviews of different items never wait on
    each other.
    """

    def __init__(self, states: dict[tuple[str, str], ReviewState] | None = None):
        self._states: dict[tuple[str, str], ReviewState] = dict(states or {})
        self._locks: dict[tuple[str, str], threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, user_id: str, item_id: str) -> ReviewState | None:
        return self._states.get((user_id, item_id))

    def put(self, user_id: str, item_id: str, state: ReviewState) -> None:
        self._states[(user_id, item_id)] = state

    def delete(self, user_id: str, item_id: str) -> bool:
        removed = self._states.pop((user_id, item_id), None) is not None
        if removed:
            logger.debug(f"Deleted review state for {user_id}:{item_id}")
        return removed

    def items(self, user_id: str) -> list[tuple[str, ReviewState]]:
        return [(item, state) for (uid, item), state in self._states.items() if uid == user_id]

    def lock(self, user_id: str, item_id: str) -> AbstractContextManager:
        key = (user_id, item_id)
        with self._guard:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def __len__(self) -> int:
        return len(self._states)
