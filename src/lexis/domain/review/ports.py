"""
Ports (interfaces) for review-state storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from .models import ReviewState


class ReviewStateStore(ABC):
    """
    Port for loading and saving review state keyed by (user, item).

    Implementations:
        - InMemoryReviewStateStore: Process-local dict, used by the CLI and tests.

    Writes for the same key must be serialized by the caller holding `lock()`;
    the store itself is last-write-wins.
    """

    @abstractmethod
    def get(self, user_id: str, item_id: str) -> ReviewState | None:
        """
        Fetch the stored state for an item.

        Returns:
            The ReviewState, or None if the item was never reviewed.
        """
        pass

    @abstractmethod
    def put(self, user_id: str, item_id: str, state: ReviewState) -> None:
        """Persist the new state for an item, replacing any previous one."""
        pass

    @abstractmethod
    def delete(self, user_id: str, item_id: str) -> bool:
        """
        Remove the stored state for an item.

        Returns:
            True if a state was removed.
        """
        pass

    @abstractmethod
    def items(self, user_id: str) -> list[tuple[str, ReviewState]]:
        """List (item_id, state) pairs stored for a user."""
        pass

    @abstractmethod
    def lock(self, user_id: str, item_id: str) -> AbstractContextManager:
        """Context manager that serializes read-modify-write on one key."""
        pass
