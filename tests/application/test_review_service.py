from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from lexis.application.review_service import ReviewService
from lexis.domain.review.errors import InvalidGrade, InvalidState
from lexis.domain.review.models import (
    CoarseRating,
    MasteryLevel,
    PassFail,
    QualityGrade,
    ReviewState,
)
from lexis.infrastructure.adapters.memory_store import InMemoryReviewStateStore


@pytest.fixture
def store():
    return InMemoryReviewStateStore()


@pytest.fixture
def service(store):
    return ReviewService(store)


def test_review_persists_new_state(service, store, now):
    result = service.review("alice", "w:converge", QualityGrade(5), now)
    assert store.get("alice", "w:converge") == result.state
    assert result.state.repetitions == 1


def test_unknown_item_starts_from_zero_state(service):
    assert service.get_state("alice", "missing") == ReviewState()


def test_reviews_are_isolated_per_user(service, now):
    service.review("alice", "w:yield", QualityGrade(5), now)
    assert service.get_state("bob", "w:yield") == ReviewState()


def test_consecutive_misses_demote_through_service(service, now):
    for _ in range(3):
        service.review("alice", "w:robust", QualityGrade(4), now)
    service.review("alice", "w:robust", PassFail(False), now)
    result = service.review("alice", "w:robust", PassFail(False), now)
    assert result.previous_level is MasteryLevel.MATURE
    assert result.mastery_level is MasteryLevel.YOUNG


def test_invalid_grade_writes_nothing(service, store, now):
    with pytest.raises(InvalidGrade):
        service.review("alice", "w:via", "good", now)
    assert store.get("alice", "w:via") is None


def test_invalid_stored_state_is_surfaced(store, service, now):
    bad = ReviewState(repetitions=2, interval=-4)
    store.put("alice", "w:via", bad)
    with pytest.raises(InvalidState):
        service.review("alice", "w:via", QualityGrade(4), now)
    assert store.get("alice", "w:via") == bad


def test_review_holds_the_item_lock(now):
    store = MagicMock()
    store.get.return_value = None
    service = ReviewService(store)

    service.review("alice", "w:insight", CoarseRating(2), now)

    store.lock.assert_called_once_with("alice", "w:insight")
    store.lock.return_value.__enter__.assert_called_once()
    store.put.assert_called_once()


def test_due_items_ordering(service, store, now):
    store.put("alice", "b-future", ReviewState(repetitions=2, next_review=now + timedelta(days=2)))
    store.put("alice", "c-past", ReviewState(repetitions=2, next_review=now - timedelta(days=1)))
    store.put("alice", "a-older", ReviewState(repetitions=2, next_review=now - timedelta(days=5)))
    store.put("alice", "z-unscheduled", ReviewState(repetitions=1))
    store.put("bob", "other", ReviewState())

    assert service.due_items("alice", now) == ["z-unscheduled", "a-older", "c-past"]


def test_reset_mastery(service, store, now):
    service.review("alice", "w:feasible", QualityGrade(5), now)
    state = service.reset_mastery("alice", "w:feasible")
    assert state == ReviewState()
    assert store.get("alice", "w:feasible") is None
