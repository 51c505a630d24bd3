import threading

from lexis.domain.review.models import ReviewState
from lexis.domain.review.ports import ReviewStateStore
from lexis.infrastructure.adapters.memory_store import InMemoryReviewStateStore


def test_implements_port():
    assert isinstance(InMemoryReviewStateStore(), ReviewStateStore)


def test_put_get_delete():
    store = InMemoryReviewStateStore()
    state = ReviewState(repetitions=2, interval=6)

    assert store.get("u1", "w1") is None
    store.put("u1", "w1", state)
    assert store.get("u1", "w1") == state
    assert len(store) == 1

    assert store.delete("u1", "w1") is True
    assert store.delete("u1", "w1") is False
    assert store.get("u1", "w1") is None


def test_items_filters_by_user():
    store = InMemoryReviewStateStore(
        {
            ("u1", "a"): ReviewState(),
            ("u1", "b"): ReviewState(repetitions=1),
            ("u2", "a"): ReviewState(),
        }
    )
    assert sorted(item for item, _ in store.items("u1")) == ["a", "b"]
    assert [item for item, _ in store.items("u3")] == []


def test_lock_is_per_key():
    store = InMemoryReviewStateStore()
    assert store.lock("u1", "a") is store.lock("u1", "a")
    assert store.lock("u1", "a") is not store.lock("u1", "b")


def test_lock_serializes_read_modify_write():
    store = InMemoryReviewStateStore()
    store.put("u1", "a", ReviewState())

    def bump():
        for _ in range(200):
            with store.lock("u1", "a"):
                current = store.get("u1", "a")
                store.put("u1", "a", ReviewState(repetitions=current.repetitions + 1))

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.get("u1", "a").repetitions == 800
