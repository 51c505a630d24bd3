from datetime import datetime, timezone

import pytest

from lexis.application.scheduler.coarse import step_simple
from lexis.domain.review.errors import InvalidGrade


@pytest.mark.parametrize("rating,days", [(1, 1), (2, 3), (3, 7)])
def test_rating_day_offsets(rating, days, now):
    result = step_simple(rating, now)
    assert result.days_until_review == days
    assert (result.next_review - now).days == days


def test_rating_two_from_june_first():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    result = step_simple(2, now, item_id="vocab-42")
    assert result.next_review == datetime(2024, 6, 4, tzinfo=timezone.utc)
    assert result.item_id == "vocab-42"
    assert result.rating == 2


@pytest.mark.parametrize("rating", [0, 4, 5, -1])
def test_out_of_range_rating(rating, now):
    with pytest.raises(InvalidGrade):
        step_simple(rating, now)
