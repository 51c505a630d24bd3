from datetime import datetime, timezone

import pytest

from lexis.domain.review.models import ReviewState


@pytest.fixture
def now():
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def zero_state():
    return ReviewState()


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Points Path.home() at a temp dir and clears LEXIS_* so no real config leaks in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for key in ("LEXIS_MASTERY_THRESHOLDS", "LEXIS_REACTIVATION_DAYS", "LEXIS_VERBOSE"):
        monkeypatch.delenv(key, raising=False)
    return home
