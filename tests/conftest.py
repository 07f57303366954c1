from datetime import datetime, timedelta, timezone

import pytest

from cadence.domain.scheduling.models import DifficultyModel, StudyItem


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears CADENCE_* settings."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for key in ("CADENCE_MODE", "CADENCE_ITEMS_FILE", "CADENCE_MAX_REVIEWS_PER_DAY"):
        monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture
def now():
    return datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def initial_model(now):
    return DifficultyModel.initial(now)


@pytest.fixture
def make_item():
    """Factory for items whose next review falls on `due`."""

    def _make(
        item_id: str,
        due: datetime,
        difficulty: float = 5.0,
        stability: float = 0.0,
        interval: int = 1,
        repetitions: int = 0,
    ) -> StudyItem:
        model = DifficultyModel(
            ease_factor=2.5,
            interval=interval,
            repetitions=repetitions,
            difficulty=difficulty,
            average_quality=0.0,
            stability_factor=stability,
            last_review=due - timedelta(days=interval),
        )
        return StudyItem(id=item_id, model=model, prompt=f"Prompt {item_id}")

    return _make
