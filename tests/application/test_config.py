from pathlib import Path

import pytest
from pydantic import ValidationError

from cadence.application.config import AppConfig, resolve_config


def test_defaults():
    config = resolve_config()
    assert config.mode == "enhanced"
    assert config.max_reviews_per_day == 50
    assert config.max_defer_days == 365
    assert config.items_file is None


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("CADENCE_MODE", "classic")
    monkeypatch.setenv("CADENCE_MAX_REVIEWS_PER_DAY", "20")

    config = resolve_config()
    assert config.mode == "classic"
    assert config.max_reviews_per_day == 20


def test_toml_file_is_loaded(mock_home):
    cfg = mock_home / ".config/cadence/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('mode = "classic"\nforecast_days = 14\n')

    config = resolve_config()
    assert config.mode == "classic"
    assert config.forecast_days == 14


def test_env_beats_toml(mock_home, monkeypatch):
    (mock_home / ".cadence.toml").write_text('mode = "classic"\n')
    monkeypatch.setenv("CADENCE_MODE", "enhanced")

    assert resolve_config().mode == "enhanced"


def test_cli_overrides_win_and_none_is_ignored(monkeypatch):
    monkeypatch.setenv("CADENCE_MODE", "classic")

    config = resolve_config({"mode": "enhanced", "upcoming_days": None})
    assert config.mode == "enhanced"
    assert config.upcoming_days == 7


def test_items_file_is_resolved(tmp_path):
    config = AppConfig(items_file=str(tmp_path / "items.json"))
    assert config.items_file == Path(tmp_path / "items.json").resolve()


@pytest.mark.parametrize(
    "overrides",
    [{"max_reviews_per_day": 0}, {"max_defer_days": -1}, {"mode": "turbo"}],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        resolve_config(overrides)
