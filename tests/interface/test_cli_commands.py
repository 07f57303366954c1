"""Tests for CLI commands: help, new, review, due, upcoming, balance, curve, stats, config."""

import json

import pytest
from typer.testing import CliRunner

from cadence.interface.cli import app

runner = CliRunner()

AT = "2024-03-10T12:00:00+00:00"


def _record(item_id: str, last_review: str, interval: int, difficulty: float = 5.0) -> dict:
    return {
        "id": item_id,
        "prompt": f"Prompt {item_id}",
        "model": {
            "ease_factor": 2.5,
            "interval": interval,
            "repetitions": 1 if interval > 1 else 0,
            "difficulty": difficulty,
            "average_quality": 4.0,
            "stability_factor": 0.5,
            "last_review": last_review,
        },
        "reviews": [
            {"reviewed_at": last_review, "quality": 4, "response_time_ms": 2000},
        ],
    }


@pytest.fixture
def items_file(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(
        json.dumps(
            {
                "items": [
                    _record("overdue", "2024-03-05T09:00:00+00:00", 1),
                    _record("today", "2024-03-04T12:00:00+00:00", 6),
                    _record("soon", "2024-03-09T08:00:00+00:00", 6),
                    _record("later", "2024-03-10T08:00:00+00:00", 30),
                ]
            }
        )
    )
    return path


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "SM-2+ spaced-repetition scheduler" in result.stdout
    for command in ("review", "due", "balance", "curve"):
        assert command in result.stdout


# --- New ---


def test_new_item():
    result = runner.invoke(app, ["new", "--id", "card-9", "--prompt", "Hola", "--at", AT])
    assert result.exit_code == 0

    record = json.loads(result.stdout)
    assert record["id"] == "card-9"
    assert record["prompt"] == "Hola"
    assert record["model"]["interval"] == 1
    assert record["model"]["ease_factor"] == 2.5
    assert record["next_review"] == "2024-03-11T12:00:00+00:00"


def test_new_item_generates_ulid_id():
    result = runner.invoke(app, ["new"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["id"].startswith("item_")


# --- Review ---


def test_review_prints_updated_state(items_file):
    result = runner.invoke(
        app,
        [
            "review", "overdue", str(items_file),
            "--score", "5", "--response-time", "1000", "--confidence", "5", "--at", AT,
        ],
    )
    assert result.exit_code == 0, result.output

    record = json.loads(result.stdout)
    assert record["model"]["repetitions"] == 1
    assert record["model"]["interval"] == 6
    assert record["model"]["last_review"] == AT
    assert record["next_review"] == "2024-03-16T12:00:00+00:00"


def test_review_with_legacy_quality(items_file):
    result = runner.invoke(
        app, ["review", "today", str(items_file), "--quality", "1", "--at", AT]
    )
    assert result.exit_code == 0, result.output
    record = json.loads(result.stdout)
    assert record["model"]["repetitions"] == 0
    assert record["model"]["interval"] == 1


def test_review_does_not_modify_file(items_file):
    before = items_file.read_text()
    runner.invoke(app, ["review", "today", str(items_file), "--score", "4", "--at", AT])
    assert items_file.read_text() == before


def test_review_requires_exactly_one_grade(items_file):
    result = runner.invoke(app, ["review", "today", str(items_file)])
    assert result.exit_code == 2

    result = runner.invoke(
        app, ["review", "today", str(items_file), "--score", "4", "--quality", "4"]
    )
    assert result.exit_code == 2


def test_review_invalid_score(items_file):
    result = runner.invoke(app, ["review", "today", str(items_file), "--score", "7"])
    assert result.exit_code == 1
    assert "score must be within" in result.output


def test_review_unknown_item(items_file):
    result = runner.invoke(app, ["review", "ghost", str(items_file), "--score", "4"])
    assert result.exit_code == 1
    assert "Unknown item: ghost" in result.output


def test_review_invalid_mode(items_file):
    result = runner.invoke(
        app, ["review", "today", str(items_file), "--score", "4", "--mode", "turbo"]
    )
    # Rejected as a usage error before any configuration is resolved
    assert result.exit_code == 2
    assert "Invalid configuration" not in result.output


def test_review_classic_mode(items_file):
    result = runner.invoke(
        app,
        [
            "review", "today", str(items_file),
            "--score", "4", "--mode", "classic", "--at", AT,
        ],
    )
    assert result.exit_code == 0, result.output

    record = json.loads(result.stdout)
    # round(6 * 2.5); difficulty and stability carried over
    assert record["model"]["interval"] == 15
    assert record["model"]["difficulty"] == 5.0
    assert record["model"]["stability_factor"] == 0.5


# --- Due / upcoming ---


def test_due(items_file):
    result = runner.invoke(app, ["due", str(items_file), "--at", AT])
    assert result.exit_code == 0
    ids = [line.split("\t")[0] for line in result.stdout.splitlines()]
    assert ids == ["overdue", "today"]


def test_due_uses_configured_items_file(items_file, monkeypatch):
    monkeypatch.setenv("CADENCE_ITEMS_FILE", str(items_file))
    result = runner.invoke(app, ["due", "--at", AT])
    assert result.exit_code == 0
    assert "overdue" in result.stdout


def test_due_without_items_file():
    result = runner.invoke(app, ["due"])
    assert result.exit_code == 1
    assert "No items file" in result.output


def test_due_missing_file(tmp_path):
    result = runner.invoke(app, ["due", str(tmp_path / "absent.json")])
    assert result.exit_code == 1
    assert "Cannot read" in result.output


def test_due_bad_timestamp(items_file):
    result = runner.invoke(app, ["due", str(items_file), "--at", "noonish"])
    assert result.exit_code == 2


def test_upcoming(items_file):
    result = runner.invoke(app, ["upcoming", str(items_file), "--days", "7", "--at", AT])
    assert result.exit_code == 0
    ids = [line.split("\t")[0] for line in result.stdout.splitlines()]
    assert ids == ["soon"]


# --- Balance ---


def test_balance(items_file):
    result = runner.invoke(app, ["balance", str(items_file), "--max-per-day", "1"])
    assert result.exit_code == 0, result.output

    rows = [line.split("\t") for line in result.stdout.splitlines()]
    assert len(rows) == 4
    days = [day for day, _ in rows]
    assert len(set(days)) == 4


def test_balance_rejects_zero_capacity(items_file):
    result = runner.invoke(app, ["balance", str(items_file), "--max-per-day", "0"])
    assert result.exit_code == 2


# --- Curve ---


def test_curve(items_file):
    result = runner.invoke(app, ["curve", "today", str(items_file), "--days", "3"])
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "0\t1.0000"
    assert len(lines) == 4


# --- Stats ---


def test_stats(items_file):
    result = runner.invoke(app, ["stats", str(items_file), "--at", AT])
    assert result.exit_code == 0, result.output

    report = json.loads(result.stdout)
    assert report["study"]["total_items"] == 4
    assert report["study"]["items_due_today"] == 2
    assert report["study"]["items_reviewed_today"] == 1
    assert report["learning"]["total_reviews"] == 4
    assert report["optimal_review_hour"] == 9.0


# --- Config ---


def test_config_show(monkeypatch):
    monkeypatch.setenv("CADENCE_MODE", "classic")
    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["mode"] == "classic"
    assert output["max_reviews_per_day"] == 50
