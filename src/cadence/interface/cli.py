"""Cadence CLI: scheduling, planning and statistics commands."""

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from ulid import ULID

from cadence.application.config import AppConfig, resolve_config
from cadence.application.factory import get_item_repository
from cadence.application.scheduling import SchedulingEngine, observation_from_quality
from cadence.application.service import SchedulingService
from cadence.application.stats import MetricsCalculator
from cadence.domain.errors import CadenceError
from cadence.domain.scheduling.models import DifficultyModel, ReviewObservation, StudyItem
from cadence.infrastructure.utils.records import item_to_record, parse_timestamp

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cadence: SM-2+ spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cadence configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class Mode(str, Enum):
    classic = "classic"
    enhanced = "enhanced"


ItemsFile = Annotated[
    Path | None,
    typer.Argument(help="JSON or YAML file of items. Defaults to 'items_file' in config."),
]
AtOption = Annotated[
    str | None,
    typer.Option("--at", help="Evaluate as of this ISO-8601 instant instead of now."),
]


def generate_item_id() -> str:
    """Generate a sortable, unique item ID using ULID."""
    return f"item_{ULID()}"


def _resolve_now(at: str | None) -> datetime:
    if at is None:
        return datetime.now(timezone.utc)
    try:
        return parse_timestamp(at)
    except CadenceError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(2)


def _config(**overrides: Any) -> AppConfig:
    try:
        return resolve_config(overrides)
    except ValidationError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(2)


def _run(config: AppConfig, items_file: Path | None, action) -> Any:
    """
    Build the service for `items_file` and run the async `action` against it.

    Domain errors are reported in red and exit with status 1.
    """

    async def run():
        repo = await get_item_repository(config, items_file)
        service = SchedulingService(repo, engine=SchedulingEngine(mode=config.mode))
        return await action(service, repo)

    try:
        return asyncio.run(run())
    except CadenceError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)


def _echo_items(items: list[StudyItem]) -> None:
    for item in items:
        typer.echo(f"{item.id}\t{item.model.next_review.isoformat()}\t{item.prompt or ''}")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Enable debug logging."),
    ] = 0,
):
    """Global settings for cadence."""
    if verbose >= 1:
        logging.getLogger("cadence").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def new(
    item_id: Annotated[
        str | None, typer.Option("--id", help="Item ID. Generated if omitted.")
    ] = None,
    prompt: Annotated[str | None, typer.Option(help="Question text.")] = None,
    answer: Annotated[str | None, typer.Option(help="Answer text.")] = None,
    at: AtOption = None,
):
    """Print the record of a [bold green]new[/bold green] item in its initial state."""
    item = StudyItem(
        id=item_id or generate_item_id(),
        model=DifficultyModel.initial(_resolve_now(at)),
        prompt=prompt,
        answer=answer,
    )
    typer.echo(json.dumps(item_to_record(item), indent=2))


@app.command()
def review(
    item_id: Annotated[str, typer.Argument(help="ID of the reviewed item.")],
    items_file: ItemsFile = None,
    score: Annotated[float | None, typer.Option(help="Recall quality, 0-5.")] = None,
    response_time: Annotated[
        float, typer.Option("--response-time", help="Answer time in milliseconds.")
    ] = 0.0,
    confidence: Annotated[int, typer.Option(help="Self-reported confidence, 1-5.")] = 5,
    quality: Annotated[
        int | None,
        typer.Option(help="Bare 0-5 grade; infers confidence and response time."),
    ] = None,
    mode: Annotated[
        Mode | None,
        typer.Option(help="Scheduler mode. Defaults to config."),
    ] = None,
    at: AtOption = None,
):
    """Apply a review and print the item's updated state as JSON.

    The items file is not modified; persist the printed record yourself.
    """
    if (score is None) == (quality is None):
        typer.secho("Pass exactly one of --score or --quality.", fg="red", err=True)
        raise typer.Exit(2)

    config = _config(mode=mode.value if mode else None)
    now = _resolve_now(at)

    async def action(service: SchedulingService, _repo):
        if quality is not None:
            observation = observation_from_quality(quality)
        else:
            observation = ReviewObservation(
                score=score, response_time_ms=response_time, confidence=confidence
            )
        return await service.review(item_id, observation, now)

    updated = _run(config, items_file, action)
    typer.echo(json.dumps(item_to_record(updated), indent=2))


@app.command()
def due(items_file: ItemsFile = None, at: AtOption = None):
    """List items due for review now."""
    config = _config()
    now = _resolve_now(at)

    async def action(service: SchedulingService, _repo):
        return await service.get_due(now)

    items = _run(config, items_file, action)
    if not items:
        typer.secho("No items due.", fg="green")
        return
    _echo_items(items)


@app.command()
def upcoming(
    items_file: ItemsFile = None,
    days: Annotated[int | None, typer.Option(help="Look-ahead horizon in days.")] = None,
    at: AtOption = None,
):
    """List items coming due within the next few days."""
    config = _config(upcoming_days=days)
    now = _resolve_now(at)

    async def action(service: SchedulingService, _repo):
        return await service.get_upcoming(now, config.upcoming_days)

    items = _run(config, items_file, action)
    if not items:
        typer.secho(f"Nothing due in the next {config.upcoming_days} days.", fg="green")
        return
    _echo_items(items)


@app.command()
def balance(
    items_file: ItemsFile = None,
    max_per_day: Annotated[
        int | None, typer.Option("--max-per-day", help="Review capacity per day.")
    ] = None,
    max_defer_days: Annotated[
        int | None, typer.Option("--max-defer-days", help="Furthest an item may be pushed back.")
    ] = None,
):
    """Spread reviews across days without exceeding the daily capacity."""
    config = _config(max_reviews_per_day=max_per_day, max_defer_days=max_defer_days)

    async def action(service: SchedulingService, _repo):
        return await service.plan(config.max_reviews_per_day, config.max_defer_days)

    schedule = _run(config, items_file, action)
    for item_id, day in sorted(schedule.items(), key=lambda kv: (kv[1], kv[0])):
        typer.echo(f"{day.isoformat()}\t{item_id}")


@app.command()
def curve(
    item_id: Annotated[str, typer.Argument(help="ID of the item to project.")],
    items_file: ItemsFile = None,
    days: Annotated[int | None, typer.Option(help="Days to project.")] = None,
):
    """Print the projected forgetting curve of an item."""
    config = _config(forecast_days=days)

    async def action(service: SchedulingService, _repo):
        return await service.forecast(item_id, config.forecast_days)

    for point in _run(config, items_file, action):
        typer.echo(f"{point.day}\t{point.retention:.4f}")


@app.command()
def stats(items_file: ItemsFile = None, at: AtOption = None):
    """Show study statistics and the suggested review hour."""
    config = _config()
    today = _resolve_now(at).date()
    calc = MetricsCalculator()

    async def action(_service, repo):
        return await repo.list_items()

    items = _run(config, items_file, action)
    metrics = calc.learning_metrics(items)
    report = {
        "study": asdict(calc.study_stats(items, today)),
        "learning": asdict(metrics),
        "optimal_review_hour": calc.optimal_review_hour(metrics),
    }
    typer.echo(json.dumps(report, indent=2))


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
