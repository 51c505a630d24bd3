"""lexis CLI: run single reviews, replay review histories, inspect the mastery policy."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from lexis.application.config import resolve_config
from lexis.application.review_service import ReviewService
from lexis.application.scheduler.coarse import step_simple
from lexis.application.scheduler.engine import schedule
from lexis.application.scheduler.mastery import is_due
from lexis.application.scheduler.pass_fail import interval_for_level
from lexis.domain.constants import DEFAULT_EASE_FACTOR
from lexis.domain.review.errors import SchedulerError
from lexis.domain.review.models import (
    CoarseRating,
    Grade,
    MasteryLevel,
    Outcome,
    PassFail,
    QualityGrade,
    ReviewResult,
    ReviewState,
)
from lexis.infrastructure.adapters.memory_store import InMemoryReviewStateStore

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="lexis: spaced-repetition scheduling for vocabulary.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage lexis configuration.")
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

REPLAY_USER = "replay"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _coerce_time(value: Any) -> datetime:
    """Accept datetimes, dates (from YAML) and ISO-8601 strings; naive values are UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise typer.BadParameter(f"Not an ISO-8601 timestamp: {value!r}")
    else:
        raise typer.BadParameter(f"Not a timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _resolve_now(now: str | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return _coerce_time(now)


def _state_to_dict(state: ReviewState) -> dict[str, Any]:
    d = asdict(state)
    d["mastery_level"] = state.mastery_level.label
    d["recent_outcomes"] = [o.value for o in state.recent_outcomes]
    for key in ("next_review", "last_reviewed", "mastered_at"):
        if d[key] is not None:
            d[key] = d[key].isoformat()
    return d


def _result_to_dict(result: ReviewResult) -> dict[str, Any]:
    return {
        "state": _state_to_dict(result.state),
        "next_review": result.next_review.isoformat(),
        "mastery_level": result.mastery_level.label,
        "mastery_changed": result.mastery_changed,
        "mastery_delta": result.mastery_delta,
    }


def _describe(result: ReviewResult) -> str:
    s = result.state
    line = (
        f"reps={s.repetitions} ease={s.ease_factor:.2f} interval={s.interval}d "
        f"level={result.mastery_level.label} next={result.next_review.date().isoformat()}"
    )
    if result.mastery_changed:
        arrow = "up" if result.mastery_delta > 0 else "down"
        line += f" ({arrow} from {result.previous_level.label})"
    return line


def _grade_from_entry(entry: dict[str, Any]) -> Grade:
    kinds = [k for k in ("quality", "rating", "correct") if k in entry]
    if len(kinds) != 1:
        raise typer.BadParameter(
            f"Each review needs exactly one of quality, rating, correct: {entry!r}"
        )
    kind = kinds[0]
    if kind == "quality":
        return QualityGrade(entry["quality"])
    if kind == "rating":
        return CoarseRating(entry["rating"])
    return PassFail(entry["correct"])


def _grade_label(grade: Grade) -> str:
    if isinstance(grade, QualityGrade):
        return f"q={grade.quality}"
    if isinstance(grade, CoarseRating):
        return f"rating={grade.rating}"
    return "correct" if grade.correct else "incorrect"


def _run_single(state: ReviewState, grade: Grade, now: datetime, json_output: bool) -> None:
    config = resolve_config()
    try:
        result = schedule(
            state,
            grade,
            now,
            policy=config.policy(),
            reactivation_days=config.reactivation_days,
        )
    except SchedulerError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(_result_to_dict(result), indent=2))
    else:
        typer.echo(_describe(result))


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


def _log_level(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for lexis."""
    config = resolve_config()
    logging.getLogger("lexis").setLevel(_log_level(config.verbose + verbose))


# ---------------------------------------------------------------------------
# Review commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    quality: Annotated[int, typer.Argument(help="Recall quality, 0 (blackout) to 5 (perfect).")],
    repetitions: Annotated[int, typer.Option(help="Current consecutive successes.")] = 0,
    ease_factor: Annotated[float, typer.Option(help="Current ease factor.")] = DEFAULT_EASE_FACTOR,
    interval: Annotated[int, typer.Option(help="Current interval in days.")] = 0,
    level: Annotated[int, typer.Option(help="Current mastery level, 0-5.")] = 0,
    now: Annotated[str | None, typer.Option(help="Review time (ISO-8601). Defaults to now, UTC.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Schedule one [bold]SM-2[/bold] review from a 0-5 quality score."""
    try:
        grade = QualityGrade(quality)
        state = ReviewState(
            repetitions=repetitions,
            ease_factor=ease_factor,
            interval=interval,
            mastery_level=MasteryLevel(level),
        )
    except (SchedulerError, ValueError) as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)
    _run_single(state, grade, _resolve_now(now), json_output)


@app.command()
def answer(
    correct: Annotated[
        bool, typer.Option("--correct/--incorrect", help="Whether the answer was right.")
    ],
    repetitions: Annotated[int, typer.Option(help="Current consecutive successes.")] = 0,
    ease_factor: Annotated[float, typer.Option(help="Current ease factor.")] = DEFAULT_EASE_FACTOR,
    interval: Annotated[int, typer.Option(help="Current interval in days.")] = 0,
    level: Annotated[int, typer.Option(help="Current mastery level, 0-5.")] = 0,
    now: Annotated[str | None, typer.Option(help="Review time (ISO-8601). Defaults to now, UTC.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Schedule one correct/incorrect answer by mastery level."""
    try:
        state = ReviewState(
            repetitions=repetitions,
            ease_factor=ease_factor,
            interval=interval,
            mastery_level=MasteryLevel(level),
        )
    except ValueError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)
    _run_single(state, PassFail(correct), _resolve_now(now), json_output)


@app.command()
def rate(
    rating: Annotated[int, typer.Argument(help="1 = hard (1 day), 2 = good (3 days), 3 = easy (7 days).")],
    item_id: Annotated[str | None, typer.Option(help="Item id to echo back.")] = None,
    now: Annotated[str | None, typer.Option(help="Review time (ISO-8601). Defaults to now, UTC.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Schedule a review on the coarse 1-3 scale."""
    try:
        result = step_simple(rating, _resolve_now(now), item_id=item_id)
    except SchedulerError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "item_id": result.item_id,
                    "rating": result.rating,
                    "days_until_review": result.days_until_review,
                    "next_review": result.next_review.isoformat(),
                },
                indent=2,
            )
        )
    else:
        days = result.days_until_review
        typer.echo(
            f"Next review in {days} day{'s' if days != 1 else ''}: "
            f"{result.next_review.date().isoformat()}"
        )


@app.command()
def replay(
    path: Annotated[Path, typer.Argument(help="YAML file with a 'reviews' list.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Replay a review history and print the scheduling trajectory.

    The file holds an optional initial [bold]state[/bold] mapping, an optional
    [bold]start[/bold] timestamp and a [bold]reviews[/bold] list. Each review has
    exactly one of quality, rating or correct, plus an optional [bold]at[/bold]
    timestamp; without one the review happens when the item falls due.
    """
    if not path.exists():
        typer.secho(f"File not found: {path}", fg="red", err=True)
        raise typer.Exit(1)

    try:
        doc = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        typer.secho(f"Invalid YAML in {path}: {e}", fg="red", err=True)
        raise typer.Exit(1)

    if not isinstance(doc, dict):
        typer.secho(f"Expected a mapping at the top of {path}.", fg="red", err=True)
        raise typer.Exit(1)

    reviews = doc.get("reviews")
    if not isinstance(reviews, list) or not reviews:
        typer.secho("Expected a non-empty 'reviews' list.", fg="red", err=True)
        raise typer.Exit(1)

    config = resolve_config()
    item_id = str(doc.get("item", path.stem))
    store = InMemoryReviewStateStore()
    initial = doc.get("state") or {}
    if not isinstance(initial, dict):
        typer.secho(
            f"Invalid initial state: expected a mapping, got {initial!r}", fg="red", err=True
        )
        raise typer.Exit(1)
    try:
        if "mastery_level" in initial:
            initial = {**initial, "mastery_level": MasteryLevel(initial["mastery_level"])}
        if "recent_outcomes" in initial:
            outcomes = tuple(Outcome(v) for v in initial["recent_outcomes"] or ())
            initial = {**initial, "recent_outcomes": outcomes}
        store.put(REPLAY_USER, item_id, ReviewState(**initial))
    except (TypeError, ValueError) as e:
        typer.secho(f"Invalid initial state: {e}", fg="red", err=True)
        raise typer.Exit(1)

    service = ReviewService(
        store, policy=config.policy(), reactivation_days=config.reactivation_days
    )
    clock = _coerce_time(doc["start"]) if "start" in doc else datetime.now(timezone.utc)

    trajectory: list[dict[str, Any]] = []
    for i, entry in enumerate(reviews, start=1):
        if not isinstance(entry, dict):
            typer.secho(f"Review #{i} is not a mapping: {entry!r}", fg="red", err=True)
            raise typer.Exit(1)
        if "at" in entry:
            clock = _coerce_time(entry["at"])

        try:
            grade = _grade_from_entry(entry)
            result = service.review(REPLAY_USER, item_id, grade, clock)
        except SchedulerError as e:
            typer.secho(f"Review #{i}: {e}", fg="red", err=True)
            raise typer.Exit(1)

        if json_output:
            trajectory.append({"at": clock.isoformat(), **_result_to_dict(result)})
        else:
            typer.echo(f"#{i} {clock.date().isoformat()} {_grade_label(grade)} -> {_describe(result)}")
        clock = max(clock, result.next_review)

    final = service.get_state(REPLAY_USER, item_id)
    if json_output:
        typer.echo(json.dumps({"item": item_id, "reviews": trajectory}, indent=2))
    else:
        status = "due" if is_due(final, clock, config.reactivation_days, config.policy()) else "not due"
        typer.echo(f"Final: {item_id} is {status} at {clock.date().isoformat()}")


@app.command()
def levels(
    ease_factor: Annotated[
        float, typer.Option(help="Ease factor used for MATURE and above.")
    ] = DEFAULT_EASE_FACTOR,
):
    """Show the mastery policy: repetitions needed and pass/fail interval per level."""
    config = resolve_config()
    thresholds = (0, *config.policy().thresholds)
    for lvl in MasteryLevel:
        typer.echo(
            f"{lvl.value} {lvl.label:<11} reps>={thresholds[lvl]:<3} "
            f"interval={interval_for_level(lvl, ease_factor)}d"
        )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: list(v) if isinstance(v, tuple) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


def main():
    app()


if __name__ == "__main__":
    main()
