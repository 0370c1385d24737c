"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from fittrack.config import get_settings, reload_settings
from fittrack.data.log_loader import LogFileError, TrackingLog, load_log
from fittrack.energy.formulas import (
    compute_bmr,
    compute_exercise_calories,
    compute_tdee,
)
from fittrack.energy.goals import (
    target_calories_from_bmi,
    target_calories_from_weight_goal,
)
from fittrack.export.formatters import format_report
from fittrack.reports.generators import OpenAIInsightGenerator
from fittrack.reports.insights import generate_daily_report, generate_monthly_report
from fittrack.tracking.bucketing import (
    bucket_by_day,
    latest_weight_per_day,
    local_day,
    month_bounds,
)
from fittrack.tracking.models import ActivityLevel, ExerciseType, Gender, Intensity

app = typer.Typer(
    help="Energy-balance summaries from meal, exercise and weight logs",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def parse_day(value: Optional[str], option: str) -> Optional[date]:
    """Parse a YYYY-MM-DD option value."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Invalid {option}: {value} (expected YYYY-MM-DD)[/red]")
        raise typer.Exit(1)


def read_log(path: Path, command: str, json_output: bool) -> TrackingLog:
    """Load a log file, exiting with a friendly message on bad input."""
    try:
        return load_log(path)
    except (LogFileError, OSError) as e:
        if json_output:
            output_json({
                "success": False,
                "command": command,
                "errors": [str(e)],
            })
        else:
            console.print(f"[red]Could not read log: {e}[/red]")
        raise typer.Exit(1)


def build_generator(insights: bool):
    """Insight generator from settings, or None when turned off or unconfigured."""
    if not insights:
        return None
    return OpenAIInsightGenerator.from_settings(get_settings().insights)


def emit(report, output_format: str, label: str) -> None:
    """Print a report in the requested format."""
    try:
        text = format_report(report, output_format, label, console)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    if text is not None:
        print(text)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml (default: ~/.fittrack/config.yaml)"
    ),
) -> None:
    """Energy-balance summaries from meal, exercise and weight logs."""
    configure_logging(verbose)
    if config is not None:
        reload_settings(config)


# ============================================================================
# Formula Commands
# ============================================================================


@app.command("bmr")
def bmr_command(
    weight: float = typer.Option(..., "--weight", help="Weight in kg"),
    height: float = typer.Option(..., "--height", help="Height in cm"),
    age: int = typer.Option(..., "--age", help="Age in years"),
    gender: str = typer.Option(..., "--gender", help="Gender (male/female/other)"),
    activity: Optional[str] = typer.Option(
        None,
        "--activity",
        help="Activity level (sedentary/light/moderate/active/very_active); also prints TDEE",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate BMR with the Mifflin-St Jeor equation."""
    bmr = compute_bmr(weight, height, age, Gender.parse(gender))
    tdee = compute_tdee(bmr, activity) if activity else None

    if json_output:
        output_json({
            "success": True,
            "command": "bmr",
            "data": {"bmr": round(bmr, 2), "tdee": tdee},
            "human_summary": f"BMR {bmr:.0f} kcal/day",
        })
    else:
        console.print(f"BMR: [bold]{bmr:.2f}[/bold] kcal/day")
        if tdee is not None:
            console.print(f"TDEE ({ActivityLevel.parse(activity).value}): [bold]{tdee}[/bold] kcal/day")


@app.command("tdee")
def tdee_command(
    bmr: float = typer.Option(..., "--bmr", help="Basal Metabolic Rate"),
    activity: str = typer.Option("sedentary", "--activity", help="Activity level"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate TDEE from BMR and activity level."""
    tdee = compute_tdee(bmr, activity)

    if json_output:
        output_json({
            "success": True,
            "command": "tdee",
            "data": {"tdee": tdee, "activity_level": ActivityLevel.parse(activity).value},
            "human_summary": f"TDEE {tdee} kcal/day",
        })
    else:
        console.print(f"TDEE: [bold]{tdee}[/bold] kcal/day")


@app.command("exercise-calories")
def exercise_calories_command(
    weight: float = typer.Option(..., "--weight", help="Weight in kg"),
    duration: float = typer.Option(..., "--duration", help="Duration in minutes"),
    intensity: str = typer.Option("moderate", "--intensity", help="low/moderate/high"),
    exercise_type: str = typer.Option(
        "general", "--type", help="general/walking/cycling/swimming/strength/running"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate calories burned from MET values."""
    calories = compute_exercise_calories(
        weight, duration, Intensity.parse(intensity), ExerciseType.parse(exercise_type)
    )

    if json_output:
        output_json({
            "success": True,
            "command": "exercise-calories",
            "data": {"calories_burnt": calories},
            "human_summary": f"{calories} kcal",
        })
    else:
        console.print(f"Calories burnt: [bold]{calories}[/bold] kcal")


@app.command("target")
def target_command(
    weight: float = typer.Option(..., "--weight", help="Current weight in kg"),
    tdee: float = typer.Option(..., "--tdee", help="Total Daily Energy Expenditure"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in cm (BMI-based target)"),
    target_weight: Optional[float] = typer.Option(None, "--target-weight", help="Goal weight in kg"),
    target_date: Optional[str] = typer.Option(None, "--target-date", help="Goal date (YYYY-MM-DD)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Calculate a daily calorie target from BMI or a weight goal."""
    goal_date = parse_day(target_date, "--target-date")

    if target_weight is not None or goal_date is not None:
        method = "weight_goal"
        target = target_calories_from_weight_goal(weight, target_weight, goal_date, tdee)
    elif height is not None:
        method = "bmi"
        target = target_calories_from_bmi(weight, height, tdee)
    else:
        if json_output:
            output_json({
                "success": False,
                "command": "target",
                "errors": ["Provide --height, or --target-weight with --target-date"],
            })
        else:
            console.print("[red]Provide --height, or --target-weight with --target-date[/red]")
        raise typer.Exit(1)

    if json_output:
        output_json({
            "success": True,
            "command": "target",
            "data": {"calorie_target": target, "method": method},
            "human_summary": f"Target {target} kcal/day",
        })
    else:
        console.print(f"Calorie target: [bold]{target}[/bold] kcal/day [dim]({method})[/dim]")


# ============================================================================
# Report Commands
# ============================================================================


@app.command("daily")
def daily_command(
    log_path: Path = typer.Argument(..., help="YAML/JSON log file"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Day to summarize (YYYY-MM-DD, default: today)"
    ),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: table, json, markdown"
    ),
    insights: bool = typer.Option(
        True, "--insights/--no-insights", help="Request generated insights when an API key is set"
    ),
) -> None:
    """Summarize one day of a log file."""
    settings = get_settings()
    output_format = output_format or settings.defaults.output_format
    tz = settings.defaults.get_tzinfo()
    day = parse_day(date_str, "--date") or date.today()

    log = read_log(log_path, "daily", output_format == "json")

    meals = [m for m in log.meals if local_day(m.timestamp, tz) == day]
    exercises = [e for e in log.exercises if local_day(e.timestamp, tz) == day]
    weight = latest_weight_per_day(log.weights, tz).get(day)
    logger.debug("%s: %d meals, %d exercises, weigh-in=%s", day, len(meals), len(exercises), weight)

    report = generate_daily_report(
        meals,
        exercises,
        weight,
        log.profile,
        generator=build_generator(insights),
        settings=settings.insights,
        today=day,
    )
    emit(report, output_format, day.isoformat())


@app.command("monthly")
def monthly_command(
    log_path: Path = typer.Argument(..., help="YAML/JSON log file"),
    month: Optional[str] = typer.Option(
        None, "--month", "-m", help="Month to summarize (YYYY-MM, default: current month)"
    ),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Output format: table, json, markdown"
    ),
    insights: bool = typer.Option(
        True, "--insights/--no-insights", help="Request generated insights when an API key is set"
    ),
) -> None:
    """Summarize a month of a log file."""
    settings = get_settings()
    output_format = output_format or settings.defaults.output_format
    tz = settings.defaults.get_tzinfo()
    anchor = parse_day(f"{month}-01", "--month") if month else date.today()
    first_day, last_day = month_bounds(anchor)

    log = read_log(log_path, "monthly", output_format == "json")

    days = bucket_by_day(
        log.meals, log.exercises, log.weights, start=first_day, end=last_day, tz=tz
    )
    logger.debug("%s: %d days with entries", anchor.strftime("%Y-%m"), len(days))

    report = generate_monthly_report(
        days, log.profile, generator=build_generator(insights), settings=settings.insights
    )
    emit(report, output_format, anchor.strftime("%Y-%m"))


if __name__ == "__main__":
    app()
