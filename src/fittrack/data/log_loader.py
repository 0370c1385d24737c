"""Load tracking logs from YAML or JSON files.

File format (JSON works too, being a subset of YAML):

    profile:
      height: 175          # cm
      weight: 70           # kg
      age: 30
      gender: male
      activity_level: moderate
      target_weight: 65
      target_date: 2026-12-31
    meals:
      - {name: Oatmeal, calories: 350, protein: 12, timestamp: 2026-10-18T08:00:00}
    exercises:
      - {name: Run, duration: 30, intensity: high, exercise_type: running,
         calories_burnt: 300, timestamp: 2026-10-18T18:00:00}
    weights:
      - {weight: 70.2, timestamp: 2026-10-18T07:00:00}

Exercises without calories_burnt get MET-estimated calories using the most
recent weigh-in at or before the session, or the profile weight.

Timestamps in one file must either all carry a timezone offset or all omit it.
"""

from __future__ import annotations

import bisect
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from fittrack.tracking.models import (
    ActivityLevel,
    ExerciseEntry,
    ExerciseType,
    Gender,
    Intensity,
    MealEntry,
    Profile,
    WeightEntry,
)

logger = logging.getLogger(__name__)


class LogFileError(ValueError):
    """Raised when a log file is malformed or holds invalid values."""


@dataclass
class TrackingLog:
    """Everything read from one log file."""

    profile: Optional[Profile] = None
    meals: list[MealEntry] = field(default_factory=list)
    exercises: list[ExerciseEntry] = field(default_factory=list)
    weights: list[WeightEntry] = field(default_factory=list)


def _number(
    record: dict,
    key: str,
    where: str,
    required: bool = False,
    positive: bool = False,
) -> Optional[float]:
    """Read a numeric field, enforcing basic validity."""
    value = record.get(key)
    if value is None or value == "":
        if required:
            raise LogFileError(f"{where}: missing required field '{key}'")
        return None
    if isinstance(value, bool):
        raise LogFileError(f"{where}: '{key}' must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise LogFileError(f"{where}: '{key}' must be a number, got {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise LogFileError(f"{where}: '{key}' must be finite, got {value!r}")
    if positive and number <= 0:
        raise LogFileError(f"{where}: '{key}' must be > 0, got {value!r}")
    if number < 0:
        raise LogFileError(f"{where}: '{key}' must be >= 0, got {value!r}")
    return number


def _timestamp(record: dict, where: str) -> datetime:
    value = record.get("timestamp", record.get("created_at"))
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise LogFileError(f"{where}: invalid timestamp {value!r}") from None
    raise LogFileError(f"{where}: missing timestamp")


def _date(value: Any, where: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise LogFileError(f"{where}: invalid date {value!r}") from None


def _name(record: dict, where: str) -> str:
    name = record.get("name")
    if not name:
        raise LogFileError(f"{where}: missing name")
    return str(name)


def parse_profile(data: dict) -> Profile:
    """Build a Profile from a mapping; absent fields stay None."""
    if not isinstance(data, dict):
        raise LogFileError("profile: expected a mapping")
    where = "profile"
    age = _number(data, "age", where)
    return Profile(
        height_cm=_number(data, "height", where),
        weight_kg=_number(data, "weight", where),
        target_weight_kg=_number(data, "target_weight", where),
        target_date=_date(data.get("target_date"), where),
        age=int(age) if age is not None else None,
        gender=Gender.parse(data.get("gender")),
        activity_level=ActivityLevel.parse(data.get("activity_level")),
    )


def parse_meal(record: dict, index: int) -> MealEntry:
    where = f"meals[{index}]"
    return MealEntry(
        name=_name(record, where),
        calories=_number(record, "calories", where, required=True),
        protein=_number(record, "protein", where),
        carbs=_number(record, "carbs", where),
        fat=_number(record, "fat", where),
        timestamp=_timestamp(record, where),
    )


def parse_weight(record: dict, index: int) -> WeightEntry:
    where = f"weights[{index}]"
    return WeightEntry(
        weight_kg=_number(record, "weight", where, required=True, positive=True),
        timestamp=_timestamp(record, where),
    )


def parse_exercise(
    record: dict,
    index: int,
    weight_kg: Optional[float] = None,
) -> ExerciseEntry:
    """Build an ExerciseEntry, estimating calories when none were logged."""
    where = f"exercises[{index}]"
    name = _name(record, where)
    duration = _number(record, "duration", where, required=True, positive=True)
    timestamp = _timestamp(record, where)
    intensity = Intensity.parse(record.get("intensity"))
    exercise_type = ExerciseType.parse(record.get("exercise_type"))

    calories = _number(record, "calories_burnt", where)
    if calories is None:
        entry = ExerciseEntry.estimated(
            name, weight_kg, duration, timestamp, intensity, exercise_type
        )
        logger.debug("%s: estimated %s kcal for '%s'", where, entry.calories_burnt, name)
        return entry

    return ExerciseEntry(
        name=name,
        calories_burnt=calories,
        duration_min=duration,
        timestamp=timestamp,
        intensity=intensity,
        exercise_type=exercise_type,
    )


def _records(data: dict, key: str) -> list[dict]:
    records = data.get(key) or []
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise LogFileError(f"{key}: expected a list of mappings")
    return records


def _check_timestamp_kinds(timestamps: list[datetime]) -> None:
    """Entries are ordered by timestamp, so a log can't mix naive and aware ones."""
    kinds = {ts.tzinfo is not None for ts in timestamps}
    if len(kinds) > 1:
        raise LogFileError(
            "log mixes timestamps with and without a timezone offset; "
            "use one style throughout"
        )


def parse_log(data: dict) -> TrackingLog:
    """Build a TrackingLog from an already decoded mapping."""
    if not isinstance(data, dict):
        raise LogFileError("log file must contain a mapping at the top level")

    profile = parse_profile(data["profile"]) if data.get("profile") else None
    meals = [parse_meal(r, i) for i, r in enumerate(_records(data, "meals"))]
    weights = [parse_weight(r, i) for i, r in enumerate(_records(data, "weights"))]
    exercise_records = _records(data, "exercises")
    exercise_times = [
        _timestamp(r, f"exercises[{i}]") for i, r in enumerate(exercise_records)
    ]

    _check_timestamp_kinds(
        [m.timestamp for m in meals] + [w.timestamp for w in weights] + exercise_times
    )

    weights.sort(key=lambda w: w.timestamp)
    weight_times = [w.timestamp for w in weights]
    fallback_weight = profile.weight_kg if profile is not None else None

    exercises = []
    for i, record in enumerate(exercise_records):
        weight_kg = fallback_weight
        if record.get("calories_burnt") in (None, ""):
            pos = bisect.bisect_right(weight_times, exercise_times[i])
            if pos > 0:
                weight_kg = weights[pos - 1].weight_kg
        exercises.append(parse_exercise(record, i, weight_kg))

    return TrackingLog(profile=profile, meals=meals, exercises=exercises, weights=weights)


def load_log(path: Path) -> TrackingLog:
    """Load a tracking log from a YAML or JSON file.

    Args:
        path: Path to the log file

    Returns:
        TrackingLog

    Raises:
        LogFileError: If the file can't be parsed or holds invalid values
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise LogFileError(f"{path}: {e}") from e

    log = parse_log(data)
    logger.info(
        "Loaded %d meals, %d exercises, %d weigh-ins from %s",
        len(log.meals), len(log.exercises), len(log.weights), path,
    )
    return log
