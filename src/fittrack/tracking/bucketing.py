"""Group timestamped entries into calendar-day buckets.

A day is the local calendar day of an entry's timestamp. Naive timestamps
are taken as already local; aware timestamps are converted to ``tz`` when
one is given.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional

from fittrack.tracking.models import DayBucket, ExerciseEntry, MealEntry, WeightEntry


def local_day(timestamp: datetime, tz: Optional[tzinfo] = None) -> date:
    """Return the calendar day a timestamp falls on."""
    if tz is not None and timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(tz)
    return timestamp.date()


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last day of the month containing ``day``."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def latest_weight_per_day(
    weights: Iterable[WeightEntry],
    tz: Optional[tzinfo] = None,
) -> dict[date, WeightEntry]:
    """Keep only the latest weigh-in of each day."""
    latest: dict[date, WeightEntry] = {}
    for entry in weights:
        day = local_day(entry.timestamp, tz)
        current = latest.get(day)
        if current is None or entry.timestamp >= current.timestamp:
            latest[day] = entry
    return latest


def bucket_by_day(
    meals: Iterable[MealEntry],
    exercises: Iterable[ExerciseEntry],
    weights: Iterable[WeightEntry] = (),
    start: Optional[date] = None,
    end: Optional[date] = None,
    tz: Optional[tzinfo] = None,
    include_empty: bool = False,
) -> list[DayBucket]:
    """Split entries into chronological per-day buckets.

    Args:
        meals: Meal entries in any order
        exercises: Exercise entries in any order
        weights: Weight entries; only the latest per day is kept
        start: First day to include (default: earliest entry)
        end: Last day to include, inclusive (default: latest entry)
        tz: Timezone used to find the local day of aware timestamps
        include_empty: Emit buckets for days without any entries

    Returns:
        List of DayBucket, one per day, oldest first. Entries outside
        [start, end] are dropped.
    """
    meals_by_day: dict[date, list[MealEntry]] = defaultdict(list)
    for meal in sorted(meals, key=lambda m: m.timestamp):
        meals_by_day[local_day(meal.timestamp, tz)].append(meal)

    exercises_by_day: dict[date, list[ExerciseEntry]] = defaultdict(list)
    for exercise in sorted(exercises, key=lambda e: e.timestamp):
        exercises_by_day[local_day(exercise.timestamp, tz)].append(exercise)

    weight_by_day = latest_weight_per_day(weights, tz)

    seen_days = set(meals_by_day) | set(exercises_by_day) | set(weight_by_day)
    if not seen_days and (start is None or end is None):
        return []

    first = start if start is not None else min(seen_days)
    last = end if end is not None else max(seen_days)

    buckets = []
    day = first
    while day <= last:
        bucket = DayBucket(
            day=day,
            meals=meals_by_day.get(day, []),
            exercises=exercises_by_day.get(day, []),
            weight=weight_by_day.get(day),
        )
        if include_empty or not bucket.is_empty:
            buckets.append(bucket)
        day += timedelta(days=1)

    return buckets


def select_weight_bounds(
    days: Iterable[DayBucket],
) -> tuple[Optional[WeightEntry], Optional[WeightEntry]]:
    """Find the chronologically first and last weigh-ins among the buckets."""
    weights = [
        bucket.weight
        for bucket in days
        if bucket.weight is not None and bucket.weight.weight_kg is not None
    ]
    if not weights:
        return None, None

    ordered = sorted(weights, key=lambda w: w.timestamp)
    return ordered[0], ordered[-1]
