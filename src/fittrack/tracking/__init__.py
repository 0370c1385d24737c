"""Meal, exercise and weight tracking models.

Key components:
- Tagged enums with explicit fallbacks (gender, activity, intensity, type)
- Entry dataclasses and derived daily/monthly summaries
- Calendar-day bucketing of timestamped entries
"""

from __future__ import annotations

from fittrack.tracking.bucketing import (
    bucket_by_day,
    latest_weight_per_day,
    local_day,
    month_bounds,
    select_weight_bounds,
)
from fittrack.tracking.models import (
    ActivityLevel,
    DailySummary,
    DayBucket,
    ExerciseEntry,
    ExerciseType,
    Gender,
    Intensity,
    MealEntry,
    MonthlySummary,
    Profile,
    WeightEntry,
)

__all__ = [
    "ActivityLevel",
    "DailySummary",
    "DayBucket",
    "ExerciseEntry",
    "ExerciseType",
    "Gender",
    "Intensity",
    "MealEntry",
    "MonthlySummary",
    "Profile",
    "WeightEntry",
    "bucket_by_day",
    "latest_weight_per_day",
    "local_day",
    "month_bounds",
    "select_weight_bounds",
]
