"""Monthly summary: per-day averages, weight change and tracking accuracy.

The theoretical weight change is driven by the average daily balance of
burnt minus consumed calories. Note this is the opposite sign convention
from the daily calorie_deficit (target minus net); monthly reports have
always used it, so it is kept as-is.
"""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

from fittrack.energy.formulas import (
    as_amount,
    estimate_weight_change_kg,
    is_missing,
    round_half_up,
)
from fittrack.tracking.models import (
    DayBucket,
    MonthlySummary,
    Profile,
    WeightEntry,
)

TOP_ITEMS = 3


def accuracy_index(actual_change: float, theoretical_change: float) -> int:
    """Score how closely the actual weight change matched the prediction.

    Args:
        actual_change: Measured weight change (kg)
        theoretical_change: Predicted weight change (kg)

    Returns:
        0-100. 100 when no change was predicted. 0 when the two moved in
        opposite directions. Otherwise the ratio of the smaller magnitude to
        the larger one, as a percentage.
    """
    if theoretical_change == 0:
        return 100

    same_direction = (actual_change >= 0 and theoretical_change >= 0) or (
        actual_change <= 0 and theoretical_change <= 0
    )
    if not same_direction:
        return 0

    smaller = min(abs(actual_change), abs(theoretical_change))
    larger = max(abs(actual_change), abs(theoretical_change))
    return round_half_up(smaller / larger * 100)


def _has_weight(entry: Optional[WeightEntry]) -> bool:
    return entry is not None and not is_missing(entry.weight_kg)


def most_common_names(names: Sequence[str], limit: int = TOP_ITEMS) -> list[str]:
    """Top names by count; ties keep first-seen order."""
    return [name for name, _ in Counter(names).most_common(limit)]


def generate_monthly_summary(
    days: Sequence[DayBucket],
    profile: Optional[Profile] = None,
    start_weight: Optional[WeightEntry] = None,
    end_weight: Optional[WeightEntry] = None,
) -> MonthlySummary:
    """Fold a month of day buckets into a MonthlySummary.

    Every bucket counts toward the averages, including days with no entries.
    An empty sequence is averaged over one day and counts as one tracked
    day.

    Args:
        days: Day buckets for the period
        profile: User profile. Monthly figures do not depend on it; it is
            accepted so callers can pass the same inputs as for a daily
            summary.
        start_weight: First weigh-in of the period
        end_weight: Last weigh-in of the period

    Returns:
        MonthlySummary
    """
    consumed = 0.0
    burnt = 0.0
    protein = 0.0
    carbs = 0.0
    fat = 0.0
    duration = 0.0
    meal_names: list[str] = []
    exercise_names: list[str] = []

    for day in days:
        consumed += sum(as_amount(meal.calories) for meal in day.meals)
        burnt += sum(as_amount(exercise.calories_burnt) for exercise in day.exercises)
        protein += sum(as_amount(meal.protein) for meal in day.meals)
        carbs += sum(as_amount(meal.carbs) for meal in day.meals)
        fat += sum(as_amount(meal.fat) for meal in day.meals)
        duration += sum(as_amount(exercise.duration_min) for exercise in day.exercises)
        meal_names.extend(meal.name for meal in day.meals)
        exercise_names.extend(exercise.name for exercise in day.exercises)

    day_count = max(1, len(days))

    avg_consumed = consumed / day_count
    avg_burnt = burnt / day_count

    weight_change = 0.0
    if _has_weight(start_weight) and _has_weight(end_weight):
        weight_change = end_weight.weight_kg - start_weight.weight_kg

    # Positive when burning more than eating
    theoretical_daily_balance = avg_burnt - avg_consumed
    theoretical_change = estimate_weight_change_kg(theoretical_daily_balance, day_count)

    return MonthlySummary(
        average_daily_calories_consumed=round_half_up(avg_consumed),
        average_daily_calories_burnt=round_half_up(avg_burnt),
        average_net_calories=round_half_up(avg_consumed - avg_burnt),
        average_daily_protein=round_half_up(protein / day_count),
        average_daily_carbs=round_half_up(carbs / day_count),
        average_daily_fat=round_half_up(fat / day_count),
        average_daily_exercise_duration=round_half_up(duration / day_count),
        weight_change=round(weight_change, 2),
        theoretical_weight_change=round(theoretical_change, 3),
        accuracy_index=accuracy_index(weight_change, theoretical_change),
        days_tracked=day_count,
        most_common_meals=most_common_names(meal_names),
        most_common_exercises=most_common_names(exercise_names),
    )
