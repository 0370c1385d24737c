"""Daily nutrition and energy summary."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from fittrack.energy.formulas import (
    as_amount,
    compute_bmr,
    compute_tdee,
    estimate_weight_change_kg,
    is_missing,
    net_calories,
    round_half_up,
)
from fittrack.energy.goals import (
    days_until,
    target_calories_from_bmi,
    target_calories_from_weight_goal,
)
from fittrack.tracking.models import (
    DailySummary,
    ExerciseEntry,
    MealEntry,
    Profile,
    WeightEntry,
)


def generate_daily_summary(
    meals: Iterable[MealEntry],
    exercises: Iterable[ExerciseEntry],
    weight: Optional[WeightEntry] = None,
    profile: Optional[Profile] = None,
    today: Optional[date] = None,
) -> DailySummary:
    """Summarize one day of logs.

    BMR, TDEE and the calorie target need a weigh-in plus a profile with
    height, age, gender and activity level. When either is missing those
    figures are 0 and the goal-progress fields are left unset. A weigh-in
    or logged amount that is NaN or infinite counts as missing.

    days_until_target is 0, not omitted, once the target date has passed.

    The target comes from the profile's weight goal when both a target
    weight and a target date are set, otherwise from BMI category.

    Args:
        meals: Meals logged on the day
        exercises: Exercise sessions logged on the day
        weight: The day's weigh-in, if any
        profile: User profile
        today: Reference date for the goal countdown (default: date.today())

    Returns:
        DailySummary with whole-number totals
    """
    meals = list(meals)
    exercises = list(exercises)

    consumed = sum(as_amount(meal.calories) for meal in meals)
    burnt = sum(as_amount(exercise.calories_burnt) for exercise in exercises)
    protein = sum(as_amount(meal.protein) for meal in meals)
    carbs = sum(as_amount(meal.carbs) for meal in meals)
    fat = sum(as_amount(meal.fat) for meal in meals)
    duration = sum(as_amount(exercise.duration_min) for exercise in exercises)

    net = net_calories(consumed, burnt)

    bmr = 0.0
    tdee = 0
    calorie_target = 0
    calorie_deficit = 0.0
    estimated_change = 0.0
    goal_fields: dict = {}

    has_weigh_in = weight is not None and not is_missing(weight.weight_kg)
    if profile is not None and has_weigh_in and profile.has_energy_inputs:
        if today is None:
            today = date.today()

        bmr = compute_bmr(weight.weight_kg, profile.height_cm, profile.age, profile.gender)
        tdee = compute_tdee(bmr, profile.activity_level)

        if profile.has_weight_goal:
            calorie_target = target_calories_from_weight_goal(
                weight.weight_kg,
                profile.target_weight_kg,
                profile.target_date,
                tdee,
                today=today,
            )
        else:
            calorie_target = target_calories_from_bmi(
                weight.weight_kg, profile.height_cm, tdee
            )

        calorie_deficit = calorie_target - net
        estimated_change = estimate_weight_change_kg(calorie_deficit, 1)

        goal_fields = {
            "target_weight": (
                None if is_missing(profile.target_weight_kg) else profile.target_weight_kg
            ),
            "current_weight": weight.weight_kg,
            "target_date": profile.target_date,
            "days_until_target": (
                days_until(profile.target_date, today)
                if profile.target_date is not None
                else None
            ),
        }

    return DailySummary(
        total_calories_consumed=round_half_up(consumed),
        total_calories_burnt=round_half_up(burnt),
        net_calories=round_half_up(net),
        total_protein=round_half_up(protein),
        total_carbs=round_half_up(carbs),
        total_fat=round_half_up(fat),
        total_exercise_duration=round_half_up(duration),
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
        calorie_target=round_half_up(calorie_target),
        calorie_deficit=round_half_up(calorie_deficit),
        estimated_daily_weight_change=f"{estimated_change:.3f}",
        **goal_fields,
    )
