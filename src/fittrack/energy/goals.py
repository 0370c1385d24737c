"""Calorie targets from BMI or from an explicit target weight and date."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from fittrack.energy.formulas import (
    KCAL_PER_KG,
    calculate_bmi,
    is_missing,
    round_half_up,
)

# Floor for deadline-driven targets (kcal/day)
MIN_SAFE_CALORIES = 1200


class WeightGoal(Enum):
    """Direction of the weight goal."""
    LOSS = "loss"
    MAINTAIN = "maintain"
    GAIN = "gain"


class GoalRate(Enum):
    """How aggressively to pursue the goal."""
    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"


@dataclass(frozen=True)
class GoalPlan:
    """A goal direction paired with a rate."""

    goal: WeightGoal
    rate: GoalRate = GoalRate.MODERATE


# Calorie adjustments from TDEE by goal and rate
GOAL_ADJUSTMENTS = {
    WeightGoal.LOSS: {GoalRate.SLOW: -250, GoalRate.MODERATE: -500, GoalRate.FAST: -750},
    WeightGoal.MAINTAIN: {GoalRate.SLOW: 0, GoalRate.MODERATE: 0, GoalRate.FAST: 0},
    WeightGoal.GAIN: {GoalRate.SLOW: 250, GoalRate.MODERATE: 500, GoalRate.FAST: 750},
}


def resolve_goal_from_bmi(bmi: float) -> GoalPlan:
    """Pick a goal from BMI category.

    Underweight -> gain, normal -> maintain, overweight -> moderate loss,
    obese -> fast loss. A non-finite BMI (zero height) lands in the last
    branch.
    """
    if bmi < 18.5:
        return GoalPlan(WeightGoal.GAIN, GoalRate.MODERATE)
    elif bmi < 25:
        return GoalPlan(WeightGoal.MAINTAIN, GoalRate.MODERATE)
    elif bmi < 30:
        return GoalPlan(WeightGoal.LOSS, GoalRate.MODERATE)
    return GoalPlan(WeightGoal.LOSS, GoalRate.FAST)


def calorie_adjustment(goal: WeightGoal, rate: GoalRate = GoalRate.MODERATE) -> int:
    """Return the daily calorie adjustment from TDEE for a goal and rate."""
    return GOAL_ADJUSTMENTS[goal][rate]


def calories_for_goal(
    tdee: float,
    goal: WeightGoal,
    rate: GoalRate = GoalRate.MODERATE,
) -> int:
    """Calories needed per day for a goal: TDEE plus the goal adjustment."""
    return round_half_up(tdee + calorie_adjustment(goal, rate))


def target_calories_from_bmi(weight_kg: float, height_cm: float, tdee: float) -> int:
    """Calculate a daily calorie target from BMI category.

    Args:
        weight_kg: Current weight in kilograms
        height_cm: Height in centimeters
        tdee: Total Daily Energy Expenditure

    Returns:
        Target calories per day
    """
    plan = resolve_goal_from_bmi(calculate_bmi(weight_kg, height_cm))
    return calories_for_goal(tdee, plan.goal, plan.rate)


def days_until(target_date: date, today: Optional[date] = None) -> int:
    """Whole days from today until target_date, never negative."""
    if today is None:
        today = date.today()
    return max(0, math.ceil((target_date - today).days))


def target_calories_from_weight_goal(
    current_weight_kg: float,
    target_weight_kg: Optional[float],
    target_date: Optional[date],
    tdee: float,
    today: Optional[date] = None,
) -> int:
    """Calculate a daily calorie target that reaches target weight by target date.

    The required daily surplus (or deficit) is spread evenly over the days
    remaining, at 7700 kcal per kg, and the result never drops below
    MIN_SAFE_CALORIES.

    Without a target (or with a non-finite current or target weight), or when
    the target date is today or already past, this falls back to target_calories_from_bmi with a height of 0. That makes the
    BMI infinite, so the fallback always resolves to fast loss.

    Args:
        current_weight_kg: Current weight in kilograms
        target_weight_kg: Goal weight in kilograms
        target_date: Date to reach the goal weight
        tdee: Total Daily Energy Expenditure
        today: Reference date (default: date.today())

    Returns:
        Target calories per day
    """
    if today is None:
        today = date.today()

    unusable = is_missing(target_weight_kg) or is_missing(current_weight_kg)
    if unusable or target_date is None or not target_date > today:
        return target_calories_from_bmi(current_weight_kg, 0, tdee)

    remaining_days = math.ceil((target_date - today).days)
    required_daily_delta = (
        (target_weight_kg - current_weight_kg) * KCAL_PER_KG / remaining_days
    )

    return max(MIN_SAFE_CALORIES, round_half_up(tdee + required_daily_delta))
