"""Energy-balance formulas and calorie goal resolution."""

from __future__ import annotations

from fittrack.energy.formulas import (
    KCAL_PER_KG,
    calculate_bmi,
    compute_bmr,
    compute_exercise_calories,
    compute_tdee,
    estimate_weight_change_kg,
    net_calories,
    round_half_up,
)
from fittrack.energy.goals import (
    MIN_SAFE_CALORIES,
    GoalPlan,
    GoalRate,
    WeightGoal,
    calorie_adjustment,
    calories_for_goal,
    resolve_goal_from_bmi,
    target_calories_from_bmi,
    target_calories_from_weight_goal,
)

__all__ = [
    "KCAL_PER_KG",
    "MIN_SAFE_CALORIES",
    "GoalPlan",
    "GoalRate",
    "WeightGoal",
    "calculate_bmi",
    "calorie_adjustment",
    "calories_for_goal",
    "compute_bmr",
    "compute_exercise_calories",
    "compute_tdee",
    "estimate_weight_change_kg",
    "net_calories",
    "resolve_goal_from_bmi",
    "round_half_up",
    "target_calories_from_bmi",
    "target_calories_from_weight_goal",
]
