"""Energy expenditure formulas.

BMR uses the Mifflin-St Jeor equation, TDEE scales it by a Harris-Benedict
style activity factor, and exercise calories are estimated from MET values:

    calories = MET x weight(kg) x duration(hours)

Every function here is total: missing, zero or non-finite inputs produce 0
rather than an exception, and unrecognized enum text falls back to a default.
"""

from __future__ import annotations

import math
from typing import Optional

from fittrack.tracking.models import ActivityLevel, ExerciseType, Gender, Intensity

# Energy content of 1 kg of body weight, used for both gain and loss
KCAL_PER_KG = 7700

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2

MET_VALUES = {
    Intensity.LOW: {
        ExerciseType.GENERAL: 3.0,
        ExerciseType.WALKING: 2.5,
        ExerciseType.CYCLING: 4.0,
        ExerciseType.SWIMMING: 5.0,
        ExerciseType.STRENGTH: 3.5,
    },
    Intensity.MODERATE: {
        ExerciseType.GENERAL: 5.0,
        ExerciseType.WALKING: 4.3,
        ExerciseType.CYCLING: 8.0,
        ExerciseType.SWIMMING: 7.0,
        ExerciseType.STRENGTH: 5.0,
    },
    Intensity.HIGH: {
        ExerciseType.GENERAL: 8.0,
        ExerciseType.WALKING: 6.0,
        ExerciseType.CYCLING: 12.0,
        ExerciseType.SWIMMING: 10.0,
        ExerciseType.STRENGTH: 6.0,
    },
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up (-2.5 -> -2).

    NaN and infinities round to 0.
    """
    if not math.isfinite(value):
        return 0
    return math.floor(value + 0.5)


def is_missing(value: Optional[float]) -> bool:
    """True for None, zero, NaN and infinities."""
    if not value:
        return True
    return not math.isfinite(value)


def as_amount(value: Optional[float]) -> float:
    """A logged quantity ready for summing; None, NaN and inf count as 0."""
    if value is None or not math.isfinite(value):
        return 0
    return value


def compute_bmr(
    weight_kg: Optional[float],
    height_cm: Optional[float],
    age: Optional[float],
    gender: Optional[Gender | str],
) -> float:
    """Calculate Basal Metabolic Rate using the Mifflin-St Jeor equation.

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters
        age: Age in years
        gender: Gender; anything other than male uses the -161 constant

    Returns:
        BMR in calories per day, or 0 if any input is missing
    """
    if is_missing(weight_kg) or is_missing(height_cm) or is_missing(age) or not gender:
        return 0

    bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    if Gender.parse(gender) == Gender.MALE:
        return bmr + 5
    return bmr - 161


def compute_tdee(
    bmr: Optional[float],
    activity_level: Optional[ActivityLevel | str],
) -> int:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate
        activity_level: Activity level; unknown levels use the sedentary factor

    Returns:
        TDEE in whole calories per day, or 0 if either input is missing
    """
    level = ActivityLevel.parse(activity_level)
    if is_missing(bmr) or level is None:
        return 0

    multiplier = ACTIVITY_MULTIPLIERS.get(level, DEFAULT_ACTIVITY_MULTIPLIER)
    return round_half_up(bmr * multiplier)


def compute_exercise_calories(
    weight_kg: Optional[float],
    duration_min: Optional[float],
    intensity: Optional[Intensity | str] = Intensity.MODERATE,
    exercise_type: Optional[ExerciseType | str] = ExerciseType.GENERAL,
) -> int:
    """Estimate calories burned during exercise from MET values.

    Exercise types without their own MET row (e.g. running) are scored as
    general exercise.

    Args:
        weight_kg: Body weight in kilograms
        duration_min: Session length in minutes
        intensity: low, moderate or high (unknown -> moderate)
        exercise_type: Exercise category (unknown -> general)

    Returns:
        Calories burned, or 0 if weight or duration is missing
    """
    if is_missing(weight_kg) or is_missing(duration_min):
        return 0

    mets = MET_VALUES[Intensity.parse(intensity)]
    met = mets.get(ExerciseType.parse(exercise_type), mets[ExerciseType.GENERAL])

    hours = duration_min / 60
    return round_half_up(met * weight_kg * hours)


def net_calories(consumed: float, burnt: float) -> float:
    """Calories in minus calories out."""
    return consumed - burnt


def estimate_weight_change_kg(net_calories_per_day: float, days: float) -> float:
    """Estimate weight change in kg from a daily calorie balance.

    Uses 7700 kcal per kg in both directions.
    """
    return (net_calories_per_day * days) / KCAL_PER_KG


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Body Mass Index (kg/m^2).

    A zero height gives inf (nan when weight is also zero) instead of
    raising, matching floating point division semantics.
    """
    height_m_sq = (height_cm / 100) ** 2
    if height_m_sq == 0:
        return math.inf if weight_kg else math.nan
    return weight_kg / height_m_sq
