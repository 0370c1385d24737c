"""Data models for meal, exercise and weight tracking."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


def _finite(value: Optional[float]) -> bool:
    """True for a non-zero, finite number."""
    return bool(value) and math.isfinite(value)


class Gender(Enum):
    """Gender as recorded on the profile.

    The BMR formula only distinguishes male from everything else; OTHER is
    the explicit fallback for any value we don't recognize.
    """
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str | Gender]) -> Optional[Gender]:
        """Parse free text into a Gender, or None when nothing was given."""
        if isinstance(value, Gender):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class ActivityLevel(Enum):
    """Activity level used to scale BMR into TDEE."""
    SEDENTARY = "sedentary"          # Little or no exercise
    LIGHT = "light"                  # Light exercise 1-3 days/week
    MODERATE = "moderate"            # Moderate exercise 3-5 days/week
    ACTIVE = "active"                # Hard exercise 6-7 days/week
    VERY_ACTIVE = "very_active"      # Very hard exercise, physical job
    UNKNOWN = "unknown"              # Unrecognized level, scored as sedentary

    @classmethod
    def parse(cls, value: Optional[str | ActivityLevel]) -> Optional[ActivityLevel]:
        """Parse free text into an ActivityLevel, or None when nothing was given."""
        if isinstance(value, ActivityLevel):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class Intensity(Enum):
    """Perceived exercise intensity."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Optional[str | Intensity]) -> Intensity:
        if isinstance(value, Intensity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MODERATE


class ExerciseType(Enum):
    """Exercise category for MET lookup."""
    GENERAL = "general"
    WALKING = "walking"
    CYCLING = "cycling"
    SWIMMING = "swimming"
    STRENGTH = "strength"
    RUNNING = "running"  # No MET row of its own; scored as general

    @classmethod
    def parse(cls, value: Optional[str | ExerciseType]) -> ExerciseType:
        if isinstance(value, ExerciseType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERAL


@dataclass
class Profile:
    """User profile for BMR/TDEE and goal calculations.

    Every field is optional. Missing height, age, gender or activity level
    disables the energy calculations in the summaries.
    """

    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None  # latest known weight
    target_weight_kg: Optional[float] = None
    target_date: Optional[date] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    activity_level: Optional[ActivityLevel] = None

    @property
    def has_energy_inputs(self) -> bool:
        """True when height, age, gender and activity level are all set."""
        return bool(
            _finite(self.height_cm) and _finite(self.age)
            and self.gender and self.activity_level
        )

    @property
    def has_weight_goal(self) -> bool:
        return bool(self.target_weight_kg and self.target_date)


@dataclass(frozen=True)
class MealEntry:
    """A single logged meal."""

    name: str
    calories: float
    timestamp: datetime
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None


@dataclass(frozen=True)
class ExerciseEntry:
    """A single logged exercise session."""

    name: str
    calories_burnt: float
    duration_min: float
    timestamp: datetime
    intensity: Intensity = Intensity.MODERATE
    exercise_type: ExerciseType = ExerciseType.GENERAL

    @classmethod
    def estimated(
        cls,
        name: str,
        weight_kg: Optional[float],
        duration_min: float,
        timestamp: datetime,
        intensity: Intensity = Intensity.MODERATE,
        exercise_type: ExerciseType = ExerciseType.GENERAL,
    ) -> ExerciseEntry:
        """Build an entry whose calories come from the MET formula."""
        from fittrack.energy.formulas import compute_exercise_calories

        return cls(
            name=name,
            calories_burnt=compute_exercise_calories(
                weight_kg, duration_min, intensity, exercise_type
            ),
            duration_min=duration_min,
            timestamp=timestamp,
            intensity=intensity,
            exercise_type=exercise_type,
        )


@dataclass(frozen=True)
class WeightEntry:
    """A single weigh-in."""

    weight_kg: float
    timestamp: datetime


@dataclass
class DayBucket:
    """All entries logged on one calendar day."""

    day: Optional[date] = None
    meals: list[MealEntry] = field(default_factory=list)
    exercises: list[ExerciseEntry] = field(default_factory=list)
    weight: Optional[WeightEntry] = None

    @property
    def is_empty(self) -> bool:
        return not self.meals and not self.exercises and self.weight is None


@dataclass
class DailySummary:
    """Computed totals and energy figures for one day."""

    total_calories_consumed: int
    total_calories_burnt: int
    net_calories: int
    total_protein: int
    total_carbs: int
    total_fat: int
    total_exercise_duration: int
    bmr: int
    tdee: int
    calorie_target: int
    calorie_deficit: int            # target - net; negative when net exceeds target
    estimated_daily_weight_change: str  # kg, 3 decimals

    # Goal progress, only present when the profile supports it
    target_weight: Optional[float] = None
    current_weight: Optional[float] = None
    target_date: Optional[date] = None
    days_until_target: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dict for JSON output, omitting absent goal fields."""
        data = {
            "total_calories_consumed": self.total_calories_consumed,
            "total_calories_burnt": self.total_calories_burnt,
            "net_calories": self.net_calories,
            "total_protein": self.total_protein,
            "total_carbs": self.total_carbs,
            "total_fat": self.total_fat,
            "total_exercise_duration": self.total_exercise_duration,
            "bmr": self.bmr,
            "tdee": self.tdee,
            "calorie_target": self.calorie_target,
            "calorie_deficit": self.calorie_deficit,
            "estimated_daily_weight_change": self.estimated_daily_weight_change,
        }
        if self.target_weight is not None:
            data["target_weight"] = self.target_weight
        if self.current_weight is not None:
            data["current_weight"] = self.current_weight
        if self.target_date is not None:
            data["target_date"] = self.target_date.isoformat()
        if self.days_until_target is not None:
            data["days_until_target"] = self.days_until_target
        return data


@dataclass
class MonthlySummary:
    """Per-day averages and weight accuracy across a month of logs."""

    average_daily_calories_consumed: int
    average_daily_calories_burnt: int
    average_net_calories: int
    average_daily_protein: int
    average_daily_carbs: int
    average_daily_fat: int
    average_daily_exercise_duration: int
    weight_change: float               # last - first weigh-in, kg
    theoretical_weight_change: float   # from avg burnt - avg consumed, kg
    accuracy_index: int                # 0-100
    days_tracked: int
    most_common_meals: list[str] = field(default_factory=list)
    most_common_exercises: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dict for JSON output."""
        return {
            "average_daily_calories_consumed": self.average_daily_calories_consumed,
            "average_daily_calories_burnt": self.average_daily_calories_burnt,
            "average_net_calories": self.average_net_calories,
            "average_daily_protein": self.average_daily_protein,
            "average_daily_carbs": self.average_daily_carbs,
            "average_daily_fat": self.average_daily_fat,
            "average_daily_exercise_duration": self.average_daily_exercise_duration,
            "weight_change": self.weight_change,
            "theoretical_weight_change": self.theoretical_weight_change,
            "accuracy_index": self.accuracy_index,
            "most_common_meals": list(self.most_common_meals),
            "most_common_exercises": list(self.most_common_exercises),
            "days_tracked": self.days_tracked,
        }
