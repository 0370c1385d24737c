"""Pytest fixtures for fittrack tests."""

from __future__ import annotations

from datetime import date, datetime

import pytest
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

TODAY = date(2026, 10, 18)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def profile() -> Profile:
    """Complete profile without a weight goal (BMI-based targets)."""
    return Profile(
        height_cm=175,
        weight_kg=70,
        age=30,
        gender=Gender.MALE,
        activity_level=ActivityLevel.SEDENTARY,
    )


@pytest.fixture
def goal_profile(profile: Profile) -> Profile:
    """Complete profile aiming for 65 kg by the end of the year."""
    profile.target_weight_kg = 65
    profile.target_date = date(2026, 12, 31)
    return profile


@pytest.fixture
def meals() -> list[MealEntry]:
    return [
        MealEntry("Oatmeal", 350, datetime(2026, 10, 18, 8, 0), protein=12, carbs=60, fat=6),
        MealEntry("Chicken salad", 520, datetime(2026, 10, 18, 12, 30), protein=45, carbs=20, fat=28),
        MealEntry("Pasta", 780, datetime(2026, 10, 18, 19, 0), protein=25.5, carbs=110, fat=20),
    ]


@pytest.fixture
def exercises() -> list[ExerciseEntry]:
    return [
        ExerciseEntry(
            "Morning run", 300, 30, datetime(2026, 10, 18, 7, 0),
            intensity=Intensity.HIGH, exercise_type=ExerciseType.RUNNING,
        ),
        ExerciseEntry("Walk", 100, 25, datetime(2026, 10, 18, 17, 0)),
    ]


@pytest.fixture
def weight() -> WeightEntry:
    return WeightEntry(70, datetime(2026, 10, 18, 6, 45))


@pytest.fixture
def log_data() -> dict:
    """Two days of logs in the on-disk format."""
    return {
        "profile": {
            "height": 175,
            "weight": 70,
            "age": 30,
            "gender": "male",
            "activity_level": "sedentary",
        },
        "meals": [
            {"name": "Oatmeal", "calories": 350, "protein": 12, "carbs": 60, "fat": 6,
             "timestamp": "2026-10-17T08:00:00"},
            {"name": "Pasta", "calories": 780, "protein": 25, "carbs": 110, "fat": 20,
             "timestamp": "2026-10-17T19:00:00"},
            {"name": "Oatmeal", "calories": 350, "protein": 12, "carbs": 60, "fat": 6,
             "timestamp": "2026-10-18T08:00:00"},
        ],
        "exercises": [
            {"name": "Cycling", "duration": 60, "intensity": "moderate",
             "exercise_type": "cycling", "timestamp": "2026-10-17T18:00:00"},
            {"name": "Run", "duration": 30, "calories_burnt": 300,
             "timestamp": "2026-10-18T07:00:00"},
        ],
        "weights": [
            {"weight": 70.4, "timestamp": "2026-10-17T06:30:00"},
            {"weight": 70.0, "timestamp": "2026-10-18T06:30:00"},
        ],
    }


@pytest.fixture
def log_file(tmp_path, log_data):
    """Write the sample log to a YAML file and return its path."""
    path = tmp_path / "log.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(log_data, f, sort_keys=False)
    return path
