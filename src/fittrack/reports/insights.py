"""Daily and monthly reports with optional generated insights.

The numeric summary is always computed locally and is the source of truth.
An external InsightGenerator (typically an LLM client) may add insight,
recommendation, trend and achievement lists on top of it. When no generator
is configured, or when it fails or answers with something that isn't JSON,
the report still comes back with the summary and empty lists.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from string import Template
from typing import Any, Optional, Protocol, Sequence

from fittrack.config.settings import InsightSettings
from fittrack.reports.daily import generate_daily_summary
from fittrack.reports.monthly import generate_monthly_summary
from fittrack.tracking.bucketing import select_weight_bounds
from fittrack.tracking.models import (
    DailySummary,
    DayBucket,
    ExerciseEntry,
    MealEntry,
    MonthlySummary,
    Profile,
    WeightEntry,
)

logger = logging.getLogger(__name__)


class InsightGenerator(Protocol):
    """Anything that turns a prompt into response text."""

    def generate(self, prompt: str) -> str:
        ...


DAILY_PROMPT = Template("""Analyze this daily fitness data and provide insights and recommendations in JSON format:
Data: $DATA
Accurate Summary: $SUMMARY

Return a JSON object with the following structure:
{
  "insights": [
    {
      "type": "nutrition" | "exercise" | "weight" | "general",
      "message": string,
      "severity": "positive" | "neutral" | "warning"
    }
  ],
  "recommendations": [
    {
      "category": "nutrition" | "exercise" | "weight" | "general",
      "suggestion": string,
      "priority": "high" | "medium" | "low"
    }
  ]
}

Only return the JSON object, no additional text or markdown formatting.""")

MONTHLY_PROMPT = Template("""Analyze this monthly fitness data and provide insights in JSON format:
Data: $DATA
Accurate Summary: $SUMMARY

Return a JSON object with the following structure:
{
  "trends": [
    {
      "type": "nutrition" | "exercise" | "weight" | "general",
      "description": string,
      "direction": "improving" | "stable" | "declining"
    }
  ],
  "achievements": [
    {
      "category": "nutrition" | "exercise" | "weight" | "consistency",
      "description": string,
      "significance": "high" | "medium" | "low"
    }
  ],
  "recommendations": [
    {
      "category": "nutrition" | "exercise" | "weight" | "general",
      "suggestion": string,
      "priority": "high" | "medium" | "low"
    }
  ]
}

Only return the JSON object, no additional text or markdown formatting.""")


@dataclass
class DailyReport:
    """Daily summary plus generated insights."""

    summary: DailySummary
    insights: list[dict] = field(default_factory=list)
    recommendations: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "insights": self.insights,
            "recommendations": self.recommendations,
        }


@dataclass
class MonthlyReport:
    """Monthly summary plus generated trends and achievements."""

    summary: MonthlySummary
    trends: list[dict] = field(default_factory=list)
    achievements: list[dict] = field(default_factory=list)
    recommendations: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "trends": self.trends,
            "achievements": self.achievements,
            "recommendations": self.recommendations,
        }


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=_json_default)


def clean_json_response(text: str) -> str:
    """Strip markdown code fences from a model response."""
    return re.sub(r"```json\n?|\n?```", "", text).strip()


def parse_insight_payload(text: str) -> Optional[dict]:
    """Decode a generator response into a dict, or None if it isn't a JSON object."""
    cleaned = clean_json_response(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning("Failed to parse insight response: %r", cleaned[:200])
        return None
    if not isinstance(payload, dict):
        logger.warning("Insight response is not a JSON object: %r", cleaned[:200])
        return None
    return payload


def _list_field(payload: dict, key: str) -> list[dict]:
    value = payload.get(key) or []
    return value if isinstance(value, list) else []


def build_daily_prompt(
    summary: DailySummary,
    meals: Sequence[MealEntry],
    exercises: Sequence[ExerciseEntry],
    weight: Optional[WeightEntry] = None,
) -> str:
    """Build the daily insight prompt from raw logs and the computed summary."""
    data = {
        "meals": [asdict(meal) for meal in meals],
        "exercises": [asdict(exercise) for exercise in exercises],
        "weight": asdict(weight) if weight is not None else None,
    }
    return DAILY_PROMPT.substitute(DATA=_to_json(data), SUMMARY=_to_json(summary.to_dict()))


def build_monthly_prompt(
    summary: MonthlySummary,
    days: Sequence[DayBucket],
) -> str:
    """Build the monthly insight prompt from day buckets and the computed summary."""
    data = {"dailyData": [asdict(day) for day in days]}
    dated = [day.day for day in days if day.day is not None]
    if dated:
        data["startDate"] = min(dated)
        data["endDate"] = max(dated)
    return MONTHLY_PROMPT.substitute(DATA=_to_json(data), SUMMARY=_to_json(summary.to_dict()))


def _request_insights(
    prompt: str,
    generator: Optional[InsightGenerator],
    settings: Optional[InsightSettings],
) -> Optional[dict]:
    """Ask the generator for insights; None when unavailable or failed."""
    if generator is None:
        return None
    if settings is not None and not settings.is_configured:
        logger.debug("Insight generator not configured, skipping insights")
        return None

    try:
        text = generator.generate(prompt)
    except Exception:
        logger.warning("Insight generator failed, returning summary only", exc_info=True)
        return None

    if not isinstance(text, str):
        logger.warning("Insight generator returned %s, expected str", type(text).__name__)
        return None
    return parse_insight_payload(text)


def generate_daily_report(
    meals: Sequence[MealEntry],
    exercises: Sequence[ExerciseEntry],
    weight: Optional[WeightEntry] = None,
    profile: Optional[Profile] = None,
    generator: Optional[InsightGenerator] = None,
    settings: Optional[InsightSettings] = None,
    today: Optional[date] = None,
) -> DailyReport:
    """Compute the daily summary and attach generated insights when available.

    Args:
        meals: Meals logged on the day
        exercises: Exercise sessions logged on the day
        weight: The day's weigh-in
        profile: User profile
        generator: External insight generator, optional
        settings: Insight settings; when given, insights are only requested
            if enabled and an API key is configured
        today: Reference date for the goal countdown

    Returns:
        DailyReport whose summary is never altered by the generator
    """
    meals = list(meals)
    exercises = list(exercises)
    summary = generate_daily_summary(meals, exercises, weight, profile, today=today)

    payload = None
    if generator is not None:
        prompt = build_daily_prompt(summary, meals, exercises, weight)
        payload = _request_insights(prompt, generator, settings)

    if payload is None:
        return DailyReport(summary=summary)

    return DailyReport(
        summary=summary,
        insights=_list_field(payload, "insights"),
        recommendations=_list_field(payload, "recommendations"),
    )


def generate_monthly_report(
    days: Sequence[DayBucket],
    profile: Optional[Profile] = None,
    generator: Optional[InsightGenerator] = None,
    settings: Optional[InsightSettings] = None,
) -> MonthlyReport:
    """Compute the monthly summary and attach generated insights when available.

    The first and last weigh-ins of the period are picked from the buckets.

    Args:
        days: Day buckets for the month
        profile: User profile
        generator: External insight generator, optional
        settings: Insight settings, see generate_daily_report

    Returns:
        MonthlyReport whose summary is never altered by the generator
    """
    days = list(days)
    start_weight, end_weight = select_weight_bounds(days)
    summary = generate_monthly_summary(days, profile, start_weight, end_weight)

    payload = None
    if generator is not None:
        prompt = build_monthly_prompt(summary, days)
        payload = _request_insights(prompt, generator, settings)

    if payload is None:
        return MonthlyReport(summary=summary)

    return MonthlyReport(
        summary=summary,
        trends=_list_field(payload, "trends"),
        achievements=_list_field(payload, "achievements"),
        recommendations=_list_field(payload, "recommendations"),
    )
