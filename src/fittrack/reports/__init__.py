"""Daily and monthly summaries and reports."""

from __future__ import annotations

from fittrack.reports.daily import generate_daily_summary
from fittrack.reports.generators import InsightGeneratorError, OpenAIInsightGenerator
from fittrack.reports.insights import (
    DailyReport,
    InsightGenerator,
    MonthlyReport,
    generate_daily_report,
    generate_monthly_report,
)
from fittrack.reports.monthly import accuracy_index, generate_monthly_summary

__all__ = [
    "DailyReport",
    "InsightGenerator",
    "InsightGeneratorError",
    "MonthlyReport",
    "OpenAIInsightGenerator",
    "accuracy_index",
    "generate_daily_report",
    "generate_daily_summary",
    "generate_monthly_report",
    "generate_monthly_summary",
]
