"""Output formatters for daily and monthly reports."""

from __future__ import annotations

import json
from typing import Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fittrack.reports.insights import DailyReport, MonthlyReport

Report = Union[DailyReport, MonthlyReport]


def _signed(value: int) -> str:
    return f"{value:+d} kcal"


def _notes(report: Report) -> list[tuple[str, list[dict]]]:
    """Generated lists worth showing, with a heading for each."""
    if isinstance(report, DailyReport):
        sections = [
            ("Insights", report.insights),
            ("Recommendations", report.recommendations),
        ]
    else:
        sections = [
            ("Trends", report.trends),
            ("Achievements", report.achievements),
            ("Recommendations", report.recommendations),
        ]
    return [(title, items) for title, items in sections if items]


def _note_text(item: dict) -> str:
    for key in ("message", "suggestion", "description"):
        if item.get(key):
            return str(item[key])
    return json.dumps(item)


class TableFormatter:
    """Format reports as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format(self, report: Report, label: Optional[str] = None) -> None:
        """Print formatted tables to console.

        Args:
            report: Daily or monthly report
            label: Period shown in the header (e.g. "2026-10-18")
        """
        if isinstance(report, DailyReport):
            self._format_daily(report, label)
        else:
            self._format_monthly(report, label)

        for title, items in _notes(report):
            self.console.print(f"\n[bold]{title}[/bold]")
            for item in items:
                self.console.print(f"  - {_note_text(item)}")

    def _format_daily(self, report: DailyReport, label: Optional[str]) -> None:
        s = report.summary
        header = "[bold]DAILY SUMMARY[/bold]"
        if label:
            header += f" - {label}"
        self.console.print(Panel(header, title="fittrack"))

        table = Table(title="Energy Balance")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Calories consumed", f"{s.total_calories_consumed} kcal")
        table.add_row("Calories burnt", f"{s.total_calories_burnt} kcal")
        table.add_row("Net calories", f"{s.net_calories} kcal")
        table.add_row("Protein / Carbs / Fat", f"{s.total_protein} / {s.total_carbs} / {s.total_fat} g")
        table.add_row("Exercise", f"{s.total_exercise_duration} min")
        if s.bmr:
            table.add_row("BMR", f"{s.bmr} kcal")
            table.add_row("TDEE", f"{s.tdee} kcal")
            table.add_row("Calorie target", f"{s.calorie_target} kcal")
            color = "green" if s.calorie_deficit >= 0 else "red"
            table.add_row("Deficit vs target", f"[{color}]{_signed(s.calorie_deficit)}[/{color}]")
            table.add_row("Est. weight change", f"{s.estimated_daily_weight_change} kg")

        self.console.print(table)

        if s.target_weight is not None:
            goal = f"Goal: {s.current_weight} kg -> {s.target_weight} kg"
            if s.target_date is not None:
                goal += f" by {s.target_date.isoformat()}"
            if s.days_until_target is not None:
                goal += f" ({s.days_until_target} days left)"
            self.console.print(f"[dim]{goal}[/dim]")
        elif not s.bmr:
            self.console.print(
                "[yellow]Profile incomplete or no weigh-in: BMR/TDEE not calculated[/yellow]"
            )

    def _format_monthly(self, report: MonthlyReport, label: Optional[str]) -> None:
        s = report.summary
        header = "[bold]MONTHLY SUMMARY[/bold]"
        if label:
            header += f" - {label}"
        header += f"\nDays tracked: {s.days_tracked}"
        self.console.print(Panel(header, title="fittrack"))

        table = Table(title="Daily Averages")
        table.add_column("Metric", style="cyan")
        table.add_column("Average", justify="right")

        table.add_row("Calories consumed", f"{s.average_daily_calories_consumed} kcal")
        table.add_row("Calories burnt", f"{s.average_daily_calories_burnt} kcal")
        table.add_row("Net calories", f"{s.average_net_calories} kcal")
        table.add_row("Protein", f"{s.average_daily_protein} g")
        table.add_row("Carbs", f"{s.average_daily_carbs} g")
        table.add_row("Fat", f"{s.average_daily_fat} g")
        table.add_row("Exercise", f"{s.average_daily_exercise_duration} min")
        self.console.print(table)

        weight_table = Table(title="Weight")
        weight_table.add_column("Actual", justify="right")
        weight_table.add_column("Theoretical", justify="right")
        weight_table.add_column("Accuracy", justify="right")
        accuracy_color = "green" if s.accuracy_index >= 70 else "yellow"
        weight_table.add_row(
            f"{s.weight_change:+.2f} kg",
            f"{s.theoretical_weight_change:+.3f} kg",
            f"[{accuracy_color}]{s.accuracy_index}%[/{accuracy_color}]",
        )
        self.console.print(weight_table)

        if s.most_common_meals:
            self.console.print(f"Top meals: {', '.join(s.most_common_meals)}")
        if s.most_common_exercises:
            self.console.print(f"Top exercises: {', '.join(s.most_common_exercises)}")


class JSONFormatter:
    """Format reports as JSON for programmatic use."""

    def format(self, report: Report, label: Optional[str] = None) -> str:
        """Return JSON string."""
        data = {"period": label}
        data.update(report.to_dict())
        return json.dumps(data, indent=2)


class MarkdownFormatter:
    """Format reports as Markdown for sharing or documentation."""

    def format(self, report: Report, label: Optional[str] = None) -> str:
        """Return Markdown string."""
        if isinstance(report, DailyReport):
            lines = self._daily_lines(report, label)
        else:
            lines = self._monthly_lines(report, label)

        for title, items in _notes(report):
            lines.extend(["", f"## {title}", ""])
            lines.extend(f"- {_note_text(item)}" for item in items)

        return "\n".join(lines)

    def _daily_lines(self, report: DailyReport, label: Optional[str]) -> list[str]:
        s = report.summary
        lines = [f"# Daily Summary{f' - {label}' if label else ''}", ""]
        lines.extend(["| Metric | Value |", "|--------|-------|"])
        lines.append(f"| Calories consumed | {s.total_calories_consumed} kcal |")
        lines.append(f"| Calories burnt | {s.total_calories_burnt} kcal |")
        lines.append(f"| Net calories | {s.net_calories} kcal |")
        lines.append(f"| Protein | {s.total_protein} g |")
        lines.append(f"| Carbs | {s.total_carbs} g |")
        lines.append(f"| Fat | {s.total_fat} g |")
        lines.append(f"| Exercise | {s.total_exercise_duration} min |")
        lines.append(f"| BMR | {s.bmr} kcal |")
        lines.append(f"| TDEE | {s.tdee} kcal |")
        lines.append(f"| Calorie target | {s.calorie_target} kcal |")
        lines.append(f"| Deficit vs target | {_signed(s.calorie_deficit)} |")
        lines.append(f"| Est. weight change | {s.estimated_daily_weight_change} kg |")
        if s.days_until_target is not None:
            lines.append(f"| Days until target | {s.days_until_target} |")
        return lines

    def _monthly_lines(self, report: MonthlyReport, label: Optional[str]) -> list[str]:
        s = report.summary
        lines = [f"# Monthly Summary{f' - {label}' if label else ''}", ""]
        lines.append(f"**Days tracked:** {s.days_tracked}")
        lines.extend(["", "| Metric | Daily average |", "|--------|---------------|"])
        lines.append(f"| Calories consumed | {s.average_daily_calories_consumed} kcal |")
        lines.append(f"| Calories burnt | {s.average_daily_calories_burnt} kcal |")
        lines.append(f"| Net calories | {s.average_net_calories} kcal |")
        lines.append(f"| Protein | {s.average_daily_protein} g |")
        lines.append(f"| Carbs | {s.average_daily_carbs} g |")
        lines.append(f"| Fat | {s.average_daily_fat} g |")
        lines.append(f"| Exercise | {s.average_daily_exercise_duration} min |")
        lines.extend([
            "",
            f"**Weight change:** {s.weight_change:+.2f} kg "
            f"(theoretical {s.theoretical_weight_change:+.3f} kg, "
            f"accuracy {s.accuracy_index}%)",
        ])
        if s.most_common_meals:
            lines.append(f"**Top meals:** {', '.join(s.most_common_meals)}")
        if s.most_common_exercises:
            lines.append(f"**Top exercises:** {', '.join(s.most_common_exercises)}")
        return lines


def format_report(
    report: Report,
    output_format: str = "table",
    label: Optional[str] = None,
    console: Optional[Console] = None,
) -> Optional[str]:
    """Format a report in the specified format.

    Args:
        report: Daily or monthly report
        output_format: One of 'table', 'json', 'markdown'
        label: Period label for headers
        console: Rich console (for table format)

    Returns:
        Formatted string for json/markdown, None for table (prints directly)
    """
    if output_format == "table":
        formatter = TableFormatter(console)
        formatter.format(report, label)
        return None
    elif output_format == "json":
        return JSONFormatter().format(report, label)
    elif output_format == "markdown":
        return MarkdownFormatter().format(report, label)
    else:
        raise ValueError(f"Unknown output format: {output_format}")
