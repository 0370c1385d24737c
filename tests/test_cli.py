"""Tests for CLI commands."""

from __future__ import annotations

import json
from datetime import date, timedelta
from types import SimpleNamespace

import pytest
from typer.testing import CliRunner

from fittrack.cli import app
from fittrack.reports import generators

runner = CliRunner()


@pytest.fixture
def no_config(tmp_path, monkeypatch):
    """Global options pointing at a config file that doesn't exist (defaults)."""
    monkeypatch.delenv("FITTRACK_INSIGHTS_API_KEY", raising=False)
    return ["--config", str(tmp_path / "missing.yaml")]


class TestMainCommands:
    """Tests for main CLI commands."""

    def test_help(self):
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "daily" in result.output.lower()
        assert "monthly" in result.output.lower()

    def test_daily_requires_log(self):
        """Test that daily requires a log file."""
        result = runner.invoke(app, ["daily"])
        assert result.exit_code != 0


class TestFormulaCommands:
    """Tests for the standalone formula commands."""

    def test_bmr_json(self):
        """Test BMR and TDEE output as JSON."""
        result = runner.invoke(app, [
            "bmr", "--weight", "70", "--height", "175", "--age", "30",
            "--gender", "male", "--activity", "sedentary", "--json",
        ])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["data"]["bmr"] == pytest.approx(1648.75)
        assert data["data"]["tdee"] == 1979

    def test_bmr_text(self):
        result = runner.invoke(app, [
            "bmr", "--weight", "70", "--height", "175", "--age", "30", "--gender", "female",
        ])
        assert result.exit_code == 0
        assert "1482.75" in result.output

    def test_tdee(self):
        result = runner.invoke(app, ["tdee", "--bmr", "1000", "--activity", "active", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["data"] == {"tdee": 1725, "activity_level": "active"}

    def test_exercise_calories(self):
        result = runner.invoke(app, [
            "exercise-calories", "--weight", "70", "--duration", "60",
            "--intensity", "high", "--type", "cycling", "--json",
        ])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["calories_burnt"] == 840

    def test_target_from_bmi(self):
        result = runner.invoke(app, [
            "target", "--weight", "80", "--tdee", "2500", "--height", "175", "--json",
        ])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data == {"calorie_target": 2000, "method": "bmi"}

    def test_target_from_weight_goal(self):
        """5 kg over 100 days: 1979 - 38500/100 = 1594."""
        goal_date = (date.today() + timedelta(days=100)).isoformat()
        result = runner.invoke(app, [
            "target", "--weight", "70", "--tdee", "1979",
            "--target-weight", "65", "--target-date", goal_date, "--json",
        ])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data == {"calorie_target": 1594, "method": "weight_goal"}

    def test_target_needs_height_or_goal(self):
        result = runner.invoke(app, ["target", "--weight", "70", "--tdee", "1979"])
        assert result.exit_code == 1

    def test_target_bad_date(self):
        result = runner.invoke(app, [
            "target", "--weight", "70", "--tdee", "1979", "--target-date", "soon",
        ])
        assert result.exit_code == 1
        assert "Invalid --target-date" in result.output


class TestDailyCommand:
    """Tests for the daily report command."""

    def test_json(self, log_file, no_config):
        result = runner.invoke(app, [
            *no_config, "daily", str(log_file), "--date", "2026-10-18", "--format", "json",
        ])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["period"] == "2026-10-18"
        summary = data["summary"]
        assert summary["total_calories_consumed"] == 350
        assert summary["total_calories_burnt"] == 300
        assert summary["net_calories"] == 50
        assert summary["bmr"] == 1649
        assert summary["tdee"] == 1979
        assert summary["calorie_target"] == 1979
        assert summary["calorie_deficit"] == 1929
        assert summary["estimated_daily_weight_change"] == "0.251"
        assert summary["current_weight"] == 70.0
        assert data["insights"] == []

    def test_previous_day_has_estimated_cycling(self, log_file, no_config):
        result = runner.invoke(app, [
            *no_config, "daily", str(log_file), "-d", "2026-10-17", "-f", "json",
        ])
        assert result.exit_code == 0
        summary = json.loads(result.stdout)["summary"]
        assert summary["total_calories_consumed"] == 1130
        assert summary["total_calories_burnt"] == 563

    def test_table(self, log_file, no_config):
        result = runner.invoke(app, [*no_config, "daily", str(log_file), "--date", "2026-10-18"])
        assert result.exit_code == 0
        assert "DAILY SUMMARY" in result.output
        assert "1979" in result.output

    def test_markdown(self, log_file, no_config):
        result = runner.invoke(app, [
            *no_config, "daily", str(log_file), "--date", "2026-10-18", "--format", "markdown",
        ])
        assert result.exit_code == 0
        assert "# Daily Summary - 2026-10-18" in result.output

    def test_format_from_config(self, log_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("defaults:\n  output_format: json\n")

        result = runner.invoke(app, [
            "--config", str(config), "daily", str(log_file), "--date", "2026-10-18",
        ])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["net_calories"] == 50

    def test_unknown_format(self, log_file, no_config):
        result = runner.invoke(app, [
            *no_config, "daily", str(log_file), "--date", "2026-10-18", "--format", "xml",
        ])
        assert result.exit_code == 1
        assert "Unknown output format" in result.output

    def test_bad_date(self, log_file, no_config):
        result = runner.invoke(app, [*no_config, "daily", str(log_file), "--date", "18/10/2026"])
        assert result.exit_code == 1

    def test_bad_log_file(self, tmp_path, no_config):
        path = tmp_path / "bad.yaml"
        path.write_text("meals:\n  - {name: Toast, calories: -1, timestamp: 2026-10-18T08:00:00}\n")

        result = runner.invoke(app, [*no_config, "daily", str(path), "--format", "json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert "must be >= 0" in data["errors"][0]

    def test_missing_log_file(self, tmp_path, no_config):
        result = runner.invoke(app, [*no_config, "daily", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Could not read log" in result.output

    def test_mixed_timestamp_kinds(self, tmp_path, no_config):
        path = tmp_path / "mixed.yaml"
        path.write_text(
            "weights:\n"
            "  - {weight: 70, timestamp: '2026-10-17T07:00:00'}\n"
            "  - {weight: 69.8, timestamp: '2026-10-18T07:00:00Z'}\n"
        )

        result = runner.invoke(app, [*no_config, "daily", str(path), "--format", "json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert "mixes timestamps" in data["errors"][0]


class TestMonthlyCommand:
    """Tests for the monthly report command."""

    def test_json(self, log_file, no_config):
        result = runner.invoke(app, [
            *no_config, "monthly", str(log_file), "--month", "2026-10", "--format", "json",
        ])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["period"] == "2026-10"
        summary = data["summary"]
        assert summary["days_tracked"] == 2
        assert summary["average_daily_calories_consumed"] == 740
        assert summary["average_daily_calories_burnt"] == 432
        assert summary["weight_change"] == pytest.approx(-0.4)
        assert summary["accuracy_index"] == 20
        assert summary["most_common_meals"] == ["Oatmeal", "Pasta"]
        assert data["trends"] == []

    def test_other_month_is_empty(self, log_file, no_config):
        result = runner.invoke(app, [
            *no_config, "monthly", str(log_file), "-m", "2026-09", "-f", "json",
        ])
        assert result.exit_code == 0
        summary = json.loads(result.stdout)["summary"]
        assert summary["days_tracked"] == 1
        assert summary["average_daily_calories_consumed"] == 0
        assert summary["accuracy_index"] == 100

    def test_table(self, log_file, no_config):
        result = runner.invoke(app, [*no_config, "monthly", str(log_file), "--month", "2026-10"])
        assert result.exit_code == 0
        assert "MONTHLY SUMMARY" in result.output
        assert "Oatmeal" in result.output

    def test_bad_month(self, log_file, no_config):
        result = runner.invoke(app, [*no_config, "monthly", str(log_file), "--month", "October"])
        assert result.exit_code == 1


DAILY_REPLY = json.dumps({
    "insights": [{"type": "nutrition", "message": "Protein on track", "severity": "positive"}],
    "recommendations": [],
})

MONTHLY_REPLY = json.dumps({
    "trends": [{"type": "weight", "description": "Slowly dropping", "direction": "improving"}],
    "achievements": [],
    "recommendations": [],
})


class FakeOpenAI:
    """Stands in for the OpenAI client, replying with canned chat content."""

    instances: list = []

    def __init__(self, api_key=None, reply=DAILY_REPLY):
        self.api_key = api_key
        self.requests = []
        self.reply = reply
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        FakeOpenAI.instances.append(self)

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)


@pytest.fixture
def fake_openai(monkeypatch):
    """Configured API key with the OpenAI client swapped for FakeOpenAI."""
    FakeOpenAI.instances = []
    monkeypatch.setattr(generators, "OpenAI", FakeOpenAI)
    monkeypatch.setenv("FITTRACK_INSIGHTS_API_KEY", "secret")
    return FakeOpenAI


class TestInsightGeneration:
    """Tests for the generator wiring of the report commands."""

    def test_daily_with_api_key(self, log_file, tmp_path, fake_openai):
        config = ["--config", str(tmp_path / "missing.yaml")]
        result = runner.invoke(app, [
            *config, "daily", str(log_file), "--date", "2026-10-18", "--format", "json",
        ])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["insights"][0]["message"] == "Protein on track"
        assert data["summary"]["net_calories"] == 50

        client = fake_openai.instances[0]
        assert client.api_key == "secret"
        assert client.requests[0]["model"] == "gpt-4o-mini"

    def test_model_from_config(self, log_file, tmp_path, fake_openai):
        config = tmp_path / "config.yaml"
        config.write_text("insights:\n  model: gpt-4o\n")

        result = runner.invoke(app, [
            "--config", str(config), "daily", str(log_file), "--date", "2026-10-18", "-f", "json",
        ])
        assert result.exit_code == 0
        assert fake_openai.instances[0].requests[0]["model"] == "gpt-4o"

    def test_monthly_with_api_key(self, log_file, tmp_path, fake_openai, monkeypatch):
        monkeypatch.setattr(
            generators, "OpenAI", lambda api_key=None: FakeOpenAI(api_key, MONTHLY_REPLY)
        )
        config = ["--config", str(tmp_path / "missing.yaml")]
        result = runner.invoke(app, [
            *config, "monthly", str(log_file), "--month", "2026-10", "--format", "json",
        ])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["trends"][0]["direction"] == "improving"
        assert data["summary"]["days_tracked"] == 2

    def test_no_insights_flag(self, log_file, tmp_path, fake_openai):
        config = ["--config", str(tmp_path / "missing.yaml")]
        result = runner.invoke(app, [
            *config, "daily", str(log_file), "--date", "2026-10-18", "-f", "json", "--no-insights",
        ])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["insights"] == []
        assert fake_openai.instances == []

    def test_disabled_in_config(self, log_file, tmp_path, fake_openai):
        config = tmp_path / "config.yaml"
        config.write_text("insights:\n  enabled: false\n")

        result = runner.invoke(app, [
            "--config", str(config), "daily", str(log_file), "--date", "2026-10-18", "-f", "json",
        ])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["insights"] == []
        assert fake_openai.instances == []

    def test_no_api_key(self, log_file, no_config, fake_openai, monkeypatch):
        monkeypatch.delenv("FITTRACK_INSIGHTS_API_KEY")
        result = runner.invoke(app, [
            *no_config, "daily", str(log_file), "--date", "2026-10-18", "-f", "json",
        ])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["insights"] == []
        assert fake_openai.instances == []
