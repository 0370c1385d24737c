"""Application settings and configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".fittrack"


@dataclass
class InsightSettings:
    """Settings for the optional external insight generator.

    A missing API key is a normal state: reports are then returned without
    insights.
    """

    enabled: bool = True
    api_key_env: str = "FITTRACK_INSIGHTS_API_KEY"
    model: str = "gpt-4o-mini"

    @property
    def api_key(self) -> Optional[str]:
        """Read the API key from the configured environment variable."""
        return os.environ.get(self.api_key_env) or None

    @property
    def is_configured(self) -> bool:
        return self.enabled and self.api_key is not None


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table", "json", "markdown"
    timezone: Optional[str] = None  # IANA name, e.g. "Europe/Berlin"

    def get_tzinfo(self) -> Optional[tzinfo]:
        """Resolve the configured timezone, or None for local time."""
        if not self.timezone:
            return None
        return ZoneInfo(self.timezone)


@dataclass
class Settings:
    """Main application settings."""

    insights: InsightSettings = field(default_factory=InsightSettings)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.fittrack/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse insights config
        if "insights" in data:
            ins_data = data["insights"] or {}
            if "enabled" in ins_data:
                settings.insights.enabled = bool(ins_data["enabled"])
            if "api_key_env" in ins_data:
                settings.insights.api_key_env = str(ins_data["api_key_env"])
            if "model" in ins_data:
                settings.insights.model = str(ins_data["model"])

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]
            if "timezone" in def_data:
                settings.defaults.timezone = def_data["timezone"]

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.fittrack/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "insights": {
                "enabled": self.insights.enabled,
                "api_key_env": self.insights.api_key_env,
                "model": self.insights.model,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
                "timezone": self.defaults.timezone,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
