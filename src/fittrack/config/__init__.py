"""Configuration loading."""

from fittrack.config.settings import (
    DefaultsConfig,
    InsightSettings,
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "DefaultsConfig",
    "InsightSettings",
    "Settings",
    "get_settings",
    "reload_settings",
]
