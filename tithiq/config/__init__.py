"""Configuration package."""

from tithiq.config.settings import (
    AppSettings,
    InsightSettings,
    Settings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "InsightSettings",
    "Settings",
    "get_settings",
]
