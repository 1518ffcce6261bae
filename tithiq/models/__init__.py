"""
Data Models Package

This package contains all Pydantic models used in Tithiq.
Everything persisted or derived must conform to these schemas.
"""

from tithiq.models.giving import (
    DEFAULT_CATEGORIES,
    LAST_GIVING_PRESET_NAME,
    ColorTag,
    Frequency,
    GivingCategory,
    GivingGoal,
    GivingPreset,
    MonthSummary,
    ProgressEntry,
    ReminderFrequency,
    ReminderPreferences,
    TitheRecord,
    YearlyBreakdown,
    default_categories,
    default_presets,
)
from tithiq.models.insights import (
    CategorySuggestion,
    GivingInsight,
    InsightReport,
    InsightType,
    YearEndProjection,
)
from tithiq.models.events import (
    EventSeverity,
    StoreEvent,
    StoreEventBuilder,
    StoreEventType,
)

__all__ = [
    # Giving models
    "DEFAULT_CATEGORIES",
    "LAST_GIVING_PRESET_NAME",
    "ColorTag",
    "Frequency",
    "GivingCategory",
    "GivingGoal",
    "GivingPreset",
    "MonthSummary",
    "ProgressEntry",
    "ReminderFrequency",
    "ReminderPreferences",
    "TitheRecord",
    "YearlyBreakdown",
    "default_categories",
    "default_presets",
    # Insight models
    "CategorySuggestion",
    "GivingInsight",
    "InsightReport",
    "InsightType",
    "YearEndProjection",
    # Event models
    "EventSeverity",
    "StoreEvent",
    "StoreEventBuilder",
    "StoreEventType",
]
