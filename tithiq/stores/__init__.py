"""
Stores Package

One store per persistence key. Each loads at construction and saves
after every mutation.
"""

from tithiq.stores.base import PersistentStore
from tithiq.stores.categories import CategoryRegistry
from tithiq.stores.goals import GoalStore
from tithiq.stores.keys import (
    ALL_KEYS,
    CATEGORIES_KEY,
    GOALS_KEY,
    LAST_GIVING_KEY,
    PRESETS_KEY,
    PROGRESS_KEY,
    RECORDS_KEY,
    REMINDERS_KEY,
)
from tithiq.stores.presets import PresetStore
from tithiq.stores.progress import ProgressTracker
from tithiq.stores.records import RecordStore
from tithiq.stores.reminders import ReminderStore

__all__ = [
    "PersistentStore",
    "CategoryRegistry",
    "GoalStore",
    "PresetStore",
    "ProgressTracker",
    "RecordStore",
    "ReminderStore",
    # Keys
    "ALL_KEYS",
    "CATEGORIES_KEY",
    "GOALS_KEY",
    "LAST_GIVING_KEY",
    "PRESETS_KEY",
    "PROGRESS_KEY",
    "RECORDS_KEY",
    "REMINDERS_KEY",
]
