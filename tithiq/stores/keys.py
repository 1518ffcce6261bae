"""Fixed persistence keys, one per store value."""

CATEGORIES_KEY = "givingCategories"
RECORDS_KEY = "titheRecords"
GOALS_KEY = "givingGoals"
PRESETS_KEY = "givingPresets"
LAST_GIVING_KEY = "lastGivingPreset"
REMINDERS_KEY = "reminderPreferences"
PROGRESS_KEY = "yearlyProgressData"

ALL_KEYS = (
    CATEGORIES_KEY,
    RECORDS_KEY,
    GOALS_KEY,
    PRESETS_KEY,
    LAST_GIVING_KEY,
    REMINDERS_KEY,
    PROGRESS_KEY,
)
