"""
Reminder Store

Persists reminder preferences and works out when the next reminder is
due. Delivering the notification is the host platform's job.
"""

import calendar
from datetime import datetime, timedelta
from typing import Any, Optional

from pydantic import TypeAdapter

from tithiq.models.events import StoreEventBuilder
from tithiq.models.giving import ReminderFrequency, ReminderPreferences
from tithiq.stores.base import PersistentStore
from tithiq.stores.keys import REMINDERS_KEY


_ADAPTER = TypeAdapter(ReminderPreferences)

# A bi-weekly reminder skips a week when the last one was this recent.
BI_WEEKLY_SKIP_DAYS = 10


def next_weekday_at(now: datetime, day_of_week: int, hour: int, minute: int) -> datetime:
    """
    First time strictly after `now` on `day_of_week` (0 = Sunday) at hour:minute.
    """
    target = (day_of_week - 1) % 7  # datetime.weekday() has Monday = 0
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    candidate += timedelta(days=(target - now.weekday()) % 7)
    if candidate <= now:
        candidate += timedelta(days=7)
    return candidate


def next_day_of_month_at(now: datetime, day_of_month: int, hour: int, minute: int) -> datetime:
    """
    First time strictly after `now` on `day_of_month` at hour:minute.

    Short months use their last day.
    """
    year, month = now.year, now.month
    day = min(day_of_month, calendar.monthrange(year, month)[1])
    candidate = now.replace(day=day, hour=hour, minute=minute, second=0, microsecond=0)
    if candidate > now:
        return candidate
    year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    day = min(day_of_month, calendar.monthrange(year, month)[1])
    return candidate.replace(year=year, month=month, day=day)


class ReminderStore(PersistentStore):

    key = REMINDERS_KEY

    def __init__(self, storage, events=None, clock=None):
        super().__init__(storage, events, clock)
        with self._lock:
            self._preferences = self._load(self.key, _ADAPTER, ReminderPreferences)

    @property
    def preferences(self) -> ReminderPreferences:
        with self._lock:
            return self._preferences.model_copy()

    def set_preferences(self, preferences: ReminderPreferences) -> ReminderPreferences:
        preferences = ReminderPreferences.model_validate(preferences).model_copy()
        with self._lock:
            self._preferences = preferences
            self._save(self.key, _ADAPTER, self._preferences)
        self._emit(StoreEventBuilder.reminders_updated(
            self.key, preferences.is_enabled, preferences.frequency.value
        ))
        return preferences.model_copy()

    def update(self, **changes: Any) -> ReminderPreferences:
        """Change individual preference fields, validated."""
        with self._lock:
            data = self._preferences.model_dump()
            data.update(changes)
            return self.set_preferences(ReminderPreferences.model_validate(data))

    def mark_notified(self, when: Optional[datetime] = None) -> ReminderPreferences:
        """Record that a reminder was just delivered."""
        return self.update(last_notification_date=when or self._clock())

    def next_reminder_date(self, now: Optional[datetime] = None) -> datetime:
        prefs = self.preferences
        now = now or self._clock()

        if prefs.frequency == ReminderFrequency.MONTHLY:
            return next_day_of_month_at(now, prefs.day_of_month, prefs.hour, prefs.minute)

        # Weekly, bi-weekly and custom all anchor on the weekday.
        next_date = next_weekday_at(now, prefs.day_of_week, prefs.hour, prefs.minute)
        if (
            prefs.frequency == ReminderFrequency.BI_WEEKLY
            and prefs.last_notification_date is not None
            and (now - prefs.last_notification_date).days < BI_WEEKLY_SKIP_DAYS
        ):
            next_date += timedelta(days=7)
        return next_date

    def formatted_next_reminder(self, now: Optional[datetime] = None) -> str:
        if not self.preferences.is_enabled:
            return "No reminders scheduled"
        next_date = self.next_reminder_date(now)
        return f"Next reminder: {next_date.strftime('%b %d, %Y at %I:%M %p')}"
