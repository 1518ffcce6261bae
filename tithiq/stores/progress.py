"""Progress Tracker: every contribution counted toward the yearly total."""

from datetime import datetime
from typing import Optional

from pydantic import TypeAdapter

from tithiq.models.events import StoreEventBuilder
from tithiq.models.giving import ProgressEntry
from tithiq.stores.base import PersistentStore
from tithiq.stores.keys import PROGRESS_KEY


_ADAPTER = TypeAdapter(list[ProgressEntry])


class ProgressTracker(PersistentStore):
    """
    Unbounded list of contributions, oldest first.

    Unlike the record store this list is never capped, so yearly totals
    survive record eviction until `clear_yearly_data` is called.
    """

    key = PROGRESS_KEY

    def __init__(self, storage, events=None, clock=None):
        super().__init__(storage, events, clock)
        with self._lock:
            self._entries: list[ProgressEntry] = self._load(self.key, _ADAPTER, list)

    @property
    def entries(self) -> tuple[ProgressEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def add_contribution(self, amount: float, date: Optional[datetime] = None) -> ProgressEntry:
        entry = ProgressEntry(date=date or self._clock(), amount=amount)
        with self._lock:
            self._entries.append(entry)
            self._save(self.key, _ADAPTER, self._entries)
        self._emit(StoreEventBuilder.contribution_added(self.key, entry.id, amount))
        return entry

    def clear_yearly_data(self) -> None:
        with self._lock:
            self._entries = []
            self._save(self.key, _ADAPTER, self._entries)
        self._emit(StoreEventBuilder.progress_cleared(self.key))

    def total_contributions(self) -> float:
        with self._lock:
            return sum(entry.amount for entry in self._entries)

    def monthly_totals(self) -> dict[int, float]:
        """Month (1-12) -> amount, only months with contributions."""
        totals: dict[int, float] = {}
        for entry in self.entries:
            totals[entry.month] = totals.get(entry.month, 0.0) + entry.amount
        return totals
