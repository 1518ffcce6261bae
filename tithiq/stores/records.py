"""
Record Store

Bounded history of giving records, most recent first. New records go
to the head; once the cap is exceeded the oldest (tail) records are
evicted.
"""

from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from pydantic import TypeAdapter

from tithiq.config import get_settings
from tithiq.models.events import StoreEventBuilder
from tithiq.models.giving import Frequency, TitheRecord
from tithiq.stores.base import PersistentStore
from tithiq.stores.keys import RECORDS_KEY


_ADAPTER = TypeAdapter(list[TitheRecord])


class RecordStore(PersistentStore):
    """
    Append-at-head, capped list of TitheRecord.

    Records are frozen models, so snapshots can share instances.
    """

    key = RECORDS_KEY

    def __init__(
        self,
        storage,
        events=None,
        clock=None,
        max_records: Optional[int] = None,
    ):
        super().__init__(storage, events, clock)
        if max_records is None:
            max_records = get_settings().app.max_records
        if max_records < 0:
            raise ValueError(f"max_records must be >= 0, got {max_records}")
        self._max_records = max_records
        with self._lock:
            loaded = self._load(self.key, _ADAPTER, list)
            self._records: list[TitheRecord] = loaded[: self._max_records]

    @property
    def max_records(self) -> int:
        return self._max_records

    @property
    def records(self) -> tuple[TitheRecord, ...]:
        """Immutable snapshot, most recent first."""
        with self._lock:
            return tuple(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def add(self, record: TitheRecord) -> TitheRecord:
        """Insert a record at the head, evicting past the cap."""
        with self._lock:
            self._records.insert(0, record)
            evicted = len(self._records) - self._max_records
            if evicted > 0:
                self._records = self._records[: self._max_records]
            self._save(self.key, _ADAPTER, self._records)

        self._emit(StoreEventBuilder.record_added(
            self.key, record.id, record.giving_amount
        ))
        if evicted > 0:
            self._emit(StoreEventBuilder.records_evicted(
                self.key, evicted, self._max_records
            ))
        return record

    def add_record(
        self,
        income: float,
        frequency: Frequency,
        category_name: str,
        category_percentage: float,
        giving_amount: float,
        date: Optional[datetime] = None,
    ) -> TitheRecord:
        """Create a record stamped with the store's clock and insert it."""
        record = TitheRecord(
            date=date or self._clock(),
            income=income,
            frequency=frequency,
            category_name=category_name,
            category_percentage=category_percentage,
            giving_amount=giving_amount,
        )
        return self.add(record)

    def delete_records(self, indices: Iterable[int]) -> int:
        """
        Delete records at the given positions of the current snapshot.

        Out-of-range positions are ignored.

        Returns:
            Number of records deleted
        """
        with self._lock:
            positions = {i for i in indices if 0 <= i < len(self._records)}
            if not positions:
                return 0
            removed = [r.id for i, r in enumerate(self._records) if i in positions]
            self._records = [
                r for i, r in enumerate(self._records) if i not in positions
            ]
            self._save(self.key, _ADAPTER, self._records)
        self._emit(StoreEventBuilder.records_deleted(self.key, removed))
        return len(removed)

    def delete_record(self, record_id: UUID) -> bool:
        """Delete one record by ID. Returns False if it was not found."""
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    return self.delete_records([index]) == 1
        return False

    def clear_all(self) -> None:
        with self._lock:
            count = len(self._records)
            self._records = []
            self._save(self.key, _ADAPTER, self._records)
        self._emit(StoreEventBuilder.records_cleared(self.key, count))
