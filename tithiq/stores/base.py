"""
Persistent Store Base

DESIGN DECISION: Every store follows the same lifecycle:
1. Load once, synchronously, at construction
2. Save the full value after every mutation
3. Emit a StoreEvent for every mutation

LOAD POLICY: missing or undecodable data never reaches the caller as an
error. The store substitutes its default value and, for corrupt data,
logs a LOAD_FAILED warning event.

SAVE POLICY: best effort. A storage failure is logged as a SAVE_FAILED
error event; the in-memory value keeps the mutation.
"""

import threading
from datetime import datetime
from typing import Callable, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from tithiq.audit import EventLogger
from tithiq.models.events import StoreEvent, StoreEventBuilder
from tithiq.services.storage import KeyValueStorage, StorageError


T = TypeVar("T")


class PersistentStore:
    """
    Shared plumbing for stores backed by a KeyValueStorage.

    Subclasses hold their value in memory and call `_load` / `_save`
    under `self._lock`.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        events: Optional[EventLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage
        self._events = events or EventLogger()
        self._clock = clock or datetime.now
        self._lock = threading.RLock()

    @property
    def events(self) -> EventLogger:
        return self._events

    def _emit(self, event: StoreEvent) -> None:
        self._events.log(event)

    def _load(
        self,
        key: str,
        adapter: TypeAdapter[T],
        default_factory: Callable[[], T],
        seed_missing: bool = False,
        seed_corrupt: bool = False,
    ) -> T:
        """
        Decode the value under `key`, or fall back to a default.

        Args:
            key: Persistence key
            adapter: Decoder for the stored JSON
            default_factory: Produces the substitute value
            seed_missing: Persist the default when the key is absent
            seed_corrupt: Persist the default when the value is undecodable

        Returns:
            The decoded value or the default. Never raises.
        """
        try:
            raw = self._storage.get(key)
        except StorageError as e:
            self._emit(StoreEventBuilder.load_failed(key, str(e)))
            return default_factory()

        if raw is None:
            value = default_factory()
            if seed_missing:
                self._emit(StoreEventBuilder.defaults_seeded(key))
                self._save(key, adapter, value)
            return value

        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            self._emit(StoreEventBuilder.load_failed(key, str(e)))
            value = default_factory()
            if seed_corrupt:
                self._save(key, adapter, value)
            return value

    def _save(self, key: str, adapter: TypeAdapter[T], value: T) -> bool:
        """
        Encode and persist a full value.

        Returns:
            True if the write succeeded
        """
        try:
            self._storage.set(key, adapter.dump_json(value))
        except StorageError as e:
            self._emit(StoreEventBuilder.save_failed(key, str(e)))
            return False
        return True
