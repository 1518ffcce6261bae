"""In-memory key-value storage, used by tests and ephemeral sessions."""

from typing import Optional

from tithiq.services.storage.interface import KeyValueStorage


class InMemoryKeyValueStorage(KeyValueStorage):
    """Dictionary-backed storage. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
