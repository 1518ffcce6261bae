"""Services package."""

from tithiq.services.storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "KeyValueStorage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
