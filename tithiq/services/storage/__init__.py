"""
Storage Services Package

Provides the key-value interface the stores persist through, plus an
in-memory and a JSON-file implementation.
"""

from tithiq.services.storage.interface import (
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from tithiq.services.storage.json_file import JsonFileKeyValueStorage
from tithiq.services.storage.memory import InMemoryKeyValueStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
]
