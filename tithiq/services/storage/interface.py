"""
Abstract Storage Interface

DESIGN DECISION: Stores persist through a tiny key-value interface.
This allows us to:
1. Use a JSON file on disk in the app
2. Use in-memory storage for testing
3. Swap in another backend without touching store logic

Each store owns exactly one fixed key and writes its whole value on
every mutation. There is no partial update, migration or versioning.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """
    Abstract interface for byte storage keyed by fixed strings.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Read the value stored under a key.

        Args:
            key: The store key

        Returns:
            The stored bytes, or None if nothing was ever stored

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: The store key
            value: Encoded value

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backend could not be read."""
    pass


class StorageWriteError(StorageError):
    """The backend could not be written."""
    pass
