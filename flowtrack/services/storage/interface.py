"""
Abstract Storage Interface

DESIGN DECISION: Persistence is a plain string-keyed key-value store.
This allows us to:
1. Keep a JSON file on disk for the real app
2. Use in-memory storage for testing
3. Swap in any other backend that can get/set/remove strings

The interface is intentionally tiny. Records are serialized to JSON by
the stores above it; the backend only ever sees strings.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the key-value backend.

    Every call is a single all-or-nothing operation. There is no locking:
    exactly one session writes to a store at a time.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored string, or None if the key was never written

        Raises:
            PersistenceError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is not an error.

        Raises:
            PersistenceError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a record whose id is already stored."""
    pass


class PersistenceError(StorageError):
    """The backend failed to read or write (I/O, quota, permissions)."""
    pass


class MalformedDataError(StorageError):
    """Stored or imported data could not be parsed or validated."""
    pass
