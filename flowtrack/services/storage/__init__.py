"""
Storage Services Package

Provides the abstract key-value interface, the storage exceptions, and
two backends: a JSON file for real use and a dict for tests.
"""

from flowtrack.services.storage.interface import (
    DuplicateError,
    KeyValueStoreInterface,
    MalformedDataError,
    NotFoundError,
    PersistenceError,
    StorageError,
)
from flowtrack.services.storage.json_file import JsonFileKeyValueStore
from flowtrack.services.storage.memory import InMemoryKeyValueStore

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "DuplicateError",
    "MalformedDataError",
    "NotFoundError",
    "PersistenceError",
    "StorageError",
    # Backends
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
