"""Services package."""

from flowtrack.services.storage import (
    DuplicateError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    MalformedDataError,
    NotFoundError,
    PersistenceError,
    StorageError,
)

__all__ = [
    "DuplicateError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "MalformedDataError",
    "NotFoundError",
    "PersistenceError",
    "StorageError",
]
