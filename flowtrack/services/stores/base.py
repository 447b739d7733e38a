"""
JSON Collection Store

Shared machinery for the transaction and category stores: a list of
pydantic records kept as one JSON array under one key.

DESIGN DECISION: Every operation is read-full / mutate / write-full.
There is no in-memory copy to go stale, and a failed write leaves the
stored collection untouched. The price is O(n) per mutation, which is
fine for one person's local data and is the known scaling limit.
"""

import random
import time
from typing import Generic, Optional, TypeVar
from uuid import uuid4

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from flowtrack.audit import AuditLogger
from flowtrack.models.audit import AuditEvent
from flowtrack.services.storage import (
    DuplicateError,
    KeyValueStoreInterface,
    MalformedDataError,
    NotFoundError,
    PersistenceError,
    StorageError,
)


logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    digits = []
    while True:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
        if number == 0:
            return "".join(reversed(digits))


def _fallback_id() -> str:
    """
    Timestamp plus a 40-bit random suffix.

    WEAKER than uuid4: about 40 bits of non-cryptographic randomness per
    millisecond. Only used when the OS has no entropy source.
    """
    return _base36(random.getrandbits(40)) + _base36(int(time.time() * 1000))


def generate_id() -> str:
    """New record id: a uuid4 string (122 random bits)."""
    try:
        return str(uuid4())
    except NotImplementedError as e:
        # os.urandom is unavailable on this platform
        logger.warning("weak_id_fallback", error=str(e))
        return _fallback_id()


class JsonCollectionStore(Generic[RecordT]):
    """
    CRUD over a JSON array of records stored under a single key.

    Subclasses set `record_type` and `entity_name` and build the audit
    events for their entity.
    """

    record_type: type[BaseModel]
    entity_name: str = "record"

    def __init__(
        self,
        kv: KeyValueStoreInterface,
        key: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._kv = kv
        self._key = key
        self._audit = audit_logger or AuditLogger()
        self._adapter = TypeAdapter(list[self.record_type])

    @property
    def key(self) -> str:
        return self._key

    # ------------------------------------------------------------------
    # Persistence boundary
    # ------------------------------------------------------------------

    async def _fail(self, operation: str, event: str, error: Exception) -> None:
        logger.error(event, key=self._key, operation=operation, error=str(error))
        await self._audit.log_storage_error(operation, self._key, str(error))

    async def _read_raw(self) -> Optional[str]:
        try:
            return await self._kv.get(self._key)
        except MalformedDataError as e:
            await self._fail("read", "store_data_malformed", e)
            raise
        except StorageError as e:
            await self._fail("read", "store_read_failed", e)
            raise
        except Exception as e:
            await self._fail("read", "store_read_failed", e)
            raise PersistenceError(f"Failed to read {self._key}: {e}") from e

    def _parse(self, raw: str) -> list:
        return self._adapter.validate_json(raw)

    async def _read(self) -> list:
        raw = await self._read_raw()
        if raw is None:
            return await self._on_missing()
        try:
            return self._parse(raw)
        except ValidationError as e:
            await self._fail("read", "store_data_malformed", e)
            raise MalformedDataError(
                f"Stored {self.entity_name} data under {self._key} is invalid: {e}"
            ) from e

    async def _write(self, records: list) -> None:
        payload = self._adapter.dump_json(records).decode("utf-8")
        try:
            await self._kv.set(self._key, payload)
        except StorageError as e:
            await self._fail("write", "store_write_failed", e)
            raise
        except Exception as e:
            await self._fail("write", "store_write_failed", e)
            raise PersistenceError(f"Failed to write {self._key}: {e}") from e

    async def _on_missing(self) -> list:
        """Value returned when the key has never been written."""
        return []

    # ------------------------------------------------------------------
    # Audit hooks
    # ------------------------------------------------------------------

    def _saved_event(self, record) -> Optional[AuditEvent]:
        return None

    def _updated_event(self, record) -> Optional[AuditEvent]:
        return None

    def _deleted_event(self, record_id: str, existed: bool) -> Optional[AuditEvent]:
        return None

    async def _emit(self, event: Optional[AuditEvent]) -> None:
        if event is not None:
            await self._audit.log(event)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def get(self, record_id: str) -> Optional[RecordT]:
        """Find a record by id. Returns None if absent."""
        for record in await self._read():
            if record.id == record_id:
                return record
        return None

    async def save(self, record: RecordT) -> RecordT:
        """
        Append a new record and persist the collection.

        Assigns a fresh id when the record has none; an id that is
        already set is kept.

        Returns:
            The stored record (with its id)

        Raises:
            DuplicateError: If a stored record already has this id
        """
        if not record.id:
            record = record.model_copy(update={"id": generate_id()})

        records = await self._read()
        if any(existing.id == record.id for existing in records):
            raise DuplicateError(f"{self.entity_name.capitalize()} already exists: {record.id}")
        records.append(record)
        await self._write(records)

        await self._emit(self._saved_event(record))
        return record

    async def update(self, record: RecordT) -> RecordT:
        """
        Replace the record with the same id, keeping its position.

        Raises:
            NotFoundError: If no stored record has this id
        """
        records = await self._read()
        for index, existing in enumerate(records):
            if record.id and existing.id == record.id:
                records[index] = record
                break
        else:
            raise NotFoundError(f"{self.entity_name.capitalize()} not found: {record.id}")

        await self._write(records)

        await self._emit(self._updated_event(record))
        return record

    async def delete(self, record_id: str) -> bool:
        """
        Remove the record with this id.

        Deleting an unknown id is a no-op, not an error.

        Returns:
            True once the collection has been written
        """
        records = await self._read()
        remaining = [r for r in records if r.id != record_id]
        await self._write(remaining)

        await self._emit(self._deleted_event(record_id, len(remaining) != len(records)))
        return True

    async def replace_all(self, records: list) -> None:
        """Overwrite the whole collection (used by import)."""
        await self._write(list(records))

    async def clear(self) -> None:
        """Remove the key entirely, as if it had never been written."""
        try:
            await self._kv.remove(self._key)
        except StorageError as e:
            await self._fail("remove", "store_write_failed", e)
            raise
        except Exception as e:
            await self._fail("remove", "store_write_failed", e)
            raise PersistenceError(f"Failed to remove {self._key}: {e}") from e

    async def list(self) -> list:
        """All records in insertion order. Empty if nothing stored yet."""
        return await self._read()
