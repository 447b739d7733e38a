"""
Currency Preference Store

The selected currency code, kept as a plain string in the key-value store.

DESIGN DECISION: One explicit object holds the current currency instead of
an ambient global. Reads go through a small cache; call reload() when
another part of the app may have changed the stored value.
"""

from typing import Optional

import structlog

from flowtrack.audit import AuditLogger
from flowtrack.currency import DEFAULT_CURRENCY, get_currency
from flowtrack.models.audit import AuditEventBuilder
from flowtrack.services.storage import (
    KeyValueStoreInterface,
    PersistenceError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class CurrencyPreferenceStore:
    """Read-through cache over the persisted currency code."""

    def __init__(
        self,
        kv: KeyValueStoreInterface,
        key: str,
        default_currency: str = DEFAULT_CURRENCY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._kv = kv
        self._key = key
        self._default = default_currency
        self._audit = audit_logger or AuditLogger()
        self._cached: Optional[str] = None

    @property
    def default_currency(self) -> str:
        return self._default

    async def get(self) -> str:
        """The selected currency code, or the default if none was stored."""
        if self._cached is None:
            try:
                stored = await self._kv.get(self._key)
            except StorageError as e:
                logger.error("store_read_failed", key=self._key, error=str(e))
                await self._audit.log_storage_error("read", self._key, str(e))
                raise
            except Exception as e:
                logger.error("store_read_failed", key=self._key, error=str(e))
                await self._audit.log_storage_error("read", self._key, str(e))
                raise PersistenceError(f"Failed to read {self._key}: {e}") from e
            self._cached = stored.strip() if stored and stored.strip() else self._default
        return self._cached

    async def set(self, currency_code: str) -> str:
        """
        Persist a new currency selection.

        Raises:
            ValueError: If the code is not a supported currency
            PersistenceError: If the write fails (cache left unchanged)
        """
        code = currency_code.strip().upper()
        if get_currency(code) is None:
            raise ValueError(f"Unsupported currency: {currency_code}")

        previous = await self.get()
        try:
            await self._kv.set(self._key, code)
        except StorageError as e:
            logger.error("store_write_failed", key=self._key, error=str(e))
            await self._audit.log_storage_error("write", self._key, str(e))
            raise
        except Exception as e:
            logger.error("store_write_failed", key=self._key, error=str(e))
            await self._audit.log_storage_error("write", self._key, str(e))
            raise PersistenceError(f"Failed to write {self._key}: {e}") from e

        self._cached = code
        await self._audit.log(AuditEventBuilder.currency_changed(previous, code))
        return code

    async def reload(self) -> str:
        """Drop the cached value and read it again from storage."""
        self._cached = None
        return await self.get()
