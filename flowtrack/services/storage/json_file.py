"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on disk maps each key to its string
value, the same shape a mobile key-value store keeps:
1. One file to back up or inspect by hand
2. No database setup required
3. Every write replaces the file atomically (temp file + rename)

TRADEOFFS:
- The whole file is rewritten on every set/remove (fine for one user)
- No locking; a second process writing the same file loses updates
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog

from flowtrack.services.storage.interface import (
    KeyValueStoreInterface,
    MalformedDataError,
    PersistenceError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store backed by one JSON file.

    The file is created on the first write; reading before that
    behaves like an empty store.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """Read the whole file. A missing file is an empty store."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise PersistenceError(f"Failed to read {self._path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedDataError(f"Store file {self._path} is not valid JSON: {e}") from e

        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise MalformedDataError(
                f"Store file {self._path} must hold an object of string values"
            )
        return data

    def _dump(self, data: dict[str, str]) -> None:
        """Write the whole file atomically."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {self._path}: {e}") from e

        logger.debug("store_file_written", path=str(self._path), keys=len(data))

    async def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    async def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)
