"""
JSON-file backed key/value store with an in-memory mirror.

The whole file is loaded once at startup. Reads are served from the mirror;
every mutation re-reads the file, applies the change, writes the full object
back through a temp file + rename, and replaces the mirror with the result.

Read failures degrade to an empty map and write failures are logged and
swallowed, so a broken cache never fails the request that uses it. Writes are
serialised per store inside one process; nothing guards against a second
process writing the same file.
"""
import asyncio
import contextlib
import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from tubeblog.core.constants import CacheFiles


class JsonFileStore:
    """Generic persisted map of string keys to JSON values."""

    def __init__(self, path: str | Path, name: Optional[str] = None):
        """
        Initialize the store. Nothing is read until :meth:`load`.

        Args:
            path: Location of the backing JSON file.
            name: Label used in log messages (defaults to the file stem).
        """
        self.path = Path(path)
        self.name = name or self.path.stem
        self._data: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    # --- file access (runs in worker threads) ---

    def _read_file(self) -> dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {self.name} cache {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {self.name} cache {self.path}: top level is not an object")
            return {}
        return data

    def _write_file(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=CacheFiles.JSON_INDENT, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise

    async def _read(self) -> dict[str, Any]:
        data = await asyncio.to_thread(self._read_file)
        return self._normalize(data)

    async def _write(self, data: dict[str, Any]) -> bool:
        try:
            await asyncio.to_thread(self._write_file, data)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error writing {self.name} cache {self.path}: {e}")
            return False
        return True

    async def _mutate(self, change: Callable[[dict[str, Any]], None]) -> bool:
        async with self._lock:
            data = await self._read()
            change(data)
            self._data = data
            return await self._write(data)

    def _normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        """Hook for subclasses to upgrade or drop entries read from disk."""
        return data

    # --- public API ---

    async def load(self) -> None:
        """Create the cache directory if needed and fill the mirror from disk."""
        try:
            await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating cache directory {self.path.parent}: {e}")
        self._data = await self._read()
        logger.info(f"Loaded {len(self._data)} entries from {self.name} cache")

    async def get(self, key: str) -> Any:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> bool:
        """
        Store ``value`` under ``key`` and flush the file.

        Returns:
            True when the file was written, False when the write failed
            (the mirror still holds the new value).
        """
        return await self._mutate(lambda data: data.__setitem__(key, value))

    async def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True when the file was written."""
        return await self._mutate(lambda data: data.pop(key, None))

    async def clear_all(self) -> bool:
        async with self._lock:
            self._data = {}
            return await self._write({})

    def keys(self) -> list[str]:
        return list(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class ExpiringJsonStore(JsonFileStore):
    """
    JSON store whose entries carry a ``timestamp`` (ms since epoch).

    Entries older than ``ttl`` seconds are dropped when read; there is no
    background sweep.
    """

    def __init__(
        self,
        path: str | Path,
        ttl: float,
        name: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(path, name=name)
        self.ttl = ttl
        self._clock = clock

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def is_expired(self, entry: dict[str, Any]) -> bool:
        timestamp = entry.get("timestamp")
        if not isinstance(timestamp, (int, float)):
            return True
        return self.now_ms() - timestamp > self.ttl * 1000

    async def get_fresh(self, key: str) -> Optional[dict[str, Any]]:
        """Return the raw entry for ``key``, deleting it first if it expired."""
        entry = self._data.get(key)
        if entry is None:
            return None
        if self.is_expired(entry):
            logger.info(f"{self.name} cache entry {key} expired")
            await self.delete(key)
            return None
        return entry
