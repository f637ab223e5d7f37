"""
In-memory TTL cache with a background sweep.
"""
import asyncio
import contextlib
import math
import time
from typing import Any, Callable, Hashable, NamedTuple, Optional

from cachetools import TLRUCache
from loguru import logger


class CacheEntry(NamedTuple):
    """A cached value and the timer reading after which it is stale."""
    value: Any
    expiry: float


def _entry_expiry(_key: Hashable, entry: CacheEntry, _now: float) -> float:
    return entry.expiry


class MemoryCache:
    """
    Process-wide key/value store with per-entry expiry.

    Expired entries are dropped lazily when read, and proactively by a sweep
    task started with :meth:`start`. The cache is unbounded by key count.

    Example:
        cache = MemoryCache(default_ttl=3600)
        cache.set("video:abc", details)
        cache.get("video:abc")
    """

    def __init__(
        self,
        default_ttl: float = 3600,
        sweep_interval: float = 300,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            default_ttl: Seconds an entry lives when ``set`` gets no ttl.
            sweep_interval: Seconds between background sweeps.
            timer: Clock used for expiry; injectable for tests.
        """
        self.default_ttl = default_ttl
        self.sweep_interval = sweep_interval
        self._timer = timer
        self._entries: TLRUCache = TLRUCache(
            maxsize=math.inf, ttu=_entry_expiry, timer=timer
        )
        self._sweep_task: Optional[asyncio.Task] = None

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expiry=self._timer() + ttl)

    def get(self, key: Hashable) -> Any:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            # Drops the key if it was only hidden by its expiry
            self._entries.expire()
            return None
        return entry.value

    def delete(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def sweep(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed.
        """
        expired = self._entries.expire()
        return len(expired) if expired else 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            removed = self.sweep()
            if removed:
                logger.debug(f"Memory cache sweep removed {removed} expired entries")

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._sweep_forever())

    async def stop(self) -> None:
        """Cancel the periodic sweep."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweep_task
            self._sweep_task = None
