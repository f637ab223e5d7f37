"""
Outbound request limiter for quota-constrained providers.

Jobs handed to :meth:`RequestLimiter.schedule` are queued and started in
arrival order, subject to three independent constraints:

* ``max_concurrent`` jobs may run at the same time;
* consecutive job starts are at least ``min_time`` seconds apart;
* an optional reservoir holds the number of starts left in the current
  window and is reset to ``reservoir_refresh_amount`` every
  ``reservoir_refresh_interval`` seconds.

Requests over quota wait for capacity instead of being rejected.
"""
import asyncio
import contextlib
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger

T = TypeVar("T")


class RequestLimiter:
    """Token-bucket style limiter shared by every caller of one provider."""

    def __init__(
        self,
        name: str,
        min_time: float = 0.0,
        max_concurrent: Optional[int] = None,
        reservoir: Optional[int] = None,
        reservoir_refresh_amount: Optional[int] = None,
        reservoir_refresh_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the limiter.

        Args:
            name: Label used in log messages.
            min_time: Minimum seconds between two job starts.
            max_concurrent: Maximum jobs running at once (None for unlimited).
            reservoir: Starts allowed before the first refresh (None disables the reservoir).
            reservoir_refresh_amount: Value the reservoir is reset to on refresh.
            reservoir_refresh_interval: Seconds between reservoir refreshes.
            clock: Monotonic clock; injectable for tests.
            sleep: Coroutine used to wait; injectable for tests.
        """
        if reservoir is not None and not reservoir_refresh_interval:
            raise ValueError("A reservoir needs a refresh interval")

        self.name = name
        self.min_time = min_time
        self.max_concurrent = max_concurrent
        self.reservoir_refresh_amount = (
            reservoir if reservoir_refresh_amount is None else reservoir_refresh_amount
        )
        self.reservoir_refresh_interval = reservoir_refresh_interval
        self._clock = clock
        self._sleep = sleep

        self._reservoir = reservoir
        self._last_refresh = clock()
        self._next_start = 0.0
        self._queued = 0
        self._running = 0

        self._start_lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(max_concurrent) if max_concurrent else None

    @property
    def queued(self) -> int:
        """Jobs waiting for a start slot."""
        return self._queued

    @property
    def running(self) -> int:
        return self._running

    @property
    def reservoir(self) -> Optional[int]:
        """Starts left in the current window, refreshed lazily."""
        self._refill(self._clock())
        return self._reservoir

    def _refill(self, now: float) -> None:
        if self._reservoir is None or not self.reservoir_refresh_interval:
            return
        elapsed = now - self._last_refresh
        if elapsed >= self.reservoir_refresh_interval:
            periods = int(elapsed // self.reservoir_refresh_interval)
            self._last_refresh += periods * self.reservoir_refresh_interval
            self._reservoir = self.reservoir_refresh_amount

    async def _wait_for_start(self) -> None:
        async with self._start_lock:
            while True:
                now = self._clock()
                self._refill(now)

                if self._reservoir is not None and self._reservoir <= 0:
                    wait = self._last_refresh + self.reservoir_refresh_interval - now
                    logger.debug(f"{self.name}: reservoir empty, waiting {wait:.2f}s")
                    await self._sleep(max(wait, 0.0))
                    continue

                wait = self._next_start - now
                if wait > 0:
                    await self._sleep(wait)
                    continue
                break

            if self._reservoir is not None:
                self._reservoir -= 1
            self._next_start = self._clock() + self.min_time

    async def schedule(
        self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """
        Run ``func(*args, **kwargs)`` once the limiter allows it.

        Args:
            func: Coroutine function performing the outbound call.

        Returns:
            Whatever ``func`` returns. Exceptions propagate unchanged.
        """
        slot = self._slots if self._slots is not None else contextlib.nullcontext()
        self._queued += 1
        started = False
        try:
            async with slot:
                await self._wait_for_start()
                self._queued -= 1
                started = True
                self._running += 1
                try:
                    return await func(*args, **kwargs)
                finally:
                    self._running -= 1
        finally:
            if not started:
                self._queued -= 1
