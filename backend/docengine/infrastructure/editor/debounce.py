"""Per-key debounced writes on top of asyncio timers."""

import asyncio
from functools import partial
from typing import Awaitable, Callable, Dict, Generic, Hashable, Optional, Set, TypeVar

from ..logging import get_logger

logger = get_logger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

WriteFunction = Callable[[K, V], Awaitable[None]]
ErrorCallback = Callable[[K, Exception], None]


class DebouncedWriter(Generic[K, V]):
    """Coalesce rapid writes per key and send only the latest value.

    Each key keeps at most one pending value and one timer. When the timer
    fires the write runs as a tracked background task; ``flush`` sends the
    pending value right away and waits for it. Writes for the same key run
    one after another in the order they were started, so an older value
    never lands after a newer one. Write failures are passed to
    ``on_error`` and never retried.

    Args:
        write: Coroutine function receiving ``(key, value)``
        delay: Debounce window in seconds
        on_error: Called with ``(key, exception)`` when a write fails
    """

    def __init__(self, write: WriteFunction, delay: float, on_error: Optional[ErrorCallback] = None):
        self._write_fn = write
        self.delay = delay
        self._on_error = on_error
        self._pending: Dict[K, V] = {}
        self._timers: Dict[K, asyncio.TimerHandle] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._last_write: Dict[K, asyncio.Task] = {}

    def schedule(self, key: K, value: V) -> None:
        """Buffer ``value`` for ``key`` and restart its timer.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._pending[key] = value
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        self._timers[key] = loop.call_later(self.delay, self._fire, key)

    def has_pending(self, key: K) -> bool:
        return key in self._pending

    def pending(self, key: K) -> Optional[V]:
        return self._pending.get(key)

    @property
    def pending_keys(self) -> Set[K]:
        return set(self._pending)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def _fire(self, key: K) -> None:
        self._timers.pop(key, None)
        if key not in self._pending:
            return
        self._start(key, self._pending.pop(key))

    def _start(self, key: K, value: V) -> asyncio.Task:
        previous = self._last_write.get(key)
        task = asyncio.get_running_loop().create_task(self._write(key, value, previous))
        self._last_write[key] = task
        self._tasks.add(task)
        task.add_done_callback(partial(self._finished, key))
        return task

    def _finished(self, key: K, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if self._last_write.get(key) is task:
            del self._last_write[key]

    async def _write(self, key: K, value: V, previous: Optional[asyncio.Task] = None) -> bool:
        if previous is not None:
            await asyncio.wait({previous})
        try:
            await self._write_fn(key, value)
        except Exception as exc:
            if self._on_error is None:
                logger.warning("Debounced write failed", extra={"key": str(key), "error": str(exc)})
            else:
                self._on_error(key, exc)
            return False
        return True

    async def flush(self, key: K) -> bool:
        """Send the pending value for ``key`` now.

        A write for the same key that is still in flight finishes first.

        Returns:
            False if the write failed, True otherwise (including when nothing
            was pending)
        """
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        if key not in self._pending:
            return True
        return await self._start(key, self._pending.pop(key))

    async def flush_all(self) -> bool:
        results = [await self.flush(key) for key in list(self._pending)]
        return all(results)

    def cancel(self, key: K) -> Optional[V]:
        """Drop the pending value for ``key`` without writing it."""
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        return self._pending.pop(key, None)

    async def drain(self) -> None:
        """Wait for every write that is still in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
