"""Clocks used to schedule timer callbacks.

The engine never sleeps or reads wall-clock time directly. Everything that
depends on time goes through a ``Clock`` so that the same session code runs on
an asyncio event loop in the bot and on a ``ManualClock`` in tests.
"""

import asyncio
import heapq
import itertools
import logging
import threading
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Clock:
    """Interface: a monotonic time source that can schedule callbacks."""

    def now(self) -> float:
        raise NotImplementedError

    def schedule_after(self, delay: float, callback: Callable[[], None]):
        """Run ``callback`` after ``delay`` seconds. Returns a handle with ``cancel()``."""
        raise NotImplementedError


class AsyncioClock(Clock):
    """Clock backed by an asyncio event loop.

    All callbacks run on the loop thread, which is the single place where
    session state is mutated.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def schedule_after(self, delay: float, callback: Callable[[], None]):
        loop = self.loop
        if _on_loop_thread(loop):
            return loop.call_later(max(0.0, delay), callback)

        # Called from another thread: hop onto the loop before scheduling
        handle = _DeferredHandle()
        loop.call_soon_threadsafe(handle.schedule, loop, max(0.0, delay), callback)
        return handle


def _on_loop_thread(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


class _DeferredHandle:
    """Handle for a callback scheduled from outside the loop thread."""

    def __init__(self):
        self.cancelled = False
        self.inner = None
        self._lock = threading.Lock()

    def schedule(self, loop: asyncio.AbstractEventLoop, delay: float, callback: Callable[[], None]) -> None:
        # Runs on the loop thread; a concurrent cancel() either wins or sees ``inner``
        with self._lock:
            if not self.cancelled:
                self.inner = loop.call_later(delay, callback)

    def cancel(self) -> None:
        with self._lock:
            self.cancelled = True
            if self.inner is not None:
                self.inner.cancel()


class ScheduledCall:
    """Handle returned by ``ManualClock.schedule_after``."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock(Clock):
    """Deterministic clock: time only moves when ``advance`` is called."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def schedule_after(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (call.due, next(self._counter), call))
        return call

    @property
    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward, running every callback that falls due on the way."""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._now = due
            call.callback()
        self._now = target
