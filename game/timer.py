"""Countdown timer for Time mode."""

import logging
from typing import Callable, Optional

import config
from game.clock import Clock
from game.models import TimeState

logger = logging.getLogger(__name__)

# Float slack when comparing the clock against the deadline
_EPSILON = 1e-9


class TimerService:
    """Cooperative countdown driven by a ``Clock``.

    Ticks every ``tick_interval`` seconds and fires ``on_expired`` once when
    the remaining time reaches zero. Each tick recomputes the remaining time
    from the deadline, so late or coalesced ticks never delay expiry by more
    than one interval.
    """

    def __init__(self, clock: Clock, tick_interval: float = config.TIMER_TICK_INTERVAL):
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        self.clock = clock
        self.tick_interval = tick_interval

        self._deadline: Optional[float] = None
        self._total = 0.0
        self._remaining = 0.0
        self._handle = None
        self._run = 0  # bumped on every start/stop so stale callbacks are ignored
        self._on_tick: Optional[Callable[[float], None]] = None
        self._on_expired: Optional[Callable[[], None]] = None

    @property
    def is_running(self) -> bool:
        return self._deadline is not None

    @property
    def remaining(self) -> float:
        if self._deadline is None:
            return self._remaining
        return max(0.0, self._deadline - self.clock.now())

    @property
    def total(self) -> float:
        return self._total

    @property
    def state(self) -> TimeState:
        return TimeState(remaining=self.remaining, total=self._total)

    def start(
        self,
        duration: float,
        on_tick: Optional[Callable[[float], None]] = None,
        on_expired: Optional[Callable[[], None]] = None
    ) -> bool:
        """Start counting down ``duration`` seconds. Returns False if already running."""
        if self.is_running:
            logger.warning("Timer already running; stop() it before starting again")
            return False

        self._run += 1
        self._total = float(duration)
        self._remaining = float(duration)
        self._deadline = self.clock.now() + duration
        self._on_tick = on_tick
        self._on_expired = on_expired

        logger.debug("Timer started: duration=%.1fs interval=%.2fs", duration, self.tick_interval)
        self._schedule_next(self._run)
        return True

    def stop(self) -> None:
        """Cancel the countdown. Safe to call any number of times."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._deadline is not None:
            self._remaining = self.remaining
            logger.debug("Timer stopped with %.2fs remaining", self._remaining)
        self._deadline = None
        self._run += 1

    def _schedule_next(self, run: int) -> None:
        delay = min(self.tick_interval, self.remaining)
        self._handle = self.clock.schedule_after(delay, lambda: self._tick(run))

    def _tick(self, run: int) -> None:
        if run != self._run or self._deadline is None:
            return

        remaining = self._deadline - self.clock.now()
        if remaining <= _EPSILON:
            on_expired = self._on_expired
            self._remaining = 0.0
            self._deadline = None
            self._handle = None
            self._run += 1
            logger.debug("Timer expired after %.1fs", self._total)
            if on_expired:
                on_expired()
            return

        self._remaining = remaining
        if self._on_tick:
            self._on_tick(remaining)
        # on_tick may have stopped the timer
        if run == self._run:
            self._schedule_next(run)
