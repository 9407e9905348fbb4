import asyncio

import pytest

from game.clock import AsyncioClock, ManualClock, _DeferredHandle
from game.timer import TimerService


class LaggyClock(ManualClock):
    """Delivers every callback late, like a busy event loop."""

    def __init__(self, lag):
        super().__init__()
        self.lag = lag

    def schedule_after(self, delay, callback):
        return super().schedule_after(delay + self.lag, callback)


def test_expires_within_one_tick_of_duration():
    clock = ManualClock()
    timer = TimerService(clock, tick_interval=0.1)
    expired_at = []
    timer.start(60.0, on_expired=lambda: expired_at.append(clock.now()))

    clock.advance(59.9)
    assert expired_at == []
    assert timer.is_running

    clock.advance(0.2)
    assert len(expired_at) == 1
    assert 60.0 - 1e-6 <= expired_at[0] <= 60.0 + 0.1
    assert not timer.is_running
    assert timer.remaining == 0.0


def test_ticks_report_decreasing_remaining_time():
    clock = ManualClock()
    timer = TimerService(clock, tick_interval=0.5)
    ticks = []
    timer.start(2.0, on_tick=ticks.append)
    clock.advance(3.0)

    assert ticks == sorted(ticks, reverse=True)
    assert all(0 < remaining < 2.0 for remaining in ticks)
    assert len(ticks) == 3


def test_expiry_fires_once():
    clock = ManualClock()
    timer = TimerService(clock)
    calls = []
    timer.start(1.0, on_expired=lambda: calls.append(1))
    clock.advance(5.0)
    clock.advance(5.0)
    assert calls == [1]


def test_stop_cancels_pending_ticks_and_is_idempotent():
    clock = ManualClock()
    timer = TimerService(clock)
    calls = []
    timer.start(1.0, on_tick=calls.append, on_expired=lambda: calls.append('expired'))
    clock.advance(0.25)
    timer.stop()
    timer.stop()
    seen = list(calls)

    clock.advance(5.0)
    assert calls == seen
    assert 'expired' not in calls
    assert clock.pending == 0
    assert timer.remaining == pytest.approx(0.75)


def test_start_while_running_is_refused():
    clock = ManualClock()
    timer = TimerService(clock)
    assert timer.start(10.0)
    assert not timer.start(1.0)
    assert timer.total == 10.0


def test_restart_after_stop_ignores_stale_run():
    clock = ManualClock()
    timer = TimerService(clock)
    first, second = [], []
    timer.start(1.0, on_expired=lambda: first.append(1))
    clock.advance(0.5)
    timer.stop()
    timer.start(2.0, on_expired=lambda: second.append(1))

    clock.advance(1.0)
    assert first == [] and second == []
    clock.advance(1.1)
    assert first == [] and second == [1]


def test_late_ticks_still_expire_within_one_interval():
    clock = LaggyClock(lag=0.03)
    timer = TimerService(clock, tick_interval=0.1)
    expired_at = []
    timer.start(1.0, on_expired=lambda: expired_at.append(clock.now()))
    clock.advance(2.0)
    assert len(expired_at) == 1
    assert 1.0 <= expired_at[0] <= 1.1


def test_invalid_tick_interval():
    with pytest.raises(ValueError):
        TimerService(ManualClock(), tick_interval=0)


def test_asyncio_clock_drives_timer():
    async def run():
        clock = AsyncioClock()
        timer = TimerService(clock, tick_interval=0.01)
        done = asyncio.Event()
        started = clock.now()
        timer.start(0.05, on_expired=done.set)
        await asyncio.wait_for(done.wait(), timeout=2.0)
        return clock.now() - started

    elapsed = asyncio.run(run())
    assert elapsed >= 0.05 - 1e-3


def test_asyncio_clock_schedules_from_another_thread():
    async def run():
        clock = AsyncioClock()
        loop = clock.loop
        fired = asyncio.Event()
        cancelled_fired = []

        def from_worker():
            clock.schedule_after(0.01, lambda: fired.set())
            handle = clock.schedule_after(0.0, lambda: cancelled_fired.append(True))
            handle.cancel()

        await loop.run_in_executor(None, from_worker)
        await asyncio.wait_for(fired.wait(), timeout=2.0)
        await asyncio.sleep(0.02)
        return cancelled_fired

    assert asyncio.run(run()) == []


def test_deferred_handle_cancelled_before_scheduling_never_runs():
    async def run():
        clock = AsyncioClock()
        loop = clock.loop
        calls = []
        handle = _DeferredHandle()
        handle.cancel()
        handle.schedule(loop, 0.0, lambda: calls.append(True))
        await asyncio.sleep(0.02)
        return handle.inner, calls

    inner, calls = asyncio.run(run())
    assert inner is None
    assert calls == []
