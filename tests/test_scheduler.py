"""Tests for the minute-aligned cycle scheduler.

A fake clock drives tick() directly so no test waits for wall-clock minutes.
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from bbmonitor.config import SchedulerSettings
from bbmonitor.scheduler import MinuteScheduler, minute_key, should_trigger


def _at(minute: int, second: int) -> datetime:
    return datetime(2024, 5, 1, 12, minute, second, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class TestShouldTrigger:
    def test_fires_at_offset(self) -> None:
        assert should_trigger(_at(0, 3), None, second_offset=3) is True

    def test_not_before_offset(self) -> None:
        assert should_trigger(_at(0, 2), None, second_offset=3) is False

    def test_late_tick_inside_window(self) -> None:
        assert should_trigger(_at(0, 7), None, second_offset=3, trigger_window=5) is True

    def test_late_tick_outside_window(self) -> None:
        assert should_trigger(_at(0, 8), None, second_offset=3, trigger_window=5) is False

    def test_same_minute_suppressed(self) -> None:
        last = minute_key(_at(0, 3))
        assert should_trigger(_at(0, 4), last, second_offset=3) is False

    def test_next_minute_fires(self) -> None:
        last = minute_key(_at(0, 3))
        assert should_trigger(_at(1, 3), last, second_offset=3) is True

    def test_same_minute_of_different_hour_fires(self) -> None:
        last = minute_key(datetime(2024, 5, 1, 11, 0, 3, tzinfo=timezone.utc))
        assert should_trigger(_at(0, 3), last, second_offset=3) is True


class TestMinuteScheduler:
    @pytest.mark.asyncio
    async def test_one_cycle_per_minute(self) -> None:
        cycle = AsyncMock()
        clock = FakeClock(_at(0, 3))
        scheduler = MinuteScheduler(cycle, SchedulerSettings(), clock=clock)

        first = scheduler.tick()
        assert first is not None
        await first

        for second in (4, 5, 6):
            clock.now = _at(0, second)
            assert scheduler.tick() is None

        clock.now = _at(1, 3)
        second_task = scheduler.tick()
        assert second_task is not None
        await second_task

        assert cycle.await_count == 2

    @pytest.mark.asyncio
    async def test_nothing_outside_window(self) -> None:
        cycle = AsyncMock()
        clock = FakeClock(_at(0, 30))
        scheduler = MinuteScheduler(cycle, SchedulerSettings(), clock=clock)

        assert scheduler.tick() is None
        cycle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cycle_error_is_contained(self) -> None:
        cycle = AsyncMock(side_effect=RuntimeError("tickers unavailable"))
        clock = FakeClock(_at(0, 3))
        scheduler = MinuteScheduler(cycle, SchedulerSettings(), clock=clock)

        task = scheduler.tick()
        assert task is not None
        await task  # does not raise

        clock.now = _at(1, 3)
        task = scheduler.tick()
        assert task is not None
        await task
        assert cycle.await_count == 2

    @pytest.mark.asyncio
    async def test_slow_cycle_does_not_block_next_minute(self) -> None:
        release = asyncio.Event()
        calls = 0

        async def slow_cycle() -> None:
            nonlocal calls
            calls += 1
            await release.wait()

        clock = FakeClock(_at(0, 3))
        scheduler = MinuteScheduler(slow_cycle, SchedulerSettings(), clock=clock)

        first = scheduler.tick()
        await asyncio.sleep(0)
        clock.now = _at(1, 3)
        second = scheduler.tick()
        await asyncio.sleep(0)

        assert first is not None and second is not None
        assert calls == 2
        assert scheduler.in_flight == 2

        release.set()
        await asyncio.gather(first, second)

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight(self) -> None:
        async def never_finishes() -> None:
            await asyncio.Event().wait()

        scheduler = MinuteScheduler(
            never_finishes, SchedulerSettings(), clock=FakeClock(_at(0, 3))
        )
        task = scheduler.tick()
        await asyncio.sleep(0)

        await scheduler.stop()

        assert task is not None
        assert task.cancelled()
        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_start_loop_polls_until_stopped(self) -> None:
        cycle = AsyncMock()
        scheduler = MinuteScheduler(
            cycle,
            SchedulerSettings(poll_interval=0.01),
            clock=FakeClock(_at(0, 3)),
        )

        loop_task = asyncio.create_task(scheduler.start())
        await asyncio.sleep(0.05)
        assert scheduler.is_running is True

        await scheduler.stop()
        await asyncio.wait_for(loop_task, timeout=1.0)

        # Many polls inside the same minute, exactly one cycle
        assert cycle.await_count == 1
