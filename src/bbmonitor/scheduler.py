"""Minute-aligned cycle scheduler.

Polls the wall clock once per ``poll_interval`` and fires the cycle when the
current second is inside ``[second_offset, second_offset + trigger_window)``
and the current minute has not fired yet. The window lets a late poll tick
still fire; tracking the last fired minute keeps it to one attempt per
minute.

Each attempt runs as its own task, so a slow cycle never delays the next
minute's trigger. There is no overlap protection: a cycle that overruns a
full minute runs concurrently with the next one.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from bbmonitor.config import SchedulerSettings
from bbmonitor.logging import get_logger

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def minute_key(now: datetime) -> int:
    """Return the epoch minute containing ``now``."""
    return int(now.timestamp() // 60)


def should_trigger(
    now: datetime,
    last_run_minute: int | None,
    second_offset: int = 3,
    trigger_window: int = 5,
) -> bool:
    """Decide whether a cycle should fire at ``now``."""
    if last_run_minute is not None and minute_key(now) == last_run_minute:
        return False
    return second_offset <= now.second < second_offset + trigger_window


class MinuteScheduler:
    """Fires an async callable once per wall-clock minute.

    Exceptions escaping the callable are logged and swallowed so the next
    minute proceeds normally.

    Args:
        cycle: Async callable run once per minute.
        settings: Offset, poll interval and trigger window.
        clock: Returns the current time; defaults to UTC wall clock.
    """

    def __init__(
        self,
        cycle: Callable[[], Awaitable[object]],
        settings: SchedulerSettings,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._cycle = cycle
        self._settings = settings
        self._clock = clock
        self._running = False
        self._last_run_minute: int | None = None
        self._tasks: set[asyncio.Task] = set()  # type: ignore[type-arg]

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def start(self) -> None:
        """Run the poll loop until stop() is called."""
        if self._running:
            logger.warning("scheduler_already_running")
            return
        self._running = True
        logger.info(
            "scheduler_started",
            second_offset=self._settings.second_offset,
            poll_interval=self._settings.poll_interval,
        )
        while self._running:
            self.tick()
            await asyncio.sleep(self._settings.poll_interval)

    async def stop(self) -> None:
        """Stop polling and cancel any cycle still in flight."""
        self._running = False
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("scheduler_stopped", cancelled=len(tasks))

    def tick(self) -> asyncio.Task | None:  # type: ignore[type-arg]
        """Check the clock once and launch a cycle if it is due.

        Returns:
            The launched task, or None if nothing fired.
        """
        now = self._clock()
        if not should_trigger(
            now,
            self._last_run_minute,
            self._settings.second_offset,
            self._settings.trigger_window,
        ):
            return None

        self._last_run_minute = minute_key(now)
        logger.info("cycle_triggered", at=now.isoformat(timespec="seconds"))

        task = asyncio.create_task(self._run_safely())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_safely(self) -> None:
        try:
            await self._cycle()
        except Exception as e:
            logger.error("cycle_error", error=str(e), exc_info=True)
