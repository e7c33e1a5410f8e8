"""
Wall-clock periodic job runner.

Runs a coroutine at every N-hour boundary of the local clock, the same
instants as the cron expression `0 */N * * *` (minute 0 of hours 0, N, 2N, ...
restarting at midnight). A failing run is logged and the loop continues.

Usage:
    scheduler = PeriodicScheduler(refresh, hours=6, name="post-groups")
    await scheduler.run()
"""

import asyncio
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_PERIOD_HOURS = 6


class SchedulerState(str, Enum):
    """Scheduler lifecycle states."""

    STOPPED = "STOPPED"
    WAITING = "WAITING"
    RUNNING_JOB = "RUNNING_JOB"


def next_run_after(now: datetime, hours: int = DEFAULT_PERIOD_HOURS) -> datetime:
    """
    First `0 */hours * * *` instant strictly after now.

    Args:
        now: Reference time (naive local or aware)
        hours: Period in hours, 1..24

    Returns:
        datetime at minute 0 of the next matching hour
    """
    if not 1 <= hours <= 24:
        raise ValueError(f"hours must be between 1 and 24, got {hours}")

    candidate = now.replace(minute=0, second=0, microsecond=0)
    while True:
        candidate += timedelta(hours=1)
        if candidate.hour % hours == 0:
            return candidate


class PeriodicScheduler:
    """Runs an async job on every N-hour wall-clock boundary."""

    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        hours: int = DEFAULT_PERIOD_HOURS,
        name: str = "job",
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            job: Coroutine function to run
            hours: Period in hours
            name: Label for log lines
            clock: Current-time source
            sleep: Awaitable sleep
        """
        if not 1 <= hours <= 24:
            raise ValueError(f"hours must be between 1 and 24, got {hours}")
        self.job = job
        self.hours = hours
        self.name = name
        self._clock = clock
        self._sleep = sleep
        self._state = SchedulerState.STOPPED
        self.runs = 0
        self.failures = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    async def run_once(self) -> bool:
        """Run the job now. Returns False if it raised."""
        self._state = SchedulerState.RUNNING_JOB
        started = self._clock()
        try:
            await self.job()
            logger.info(f"[Scheduler] {self.name} completed (started {started.isoformat()})")
            return True
        except Exception as e:
            self.failures += 1
            logger.error(f"[Scheduler] {self.name} failed: {e}", exc_info=True)
            return False
        finally:
            self.runs += 1
            self._state = SchedulerState.WAITING

    async def run(self, max_runs: Optional[int] = None) -> None:
        """
        Loop forever (or for max_runs runs), sleeping until each boundary.
        """
        logger.info(f"[Scheduler] {self.name} scheduled: 0 */{self.hours} * * *")
        self._state = SchedulerState.WAITING
        try:
            while max_runs is None or self.runs < max_runs:
                now = self._clock()
                due = next_run_after(now, self.hours)
                delay = max(0.0, (due - now).total_seconds())
                logger.info(f"[Scheduler] Next {self.name} run at {due.isoformat()} (in {delay:.0f}s)")
                await self._sleep(delay)
                await self.run_once()
        finally:
            self._state = SchedulerState.STOPPED
