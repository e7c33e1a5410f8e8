"""
Tests for the wall-clock periodic scheduler.
"""

from datetime import datetime

import pytest
from unittest.mock import AsyncMock

from post_classifier.scheduler.periodic import (
    PeriodicScheduler,
    SchedulerState,
    next_run_after,
)


class TestNextRunAfter:
    """Tests for next_run_after."""

    def test_six_hour_boundaries(self):
        assert next_run_after(datetime(2025, 9, 16, 7, 30)) == datetime(2025, 9, 16, 12, 0)

    def test_exact_boundary_moves_forward(self):
        assert next_run_after(datetime(2025, 9, 16, 12, 0)) == datetime(2025, 9, 16, 18, 0)

    def test_wraps_to_midnight(self):
        assert next_run_after(datetime(2025, 9, 16, 19, 5)) == datetime(2025, 9, 17, 0, 0)

    def test_uneven_period_restarts_at_midnight(self):
        """0 */5 fires at 0, 5, 10, 15, 20 and then midnight."""
        assert next_run_after(datetime(2025, 9, 16, 21, 0), hours=5) == datetime(2025, 9, 17, 0, 0)

    def test_hourly(self):
        assert next_run_after(datetime(2025, 9, 16, 3, 59, 59), hours=1) == datetime(2025, 9, 16, 4, 0)

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            next_run_after(datetime(2025, 9, 16), hours=0)
        with pytest.raises(ValueError):
            next_run_after(datetime(2025, 9, 16), hours=25)


class TestPeriodicScheduler:
    """Tests for PeriodicScheduler."""

    @pytest.mark.asyncio
    async def test_runs_at_boundaries(self):
        times = iter([
            datetime(2025, 9, 16, 11, 0),
            datetime(2025, 9, 16, 12, 0),
            datetime(2025, 9, 16, 12, 0, 5),
            datetime(2025, 9, 16, 18, 0),
        ])
        sleep = AsyncMock()
        job = AsyncMock()
        scheduler = PeriodicScheduler(job, hours=6, clock=lambda: next(times), sleep=sleep)

        await scheduler.run(max_runs=2)

        assert job.await_count == 2
        assert [c.args[0] for c in sleep.await_args_list] == [3600.0, 6 * 3600.0 - 5]
        assert scheduler.state is SchedulerState.STOPPED

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_loop(self):
        job = AsyncMock(side_effect=[RuntimeError("store down"), None])
        scheduler = PeriodicScheduler(
            job, hours=1, clock=lambda: datetime(2025, 9, 16, 9, 30), sleep=AsyncMock()
        )

        await scheduler.run(max_runs=2)

        assert scheduler.runs == 2
        assert scheduler.failures == 1

    @pytest.mark.asyncio
    async def test_run_once_state(self):
        seen = []
        scheduler = None

        async def job():
            seen.append(scheduler.state)

        scheduler = PeriodicScheduler(job)
        assert scheduler.state is SchedulerState.STOPPED

        assert await scheduler.run_once() is True
        assert seen == [SchedulerState.RUNNING_JOB]
        assert scheduler.state is SchedulerState.WAITING

    def test_invalid_hours(self):
        with pytest.raises(ValueError):
            PeriodicScheduler(AsyncMock(), hours=48)
