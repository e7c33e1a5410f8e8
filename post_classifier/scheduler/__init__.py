"""
Scheduler module - periodic wall-clock jobs.
"""

from .periodic import DEFAULT_PERIOD_HOURS, PeriodicScheduler, SchedulerState, next_run_after

__all__ = [
    "DEFAULT_PERIOD_HOURS",
    "PeriodicScheduler",
    "SchedulerState",
    "next_run_after",
]
