"""tick-countdown - A countdown timer driven by a pluggable repeating scheduler."""
from __future__ import annotations

from tick_countdown.clock import ManualClock
from tick_countdown.config import TimerConfig
from tick_countdown.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    ThreadScheduler,
)
from tick_countdown.timer import CountdownTimer
from tick_countdown.types import Handle, InvalidArgument, SchedulerError, TimerState

__all__ = [
    "CountdownTimer",
    "TimerConfig",
    "TimerState",
    "Scheduler",
    "ManualScheduler",
    "ThreadScheduler",
    "AsyncioScheduler",
    "ManualClock",
    "Handle",
    "InvalidArgument",
    "SchedulerError",
]
