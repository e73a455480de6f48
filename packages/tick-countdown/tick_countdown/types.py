"""Shared types, errors, and aliases for tick-countdown."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable

# Zero-argument callable fired by a timer or a scheduler.
Callback = Callable[[], Any]


class InvalidArgument(ValueError):
    """Raised when a duration, granularity, or callback argument is rejected."""

    def __init__(self, name: str, value: Any, message: str) -> None:
        self.name = name
        self.value = value
        super().__init__(message)


class SchedulerError(ValueError):
    """Raised on invalid scheduler input (bad interval, clock moved backwards)."""


class TimerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    ELAPSED = "elapsed"


@dataclass(frozen=True, slots=True)
class Handle:
    """Opaque token for one repeating registration. Issued by a Scheduler."""

    id: int
    interval_ms: int
