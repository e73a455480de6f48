"""ManualClock - virtual millisecond clock for deterministic scheduling."""
from __future__ import annotations

import numbers

from tick_countdown.types import SchedulerError


class ManualClock:
    def __init__(self, start_ms: int = 0) -> None:
        self._now = checked_ms(start_ms, "start_ms")

    @property
    def now(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        self._now += checked_ms(ms, "ms")
        return self._now

    def advance_to(self, when_ms: int) -> int:
        when_ms = checked_ms(when_ms, "when_ms")
        if when_ms < self._now:
            raise SchedulerError(
                f"Clock cannot move backwards: now={self._now}, requested={when_ms}"
            )
        self._now = when_ms
        return self._now

    def reset(self, ms: int = 0) -> None:
        self._now = checked_ms(ms, "ms")


def checked_ms(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise SchedulerError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise SchedulerError(f"{name} must be >= 0, got {value}")
    return int(value)
