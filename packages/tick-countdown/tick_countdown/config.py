"""Timer configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass

from tick_countdown.guards import positive_int

DEFAULT_TICK_MS = 1000


@dataclass(frozen=True)
class TimerConfig:
    """Immutable defaults applied when a CountdownTimer is constructed.

    Attributes:
        tick_ms: Initial tick granularity in milliseconds.
    """

    tick_ms: int = DEFAULT_TICK_MS

    def __post_init__(self) -> None:
        positive_int(self.tick_ms, "tick_ms")


DEFAULT_CONFIG = TimerConfig()
