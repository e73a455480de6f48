"""CountdownTimer - ticks a callback while time remains, then fires once on elapse."""
from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

from tick_countdown.config import DEFAULT_CONFIG, TimerConfig
from tick_countdown.guards import non_negative_int, optional_callback, positive_int
from tick_countdown.log import get_logger
from tick_countdown.scheduler import ThreadScheduler
from tick_countdown.types import TimerState

if TYPE_CHECKING:
    from tick_countdown.scheduler import Scheduler
    from tick_countdown.types import Callback, Handle

_names = itertools.count(1)


class CountdownTimer:
    """Count ``duration`` milliseconds down to zero in fixed-size ticks.

    Every fire of the scheduled registration subtracts one tick (clamped at
    zero) and calls ``tick_callback``. The first fire that finds no time
    left cancels the registration and calls ``elapsed_callback``.

    The timer owns at most one registration. Call ``stop()`` or ``reset()``
    (or use the timer as a context manager) before discarding it.
    """

    def __init__(
        self,
        duration: int,
        tick_callback: Callback | None = None,
        elapsed_callback: Callback | None = None,
        *,
        scheduler: Scheduler | None = None,
        config: TimerConfig | None = None,
        name: str | None = None,
    ) -> None:
        duration = non_negative_int(duration, "duration")
        self._tick_callback = optional_callback(tick_callback, "tick_callback")
        self._elapsed_callback = optional_callback(elapsed_callback, "elapsed_callback")
        if config is None:
            config = DEFAULT_CONFIG

        self._initial = duration
        self._remaining = duration
        self._tick_ms = config.tick_ms
        self._scheduler = scheduler if scheduler is not None else ThreadScheduler()
        self._handle: Handle | None = None
        self._run: object | None = None
        self._state = TimerState.IDLE
        self._name = name if name is not None else f"countdown-{next(_names)}"
        self._log = get_logger(__name__, {"timer": self._name})

    # -- Lifecycle --

    def start(self) -> None:
        """Begin ticking. No-op while already running."""
        if self._state is TimerState.RUNNING and self._live():
            self._log.debug("start ignored, already running")
            return
        self._end_run()

        # The step is fixed for this run; tick_duration changes apply on the next start.
        step = self._tick_ms
        run = object()
        previous = self._state
        self._run = run
        self._state = TimerState.RUNNING

        def on_fire() -> None:
            self._on_fire(run, step)

        try:
            handle = self._scheduler.register(on_fire, step)
        except BaseException:
            self._run = None
            self._state = previous
            raise

        if self._run is run:
            self._handle = handle
            self._log.debug("started remaining=%d step=%d", self._remaining, step)
        else:
            # The run already ended inside register(); drop the registration.
            self._scheduler.cancel(handle)

    def stop(self) -> None:
        """Cancel ticking, keeping the remaining time. Safe to call repeatedly."""
        if self._run is not None:
            self._end_run()
            self._log.debug("stopped remaining=%d", self._remaining)
        if self._state is TimerState.RUNNING:
            self._state = TimerState.IDLE

    def reset(self) -> None:
        """Restore the initial duration and stop. Does not restart."""
        self._remaining = self._initial
        self.stop()
        self._state = TimerState.IDLE
        self._log.debug("reset remaining=%d", self._remaining)

    def _live(self) -> bool:
        # A registration that is still being set up counts as live.
        if self._run is None:
            return False
        return self._handle is None or self._scheduler.active(self._handle)

    def _end_run(self) -> None:
        self._run = None
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _on_fire(self, run: object, step: int) -> None:
        if run is not self._run:
            # Fire from a run stopped while it was in flight.
            return

        if self._remaining > 0:
            self._remaining = max(self._remaining - step, 0)
            if self._tick_callback is not None:
                try:
                    self._tick_callback()
                except BaseException:
                    # Schedulers end a registration whose action raises.
                    if self._run is run:
                        self._end_run()
                        self._state = TimerState.IDLE
                        self._log.debug("tick callback raised, stopped")
                    raise
            return

        self._end_run()
        self._state = TimerState.ELAPSED
        self._log.debug("elapsed")
        if self._elapsed_callback is not None:
            self._elapsed_callback()

    # -- Time fields --

    @property
    def initial_time(self) -> int:
        return self._initial

    @property
    def current_time(self) -> int:
        return self._remaining

    @current_time.setter
    def current_time(self, mills: int) -> None:
        self._remaining = non_negative_int(mills, "mills")

    @property
    def tick_duration(self) -> int:
        return self._tick_ms

    @tick_duration.setter
    def tick_duration(self, mills: int) -> None:
        self._tick_ms = positive_int(mills, "mills")

    @property
    def elapsed_time(self) -> int:
        """Milliseconds counted down so far; 0 if current_time was set above initial."""
        return max(self._initial - self._remaining, 0)

    # -- State --

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is TimerState.RUNNING

    @property
    def name(self) -> str:
        return self._name

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def tick_callback(self) -> Callback | None:
        return self._tick_callback

    @property
    def elapsed_callback(self) -> Callback | None:
        return self._elapsed_callback

    def __enter__(self) -> CountdownTimer:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    def __repr__(self) -> str:
        return (
            f"CountdownTimer(name={self._name!r}, state={self._state.value}, "
            f"remaining={self._remaining}/{self._initial}, tick={self._tick_ms})"
        )
