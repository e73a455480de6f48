"""Host scheduling primitives: repeating registrations that can be cancelled.

A Scheduler turns ``register(action, interval_ms)`` into a repeating call of
``action`` every ``interval_ms`` milliseconds until ``cancel(handle)``.
Three hosts are provided:

- ManualScheduler: virtual time, advanced explicitly. Deterministic.
- ThreadScheduler: wall-clock time, one worker thread per registration.
- AsyncioScheduler: wall-clock time on an asyncio event loop.

Cancelling a handle that is unknown or already cancelled is always a no-op,
so a cancel racing an in-flight fire is harmless.

An action that raises ends its own registration on every host. The error
then goes wherever the host sends it: the caller of ManualScheduler.advance
or step, the ThreadScheduler log, or the asyncio loop exception handler.
"""
from __future__ import annotations

import abc
import asyncio
import itertools
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tick_countdown.clock import ManualClock, checked_ms
from tick_countdown.log import get_logger
from tick_countdown.types import Handle, SchedulerError

if TYPE_CHECKING:
    from tick_countdown.types import Callback

logger = get_logger(__name__)


class Scheduler(abc.ABC):
    """Interface a CountdownTimer uses to drive its ticks."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    def _new_handle(self, interval_ms: int) -> Handle:
        interval_ms = checked_ms(interval_ms, "interval_ms")
        if interval_ms == 0:
            raise SchedulerError("interval_ms must be > 0, got 0")
        return Handle(id=next(self._ids), interval_ms=interval_ms)

    @abc.abstractmethod
    def register(self, action: Callback, interval_ms: int) -> Handle:
        """Call action every interval_ms milliseconds until cancelled."""

    @abc.abstractmethod
    def cancel(self, handle: Handle) -> None:
        """Stop future calls for handle. No-op if it is not active."""

    @abc.abstractmethod
    def active(self, handle: Handle) -> bool:
        """True while handle is registered and not cancelled."""


# -- Manual (virtual time) --


@dataclass
class _Entry:
    handle: Handle
    action: Callback
    next_due: int


class ManualScheduler(Scheduler):
    """Fires registrations only when the caller advances virtual time."""

    def __init__(self, clock: ManualClock | None = None) -> None:
        super().__init__()
        self._clock = clock if clock is not None else ManualClock()
        self._entries: dict[int, _Entry] = {}

    @property
    def clock(self) -> ManualClock:
        return self._clock

    @property
    def now(self) -> int:
        return self._clock.now

    @property
    def pending(self) -> int:
        """Number of active registrations."""
        return len(self._entries)

    def register(self, action: Callback, interval_ms: int) -> Handle:
        handle = self._new_handle(interval_ms)
        self._entries[handle.id] = _Entry(
            handle=handle,
            action=action,
            next_due=self._clock.now + handle.interval_ms,
        )
        return handle

    def cancel(self, handle: Handle) -> None:
        self._entries.pop(handle.id, None)

    def active(self, handle: Handle) -> bool:
        return handle.id in self._entries

    def _next_entry(self) -> _Entry | None:
        if not self._entries:
            return None
        # Ties go to the earliest registration.
        return min(self._entries.values(), key=lambda e: (e.next_due, e.handle.id))

    def _fire(self, entry: _Entry) -> None:
        self._clock.advance_to(entry.next_due)
        entry.next_due += entry.handle.interval_ms
        try:
            entry.action()
        except BaseException:
            self.cancel(entry.handle)
            raise

    def step(self) -> bool:
        """Jump to the next due fire and run it. Returns False if nothing is registered."""
        entry = self._next_entry()
        if entry is None:
            return False
        self._fire(entry)
        return True

    def advance(self, ms: int) -> int:
        """Move virtual time forward by ms, firing everything that falls due.

        Returns the number of actions fired.
        """
        target = self._clock.now + checked_ms(ms, "ms")
        fired = 0
        while True:
            entry = self._next_entry()
            if entry is None or entry.next_due > target:
                break
            self._fire(entry)
            fired += 1
        self._clock.advance_to(target)
        return fired


# -- Threads --


class ThreadScheduler(Scheduler):
    """Runs each registration on its own worker thread.

    Actions run on the worker, not on the thread that registered them.
    An exception raised by an action is logged and ends that registration.
    """

    def __init__(self, daemon: bool = True) -> None:
        super().__init__()
        self._daemon = daemon
        self._lock = threading.Lock()
        self._workers: dict[int, tuple[threading.Event, threading.Thread]] = {}

    def register(self, action: Callback, interval_ms: int) -> Handle:
        handle = self._new_handle(interval_ms)
        stop = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(handle, action, stop),
            name=f"tick-countdown-{handle.id}",
            daemon=self._daemon,
        )
        with self._lock:
            self._workers[handle.id] = (stop, thread)
        thread.start()
        logger.debug("registered handle %d every %d ms", handle.id, handle.interval_ms)
        return handle

    def _run(self, handle: Handle, action: Callback, stop: threading.Event) -> None:
        interval = handle.interval_ms / 1000.0
        try:
            while not stop.wait(interval):
                action()
        except Exception:
            logger.exception("action for handle %d raised; registration ended", handle.id)
        finally:
            with self._lock:
                current = self._workers.get(handle.id)
                if current is not None and current[0] is stop:
                    del self._workers[handle.id]

    def cancel(self, handle: Handle) -> None:
        with self._lock:
            worker = self._workers.pop(handle.id, None)
        if worker is not None:
            # Never join here: an action may be cancelling its own registration.
            worker[0].set()
            logger.debug("cancelled handle %d", handle.id)

    def active(self, handle: Handle) -> bool:
        with self._lock:
            worker = self._workers.get(handle.id)
        return worker is not None and not worker[0].is_set()

    def shutdown(self, wait: bool = True, timeout: float | None = None) -> None:
        """Cancel every registration, optionally joining the worker threads."""
        with self._lock:
            workers = list(self._workers.values())
            self._workers.clear()
        for stop, _ in workers:
            stop.set()
        if wait:
            current = threading.current_thread()
            for _, thread in workers:
                if thread is not current:
                    thread.join(timeout)

    def __enter__(self) -> ThreadScheduler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


# -- asyncio --


class AsyncioScheduler(Scheduler):
    """Chains ``loop.call_later`` on an asyncio event loop.

    Without an explicit loop, register() must be called from inside a
    running loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        super().__init__()
        self._loop = loop
        self._timers: dict[int, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def register(self, action: Callback, interval_ms: int) -> Handle:
        handle = self._new_handle(interval_ms)
        self._arm(self._get_loop(), handle, action)
        return handle

    def _arm(
        self, loop: asyncio.AbstractEventLoop, handle: Handle, action: Callback
    ) -> None:
        self._timers[handle.id] = loop.call_later(
            handle.interval_ms / 1000.0, self._fire, loop, handle, action
        )

    def _fire(
        self, loop: asyncio.AbstractEventLoop, handle: Handle, action: Callback
    ) -> None:
        if handle.id not in self._timers:
            return
        # Re-arm first so the action can cancel its own registration.
        self._arm(loop, handle, action)
        try:
            action()
        except BaseException:
            self.cancel(handle)
            raise

    def cancel(self, handle: Handle) -> None:
        timer = self._timers.pop(handle.id, None)
        if timer is not None:
            timer.cancel()

    def active(self, handle: Handle) -> bool:
        return handle.id in self._timers
