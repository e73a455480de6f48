"""Tests for ManualScheduler (virtual time)."""
import pytest

from tick_countdown import Handle, ManualClock, ManualScheduler, SchedulerError


class TestRegistration:

    def test_register_returns_handle(self):
        sched = ManualScheduler()
        handle = sched.register(lambda: None, 100)
        assert isinstance(handle, Handle)
        assert handle.interval_ms == 100
        assert sched.active(handle)
        assert sched.pending == 1

    def test_handles_are_unique(self):
        sched = ManualScheduler()
        a = sched.register(lambda: None, 100)
        b = sched.register(lambda: None, 100)
        assert a.id != b.id

    @pytest.mark.parametrize("interval", [0, -5, 1.5, "100"])
    def test_invalid_interval_rejected(self, interval):
        sched = ManualScheduler()
        with pytest.raises(SchedulerError):
            sched.register(lambda: None, interval)
        assert sched.pending == 0

    def test_shared_clock(self):
        clock = ManualClock(start_ms=1000)
        sched = ManualScheduler(clock)
        assert sched.clock is clock
        assert sched.now == 1000


class TestAdvance:

    def test_fires_every_interval(self):
        sched = ManualScheduler()
        fired = []
        sched.register(lambda: fired.append(sched.now), 100)

        assert sched.advance(350) == 3
        assert fired == [100, 200, 300]
        assert sched.now == 350

    def test_nothing_before_first_interval(self):
        sched = ManualScheduler()
        fired = []
        sched.register(lambda: fired.append(1), 100)
        sched.advance(99)
        assert fired == []
        sched.advance(1)
        assert fired == [1]

    def test_interleaved_in_time_order(self):
        sched = ManualScheduler()
        order = []
        sched.register(lambda: order.append(("a", sched.now)), 300)
        sched.register(lambda: order.append(("b", sched.now)), 200)
        sched.advance(600)
        assert order == [
            ("b", 200), ("a", 300), ("b", 400), ("a", 600), ("b", 600),
        ]

    def test_ties_follow_registration_order(self):
        sched = ManualScheduler()
        order = []
        sched.register(lambda: order.append("first"), 100)
        sched.register(lambda: order.append("second"), 100)
        sched.advance(100)
        assert order == ["first", "second"]

    def test_advance_zero_is_noop(self):
        sched = ManualScheduler()
        sched.register(lambda: None, 100)
        assert sched.advance(0) == 0
        assert sched.now == 0

    def test_advance_rejects_negative(self):
        sched = ManualScheduler()
        with pytest.raises(SchedulerError):
            sched.advance(-1)


class TestCancel:

    def test_cancel_stops_fires(self):
        sched = ManualScheduler()
        fired = []
        handle = sched.register(lambda: fired.append(1), 100)
        sched.advance(100)
        sched.cancel(handle)
        sched.advance(1000)
        assert fired == [1]
        assert not sched.active(handle)
        assert sched.pending == 0

    def test_cancel_twice_is_noop(self):
        sched = ManualScheduler()
        handle = sched.register(lambda: None, 100)
        sched.cancel(handle)
        sched.cancel(handle)
        assert sched.pending == 0

    def test_cancel_foreign_handle_is_noop(self):
        sched = ManualScheduler()
        sched.register(lambda: None, 100)
        sched.cancel(Handle(id=999, interval_ms=100))
        assert sched.pending == 1

    def test_action_can_cancel_itself(self):
        sched = ManualScheduler()
        fired = []
        handle = None

        def action():
            fired.append(sched.now)
            if len(fired) == 2:
                sched.cancel(handle)

        handle = sched.register(action, 100)
        sched.advance(1000)
        assert fired == [100, 200]

    def test_action_can_cancel_other_registration_due_same_time(self):
        sched = ManualScheduler()
        fired = []
        other = None

        def first():
            fired.append("first")
            sched.cancel(other)

        sched.register(first, 100)
        other = sched.register(lambda: fired.append("other"), 100)
        sched.advance(100)
        assert fired == ["first"]

    def test_action_registered_during_advance_fires_in_same_advance(self):
        sched = ManualScheduler()
        fired = []

        def spawn():
            if not fired:
                sched.register(lambda: fired.append(("child", sched.now)), 50)
            fired.append(("parent", sched.now))

        sched.register(spawn, 100)
        sched.advance(200)
        assert fired == [("parent", 100), ("child", 150), ("parent", 200), ("child", 200)]


class TestStep:

    def test_step_empty(self):
        sched = ManualScheduler()
        assert sched.step() is False
        assert sched.now == 0

    def test_step_jumps_to_next_due(self):
        sched = ManualScheduler()
        fired = []
        sched.register(lambda: fired.append(sched.now), 250)
        assert sched.step() is True
        assert sched.now == 250
        assert sched.step() is True
        assert fired == [250, 500]


def test_action_exception_propagates_to_caller():
    sched = ManualScheduler()

    def boom():
        raise RuntimeError("boom")

    sched.register(boom, 100)
    with pytest.raises(RuntimeError, match="boom"):
        sched.advance(100)
    assert sched.pending == 0
    assert sched.advance(1000) == 0


def test_raising_action_does_not_stop_other_registrations():
    sched = ManualScheduler()
    fired = []

    def boom():
        raise RuntimeError("boom")

    sched.register(boom, 100)
    sched.register(lambda: fired.append(sched.now), 100)
    with pytest.raises(RuntimeError):
        sched.advance(100)
    sched.advance(200)
    assert fired == [100, 200, 300]
