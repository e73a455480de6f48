"""Hello Countdown -- the simplest possible countdown timer program.

Demonstrates:
- Creating a timer with tick and elapsed callbacks
- Changing the tick granularity before starting
- Driving the timer in virtual time with ManualScheduler
- Running the same timer against the wall clock with ThreadScheduler

Run: python -m examples.basics
"""

import threading

from tick_countdown import CountdownTimer, ManualScheduler, ThreadScheduler


def virtual_time() -> None:
    print("=== Virtual time ===\n")

    sched = ManualScheduler()
    timer = CountdownTimer(
        2500,
        tick_callback=lambda: print(f"  t={sched.now:>5} ms  |  remaining={timer.current_time} ms"),
        elapsed_callback=lambda: print(f"  t={sched.now:>5} ms  |  elapsed!"),
        scheduler=sched,
    )
    timer.start()

    # Nothing happens until virtual time moves.
    sched.advance(10_000)
    print(f"\nDone. {timer!r}\n")


def wall_clock() -> None:
    print("=== Wall clock ===\n")

    done = threading.Event()
    with ThreadScheduler() as sched:
        timer = CountdownTimer(
            1000,
            tick_callback=lambda: print(f"  remaining={timer.current_time} ms"),
            elapsed_callback=done.set,
            scheduler=sched,
        )
        # Tick every 250 ms instead of the default 1000.
        timer.tick_duration = 250
        timer.start()
        done.wait(5.0)

    print(f"\nDone. {timer!r}")


def main() -> None:
    virtual_time()
    wall_clock()


if __name__ == "__main__":
    main()
