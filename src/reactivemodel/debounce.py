"""Coalescing triggers.

debounce(action, scheduler) returns a trigger. Calling the trigger any
number of times before the scheduler's next turn runs action exactly once
on that turn. Unlike a time-based debounce there is no quiet period: a
burst ends when the scheduler gets control back.

Usage:
    scheduler = ManualScheduler()
    log = []
    trigger = debounce(lambda: log.append("ran"), scheduler)

    trigger(); trigger(); trigger()
    # log == [] — nothing runs synchronously

    scheduler.flush()
    # log == ["ran"] — one run for the whole burst
"""

from __future__ import annotations

from typing import Callable

from reactivemodel.scheduler import Scheduler


class Debounced:
    """A trigger that schedules at most one pending run of its action."""

    __slots__ = ("_action", "_scheduler", "_queued")

    def __init__(self, action: Callable[[], None], scheduler: Scheduler) -> None:
        self._action = action
        self._scheduler = scheduler
        self._queued = False

    @property
    def pending(self) -> bool:
        return self._queued

    def __call__(self) -> None:
        if not self._queued:
            self._queued = True
            try:
                self._scheduler.schedule_once(self._run)
            except BaseException:
                # Nothing was scheduled; the next trigger must try again.
                self._queued = False
                raise

    def _run(self) -> None:
        # Cleared first so a trigger from inside the action starts a new burst.
        self._queued = False
        self._action()

    def __repr__(self) -> str:
        name = getattr(self._action, "__name__", repr(self._action))
        state = "pending" if self._queued else "idle"
        return f"Debounced({name}, {state})"


def debounce(action: Callable[[], None], scheduler: Scheduler) -> Debounced:
    return Debounced(action, scheduler)
