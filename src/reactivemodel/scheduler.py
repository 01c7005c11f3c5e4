"""Schedulers — where coalesced work goes to run "on the next turn".

A Scheduler only has to accept a zero-argument action and run it later,
never from inside schedule_once() itself. Two implementations ship here:

- ManualScheduler: queues actions until run_pending()/flush() is called.
  Deterministic; used by tests and by hosts that own their own loop.
- AsyncioScheduler: defers onto an asyncio event loop via call_soon.

The process-wide default is configured with set_scheduler(), the same way
thread marshaling is configured once at startup:

    reactivemodel.set_scheduler(ManualScheduler())
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Callable, Protocol, runtime_checkable

from reactivemodel.errors import InvalidArgument, SchedulerError

Action = Callable[[], None]


@runtime_checkable
class Scheduler(Protocol):
    def schedule_once(self, action: Action) -> None: ...


class ManualScheduler:
    """Queue actions until the owner decides a turn has passed."""

    def __init__(self) -> None:
        self._queue: deque[Action] = deque()

    @property
    def pending(self) -> int:
        """Number of actions waiting to run. Useful for testing."""
        return len(self._queue)

    def schedule_once(self, action: Action) -> None:
        self._queue.append(action)

    def run_pending(self) -> int:
        """Run one turn: the actions queued before this call.

        Actions scheduled while the turn runs wait for the next turn.
        If an action raises, the rest of the turn stays queued.
        """
        count = len(self._queue)
        ran = 0
        while ran < count:
            action = self._queue.popleft()
            ran += 1
            action()
        return ran

    def flush(self) -> int:
        """Run turns until nothing is queued. Returns total actions run."""
        total = 0
        while self._queue:
            total += self.run_pending()
        return total

    def __repr__(self) -> str:
        return f"ManualScheduler(pending={len(self._queue)})"


class AsyncioScheduler:
    """Defer actions onto an asyncio event loop.

    With no explicit loop, the loop running at schedule time is used.
    Exceptions raised by actions go to the loop's exception handler.
    """

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule_once(self, action: Action) -> None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                raise SchedulerError(
                    "AsyncioScheduler needs a running event loop; "
                    "pass loop= or use ManualScheduler outside asyncio"
                ) from None
        loop.call_soon(action)

    def __repr__(self) -> str:
        return f"AsyncioScheduler(loop={self._loop!r})"


# ─── Process default ─────────────────────────────────────────────────────────
_scheduler: Scheduler = AsyncioScheduler()


def set_scheduler(scheduler: Scheduler) -> None:
    """Set the default scheduler for Models created without scheduler=."""
    global _scheduler
    if not isinstance(scheduler, Scheduler):
        raise InvalidArgument(f"not a scheduler: {scheduler!r}")
    _scheduler = scheduler


def get_scheduler() -> Scheduler:
    return _scheduler
