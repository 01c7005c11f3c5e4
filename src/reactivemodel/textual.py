"""Textual integration for reactivemodel. Opt-in — requires textual.

TextualScheduler defers coalesced reactions onto the app's message loop, so
a burst of set() calls inside one handler produces a single widget update.
when() adds the widget-safety guard: skipped while the app is paused or not
running, and NoMatches from widget queries is swallowed.

    model = Model(scheduler=TextualScheduler(app))
    stx.when(app, model, ["user", "status"], update_footer)
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


class TextualScheduler:
    """Run actions after the app has processed its pending messages."""

    __slots__ = ("_app", "_main")

    def __init__(self, app) -> None:
        self._app = app
        self._main = threading.get_ident()

    def schedule_once(self, action) -> None:
        if threading.get_ident() != self._main:
            self._app.call_from_thread(self._app.call_later, action)
        else:
            self._app.call_later(action)


@contextmanager
def pause(app):
    """Suspend guarded reactions during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def when(app, model, dependencies, callback, context=None):
    """model.when() that safely bridges to Textual widgets.

    A run that lands while the app is paused or stopped is dropped, not
    retried; the next change to a dependency schedules a fresh one.
    """

    def _guarded(*args):
        if not is_safe(app):
            return
        try:
            callback(*args)
        except NoMatches:
            pass

    _guarded.__name__ = getattr(callback, "__name__", "_guarded")
    return model.when(dependencies, _guarded, context)
