"""Model — a key/value store whose writes notify listeners.

Two ways to react to changes:
- on(key, fn): fn() runs synchronously, in registration order, every time
  key is set. It receives no arguments; read current state with get().
- when(deps, fn): fn(*values) runs once per burst of changes to any of
  deps, on the scheduler's next turn, and only if every dependency holds
  a defined value (not UNDEFINED, not None).

Each Model owns its values and listeners; instances never share state.

Reentrancy: a listener may call set() again, which notifies recursively.
There is no cycle detection. Pass max_depth= to fail fast on runaway
chains instead of hitting the interpreter's recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Generic, TypeVar

from reactivemodel._undefined import UNDEFINED, all_defined
from reactivemodel.debounce import Debounced, debounce
from reactivemodel.errors import InvalidArgument, ReentrancyLimitExceeded
from reactivemodel.scheduler import Scheduler, get_scheduler

logger = logging.getLogger("reactivemodel.model")

V = TypeVar("V")


class Listener:
    """Handle for one raw listener registration. dispose() removes it."""

    __slots__ = ("_model", "_key", "_callback", "_disposed")

    def __init__(self, model: Model, key: str, callback: Callable[[], None]) -> None:
        self._model = model
        self._key = key
        self._callback = callback
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __call__(self) -> None:
        self._callback()

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._model._remove_listener(self._key, self)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"Listener({self._key!r}, {state})"


class Reaction:
    """A callback bound to an ordered list of dependency properties.

    Created by Model.when(). Holds one debounced resolver that is registered
    as a listener on every dependency.
    """

    __slots__ = ("_model", "_dependencies", "_callback", "_context", "_trigger", "_disposed")

    def __init__(
        self,
        model: Model,
        dependencies: tuple[str, ...],
        callback: Callable[..., Any],
        context: Any = None,
    ) -> None:
        self._model = model
        self._dependencies = dependencies
        self._callback = callback
        self._context = context
        self._disposed = False
        self._trigger: Debounced = debounce(self._resolve, model.scheduler)

    @property
    def dependencies(self) -> tuple[str, ...]:
        return self._dependencies

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def pending(self) -> bool:
        """True while a run is scheduled and has not happened yet."""
        return self._trigger.pending

    def _resolve(self) -> None:
        """Read every dependency; call back only if all are defined."""
        if self._disposed:
            return
        values = [self._model.get(name) for name in self._dependencies]
        if not all_defined(values):
            logger.debug("Skipped %r: undefined dependency", self)
            return
        if self._context is None:
            self._callback(*values)
        else:
            self._callback(self._context, *values)

    def dispose(self) -> None:
        """Stop this reaction. A run already scheduled becomes a no-op."""
        if self._disposed:
            return
        self._disposed = True
        for name in dict.fromkeys(self._dependencies):
            self._model._remove_listener(name, self._trigger)
        logger.debug("Disposed %r", self)

    def __repr__(self) -> str:
        name = getattr(self._callback, "__name__", repr(self._callback))
        state = "disposed" if self._disposed else "active"
        return f"Reaction({name}, {list(self._dependencies)!r}, {state})"


def _check_key(key: object) -> str:
    if not isinstance(key, str):
        raise InvalidArgument(f"property names must be str, got {type(key).__name__}")
    return key


def _normalize_dependencies(dependencies: object) -> tuple[str, ...]:
    """A single name or an ordered sequence of names -> tuple of names."""
    if isinstance(dependencies, str):
        return (dependencies,)
    if not isinstance(dependencies, Sequence):
        raise InvalidArgument(
            f"dependencies must be a str or a sequence of str, got {type(dependencies).__name__}"
        )
    return tuple(_check_key(name) for name in dependencies)


class Model(Generic[V]):
    """Reactive key/value store.

    Usage:
        model = Model(scheduler=ManualScheduler())
        model.when(["first", "last"], lambda f, l: print(f, l))

        model.set({"first": "Ada", "last": "Lovelace"})
        model.scheduler.flush()
        # prints "Ada Lovelace" once, not once per key
    """

    def __init__(
        self,
        initial: Mapping[str, V] | None = None,
        *,
        scheduler: Scheduler | None = None,
        max_depth: int | None = None,
    ) -> None:
        if max_depth is not None and max_depth < 1:
            raise InvalidArgument(f"max_depth must be >= 1, got {max_depth!r}")
        self._values: dict[str, V] = {}
        self._listeners: dict[str, list[Callable[[], None]]] = {}
        self._scheduler = scheduler
        self._max_depth = max_depth
        self._depth = 0
        if initial:
            for key, value in initial.items():
                self._values[_check_key(key)] = value

    @property
    def scheduler(self) -> Scheduler:
        """This model's scheduler, or the process default if none was given."""
        return self._scheduler if self._scheduler is not None else get_scheduler()

    # --- Values ---

    def get(self, key: str) -> V | Any:
        """Current value of key, or UNDEFINED if it was never set."""
        return self._values.get(_check_key(key), UNDEFINED)

    def set(self, key_or_values: str | Mapping[str, V], value: V | Any = UNDEFINED) -> None:
        """Set one property, or every property in a mapping.

        model.set("x", 1) stores 1 and notifies listeners on "x".
        model.set({"x": 1, "y": 2}) does the same for each key, in the
        mapping's order; each key is fully notified before the next is set.
        """
        if isinstance(key_or_values, str):
            self._set_key_value(key_or_values, value)
        elif isinstance(key_or_values, Mapping):
            if value is not UNDEFINED:
                raise InvalidArgument("set(mapping) takes no separate value")
            items = list(key_or_values.items())
            for key, _ in items:
                _check_key(key)
            for key, item in items:
                self._set_key_value(key, item)
        else:
            raise InvalidArgument(
                f"set() takes a str key or a mapping, got {type(key_or_values).__name__}"
            )

    def _set_key_value(self, key: str, value: V | Any) -> None:
        if self._max_depth is not None and self._depth >= self._max_depth:
            logger.error("Notification depth %d exceeded setting %r", self._max_depth, key)
            raise ReentrancyLimitExceeded(
                f"set({key!r}) nested deeper than max_depth={self._max_depth}"
            )
        self._values[key] = value
        listeners = self._listeners.get(key)
        if not listeners:
            return
        self._depth += 1
        try:
            # Snapshot: registrations made during this round apply to the next one.
            for callback in list(listeners):
                callback()
        finally:
            self._depth -= 1

    def __contains__(self, key: object) -> bool:
        return key in self._values

    # --- Listeners ---

    def on(self, key: str, callback: Callable[[], None]) -> Listener:
        """Call callback() synchronously every time key is set."""
        _check_key(key)
        if not callable(callback):
            raise InvalidArgument(f"callback must be callable, got {callback!r}")
        listener = Listener(self, key, callback)
        self._add_listener(key, listener)
        return listener

    def off(self, key: str, callback: Callable[[], None]) -> None:
        """Remove every registration of callback on key. Unknown pairs are ignored.

        Handles returned by on() for those registrations report disposed.
        """
        listeners = self._listeners.get(key)
        if listeners is None:
            return
        remaining = []
        for entry in listeners:
            if isinstance(entry, Listener) and entry._callback is callback:
                entry._disposed = True
            elif entry is not callback:
                remaining.append(entry)
        if remaining:
            self._listeners[key] = remaining
        else:
            del self._listeners[key]

    def when(
        self,
        dependencies: str | Sequence[str],
        callback: Callable[..., Any],
        context: Any = None,
    ) -> Reaction:
        """Call callback(*values) when dependencies change and are all defined.

        dependencies is one property name or an ordered sequence of names;
        values are passed in that order. With context, the call becomes
        callback(context, *values), binding context the way a method binds
        self.

        The callback is also scheduled once right away, so it sees the
        current state without waiting for another set().
        """
        deps = _normalize_dependencies(dependencies)
        if not callable(callback):
            raise InvalidArgument(f"callback must be callable, got {callback!r}")
        reaction = Reaction(self, deps, callback, context)
        reaction._trigger()
        for name in dict.fromkeys(deps):
            self._add_listener(name, reaction._trigger)
        logger.debug("Registered %r", reaction)
        return reaction

    def _add_listener(self, key: str, callback: Callable[[], None]) -> None:
        self._listeners.setdefault(key, []).append(callback)

    def _remove_listener(self, key: str, callback: Callable[[], None]) -> None:
        """Remove one registration of callback on key."""
        listeners = self._listeners.get(key)
        if listeners is None:
            return
        for i, cb in enumerate(listeners):
            if cb is callback:
                del listeners[i]
                break
        if not listeners:
            del self._listeners[key]

    def listener_count(self, key: str) -> int:
        """Number of active registrations on key, raw listeners and reactions alike."""
        return len(self._listeners.get(key, ()))

    def __repr__(self) -> str:
        return f"Model({self._values!r})"
