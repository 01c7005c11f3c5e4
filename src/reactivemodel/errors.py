"""Error hierarchy.

Everything raised by reactivemodel itself inherits from ReactiveModelError.
Listener and callback exceptions are never wrapped.
"""


class ReactiveModelError(Exception):
    """Base error for all reactivemodel operations."""


class InvalidArgument(ReactiveModelError, TypeError):
    """A key, mapping, dependency list or callback of the wrong shape."""


class ReentrancyLimitExceeded(ReactiveModelError, RecursionError):
    """Nested set() calls went deeper than the model's max_depth."""


class SchedulerError(ReactiveModelError, RuntimeError):
    """The scheduler has nowhere to defer work to."""
