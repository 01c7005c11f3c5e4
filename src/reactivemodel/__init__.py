"""reactivemodel: a key/value store with coalesced multi-key reactions."""

from importlib.metadata import version as _version

__version__ = _version("reactivemodel")

from reactivemodel._undefined import UNDEFINED, is_defined, all_defined
from reactivemodel.errors import (
    ReactiveModelError,
    InvalidArgument,
    ReentrancyLimitExceeded,
    SchedulerError,
)
from reactivemodel.scheduler import (
    Scheduler,
    ManualScheduler,
    AsyncioScheduler,
    set_scheduler,
    get_scheduler,
)
from reactivemodel.debounce import Debounced, debounce
from reactivemodel.model import Model, Listener, Reaction
# textual NOT auto-imported — opt-in only

__all__ = [
    "UNDEFINED",
    "is_defined",
    "all_defined",
    "ReactiveModelError",
    "InvalidArgument",
    "ReentrancyLimitExceeded",
    "SchedulerError",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
    "set_scheduler",
    "get_scheduler",
    "Debounced",
    "debounce",
    "Model",
    "Listener",
    "Reaction",
]
