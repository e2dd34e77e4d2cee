"""reactive-signal: typed signals and change-notifying views of plain data.

Quick start::

    from reactive_signal import reactive

    state = reactive({"todos": [{"done": False}]})
    with state.watch(lambda event: print(event.prop, event.value)):
        state.todos[0].done = True      # prints: done True

The lower-level primitive is ``Signal``::

    signal = Signal[int]()
    signal.subscribe(print)
    signal.subscribe_once(lambda value: print("first", value))
    signal.dispatch(1)
"""

from reactive_signal.config import Settings
from reactive_signal.errors import ForbiddenAccess, ReactiveSignalError
from reactive_signal.events import (
    EventHub,
    Listener,
    Signal,
    Subscription,
    WatchEvent,
    dispatch_context,
)
from reactive_signal.logging import configure_logging
from reactive_signal.reactive import Reactive, reactive

__version__ = "0.1.0"
__all__ = [
    "EventHub",
    "ForbiddenAccess",
    "Listener",
    "Reactive",
    "ReactiveSignalError",
    "Settings",
    "Signal",
    "Subscription",
    "WatchEvent",
    "__version__",
    "configure_logging",
    "dispatch_context",
    "reactive",
]
