"""Signal primitive and the payload types dispatched through it."""
from reactive_signal.events.signal import EventHub, Signal, dispatch_context
from reactive_signal.events.types import Listener, Subscription, WatchEvent

__all__ = [
    "EventHub",
    "Listener",
    "Signal",
    "Subscription",
    "WatchEvent",
    "dispatch_context",
]
