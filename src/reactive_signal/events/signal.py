"""Synchronous multi-listener signal with per-context grouping."""
import logging
from collections.abc import Callable, Hashable
from contextvars import ContextVar
from typing import Generic, TypeVar

import structlog

logger = structlog.wrap_logger(logging.getLogger(__name__))

T = TypeVar("T")

# Listener key -> listener, in registration order.
_ListenerSet = dict[Hashable, Callable[[T], None]]

# Contexts of these types are grouped by value; all others by identity.
_VALUE_CONTEXT_TYPES: tuple[type, ...] = (str, bytes, int, float, bool)

_current_context: ContextVar[object] = ContextVar("reactive_signal_dispatch_context")


def dispatch_context() -> object:
    """Return the context the running listener was registered under.

    For listeners subscribed without a context this is the signal itself.

    Returns:
        The registration context of the innermost listener being dispatched.

    Raises:
        RuntimeError: If called outside a listener invocation.
    """
    try:
        return _current_context.get()
    except LookupError:
        raise RuntimeError("dispatch_context() called outside a listener") from None


def _context_token(context: object) -> Hashable:
    if isinstance(context, _VALUE_CONTEXT_TYPES):
        return (type(context), context)
    return id(context)


def _listener_key(listener: Callable[..., object]) -> Hashable:
    # Hashable listeners match by equality so re-fetched bound methods are
    # the same registration; unhashable callables match by identity.
    try:
        hash(listener)
    except TypeError:
        return ("id", id(listener))
    return listener


class Signal(Generic[T]):
    """Typed dispatcher supporting durable and one-shot listeners.

    Listeners are grouped by a context object. A listener subscribed under
    two contexts is two independent registrations, and removal has to name
    the same context again. Omitting the context uses the signal itself.

    Dispatch is synchronous. Listener errors are not caught and abort the
    remainder of the pass.
    """

    def __init__(self) -> None:
        """Initialize an empty signal."""
        self._listeners: dict[Hashable, _ListenerSet] = {}
        self._once_listeners: dict[Hashable, _ListenerSet] = {}
        self._contexts: dict[Hashable, object] = {}

    @property
    def listener_count(self) -> int:
        """Number of (listener, context) registrations, durable and once."""
        return sum(len(listeners) for listeners in self._listeners.values()) + sum(
            len(listeners) for listeners in self._once_listeners.values()
        )

    def subscribe(self, listener: Callable[[T], None], context: object = None) -> None:
        """Register a durable listener.

        Registering the same (listener, context) pair again has no effect.

        Args:
            listener: Callable invoked with each dispatched value.
            context: Grouping key and receiver; defaults to this signal.
        """
        self._add(self._listeners, listener, context, once=False)

    def subscribe_once(self, listener: Callable[[T], None], context: object = None) -> None:
        """Register a listener that is removed when it first fires.

        Args:
            listener: Callable invoked with the next dispatched value.
            context: Grouping key and receiver; defaults to this signal.
        """
        self._add(self._once_listeners, listener, context, once=True)

    def unsubscribe(self, listener: Callable[[T], None], context: object = None) -> None:
        """Remove a listener from both the durable and once registries.

        Unknown pairs are ignored.

        Args:
            listener: Listener previously passed to subscribe or subscribe_once.
            context: Context it was registered under; defaults to this signal.
        """
        token = _context_token(self if context is None else context)
        key = _listener_key(listener)
        removed = self._discard(self._listeners, token, key)
        removed = self._discard(self._once_listeners, token, key) or removed
        if removed:
            logger.debug("listener_removed", listener=_name(listener))

    def unsubscribe_all(self) -> None:
        """Remove every listener under every context."""
        if self.is_empty():
            return
        count = self.listener_count
        self._listeners.clear()
        self._once_listeners.clear()
        self._contexts.clear()
        logger.debug("listeners_cleared", count=count)

    def dispatch(self, value: T) -> None:
        """Call every registered listener with value.

        Durable listeners run first, then once listeners. Contexts are
        visited in the order they were first registered and listeners in
        registration order within a context. Each registry is snapshotted
        when the pass starts, so listeners added by a listener wait for the
        next dispatch, while listeners removed by a listener may still run
        in this one. A once listener is dropped right before it is called.

        Args:
            value: Payload handed to each listener.
        """
        durable = [
            (self._contexts[token], list(listeners.values()))
            for token, listeners in self._listeners.items()
        ]
        once = [
            (token, self._contexts[token], list(listeners.items()))
            for token, listeners in self._once_listeners.items()
        ]

        for context, callbacks in durable:
            for listener in callbacks:
                _invoke(listener, context, value)

        for token, context, entries in once:
            for key, listener in entries:
                # Skips listeners already consumed by a re-entrant dispatch.
                if self._discard(self._once_listeners, token, key):
                    _invoke(listener, context, value)

    def is_empty(self) -> bool:
        """Check whether no listener is registered.

        Returns:
            True if both registries have no contexts.
        """
        return not self._listeners and not self._once_listeners

    def __repr__(self) -> str:
        return f"{type(self).__name__}(listeners={self.listener_count})"

    def _add(
        self,
        registry: dict[Hashable, _ListenerSet],
        listener: Callable[[T], None],
        context: object,
        *,
        once: bool,
    ) -> None:
        if context is None:
            context = self
        token = _context_token(context)
        key = _listener_key(listener)
        if key in registry.get(token, {}):
            return
        self._contexts.setdefault(token, context)
        registry.setdefault(token, {})[key] = listener
        logger.debug(
            "listener_added",
            listener=_name(listener),
            context=type(context).__name__,
            once=once,
        )

    def _discard(
        self,
        registry: dict[Hashable, _ListenerSet],
        token: Hashable,
        key: Hashable,
    ) -> bool:
        listeners = registry.get(token)
        if listeners is None or key not in listeners:
            return False
        del listeners[key]
        if not listeners:
            del registry[token]
            if token not in self._listeners and token not in self._once_listeners:
                self._contexts.pop(token, None)
        return True


EventHub = Signal


def _invoke(listener: Callable[[T], None], context: object, value: T) -> None:
    reset_token = _current_context.set(context)
    try:
        listener(value)
    finally:
        _current_context.reset(reset_token)


def _name(listener: Callable[..., object]) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)
