"""Change-notifying view over plain structured data.

``reactive(value)`` returns a ``Reactive`` node that reads and writes through
to ``value``. Every assignment that changes a field dispatches a
``WatchEvent`` on one signal shared by the whole tree, so listeners attached
at the root see writes made arbitrarily deep::

    state = reactive({"user": {"name": "ada"}})
    sub = state.watch(print)
    state.user.name = "grace"   # WatchEvent(prop='name', value='grace', ...)
    state["user"]["name"] = "grace"   # unchanged, nothing dispatched
    sub.unsubscribe()

Mappings are addressed by key, sequences by index and other objects by
attribute. Attribute syntax on a mapping node reads and writes keys.
"""
import copy
import datetime
import inspect
import logging
import numbers
from collections.abc import (
    Callable,
    Iterator,
    Mapping,
    MutableMapping,
    MutableSequence,
    Sequence,
)
from enum import Enum
from types import MemberDescriptorType
from typing import Any

import structlog

from reactive_signal.errors import ForbiddenAccess
from reactive_signal.events import Signal, Subscription, WatchEvent

logger = structlog.wrap_logger(logging.getLogger(__name__))

FORBIDDEN_KEYS: frozenset[str] = frozenset({"__proto__", "constructor", "prototype"})

_SCALAR_TYPES: tuple[type, ...] = (
    str,
    bytes,
    numbers.Number,
    Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
)

_MISSING = object()


def is_forbidden(key: object) -> bool:
    """Check whether key reaches class or constructor internals.

    Args:
        key: Key, index or attribute name.

    Returns:
        True for the prototype/constructor names and any dunder name.
    """
    if not isinstance(key, str):
        return False
    if key in FORBIDDEN_KEYS:
        return True
    return len(key) > 4 and key.startswith("__") and key.endswith("__")


def is_structured(value: object) -> bool:
    """Check whether value is wrapped when read through a reactive node.

    Args:
        value: Any value.

    Returns:
        False for None, scalars and callables, True otherwise.
    """
    if isinstance(value, Reactive):
        return True
    return value is not None and not isinstance(value, _SCALAR_TYPES) and not callable(value)


def has_changed(old: object, new: object) -> bool:
    """Compare by identity, or by value for scalars.

    Numbers compare by value across types (``1`` and ``1.0`` are equal),
    except that a bool and a non-bool number always differ. Other scalars
    must share a type to compare equal.

    Args:
        old: Previous value, or the missing sentinel.
        new: Assigned value.

    Returns:
        True if the assignment counts as a change.
    """
    if old is new:
        return False
    if isinstance(old, numbers.Number) and isinstance(new, numbers.Number):
        if isinstance(old, bool) is not isinstance(new, bool):
            return True
        return bool(old != new)
    if isinstance(old, _SCALAR_TYPES) and type(old) is type(new):
        return bool(old != new)
    return True


def _lookup(target: Any, key: Any) -> Any:
    if isinstance(target, Mapping):
        return target[key]
    if isinstance(target, Sequence) and not isinstance(key, str):
        return target[key]
    if isinstance(key, str):
        return getattr(target, key)
    raise TypeError(f"{type(target).__name__} cannot be indexed by {key!r}")


def _find(target: Any, key: Any) -> Any:
    # Like _lookup, but absent fields give _MISSING. Errors raised while
    # computing a field that does exist (e.g. inside a property) propagate.
    if isinstance(target, Mapping) or (isinstance(target, Sequence) and not isinstance(key, str)):
        try:
            return target[key]
        except (KeyError, IndexError):
            return _MISSING
    if not isinstance(key, str):
        return _lookup(target, key)
    declared = inspect.getattr_static(target, key, _MISSING)
    if declared is not _MISSING and not isinstance(declared, MemberDescriptorType):
        return getattr(target, key)
    try:
        return getattr(target, key)
    except AttributeError:
        return _MISSING


def _store(target: Any, key: Any, value: Any) -> None:
    if isinstance(target, MutableMapping):
        target[key] = value
    elif isinstance(target, MutableSequence) and not isinstance(key, str):
        target[key] = value
    elif isinstance(key, str):
        setattr(target, key, value)
    else:
        raise TypeError(f"{type(target).__name__} does not support assignment to {key!r}")


def _remove(target: Any, key: Any) -> None:
    if isinstance(target, MutableMapping):
        del target[key]
    elif isinstance(target, MutableSequence) and not isinstance(key, str):
        del target[key]
    elif isinstance(key, str):
        delattr(target, key)
    else:
        raise TypeError(f"{type(target).__name__} does not support deletion of {key!r}")


def _guard(key: object, operation: str) -> None:
    if is_forbidden(key):
        logger.warning("reactive_forbidden_access", key=key, operation=operation)
        raise ForbiddenAccess(key, operation)


class Reactive:
    """Pass-through view of one node in a reactive tree.

    A node never copies data. Reading a structured child returns a new
    ``Reactive`` every time; two reads compare equal but are distinct
    objects that share the same underlying child and the same signal.
    """

    __slots__ = ("_target", "_signal")

    def __init__(self, target: Any, signal: Signal[WatchEvent] | None = None) -> None:
        """Initialize a node.

        Args:
            target: Structured value to view.
            signal: Signal of the tree root; a new one when None.

        Raises:
            TypeError: If target is None, a scalar or a callable.
            ForbiddenAccess: If called again on an initialized node.
        """
        try:
            object.__getattribute__(self, "_target")
        except AttributeError:
            pass
        else:
            _guard("__init__", "write")
        if isinstance(target, Reactive):
            target = target._target
        if not is_structured(target):
            raise TypeError(f"cannot make {type(target).__name__} reactive")
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_signal", signal if signal is not None else Signal())

    def get(self, key: Any, default: Any = None) -> Any:
        """Read a key, index or attribute.

        Args:
            key: Field to read.
            default: Returned when the field does not exist.

        Returns:
            A new Reactive for structured values, the raw value otherwise.

        Raises:
            ForbiddenAccess: If key is a prototype/constructor name.
        """
        _guard(key, "read")
        value = _find(self._target, key)
        if value is _MISSING:
            return default
        return self._wrap(value)

    def set(self, key: Any, value: Any) -> None:
        """Assign a field and dispatch a WatchEvent if the value changed.

        The assignment is applied before listeners run and stays applied
        if a listener raises.

        Args:
            key: Field to assign.
            value: New value; Reactive values are stored unwrapped.

        Raises:
            ForbiddenAccess: If key is a prototype/constructor name.
        """
        _guard(key, "write")
        if isinstance(value, Reactive):
            value = value._target
        target = self._target
        old = _find(target, key)
        _store(target, key, value)
        if has_changed(old, value):
            logger.debug("reactive_change", prop=key, target=type(target).__name__)
            self._signal.dispatch(WatchEvent(target=target, prop=key, value=value))

    def watch(self, listener: Callable[[WatchEvent], None]) -> Subscription:
        """Subscribe to every change in the tree this node belongs to.

        Args:
            listener: Called with a WatchEvent per changing assignment.

        Returns:
            Handle whose unsubscribe() removes this listener.
        """
        signal = self._signal
        signal.subscribe(listener)
        return Subscription(lambda: signal.unsubscribe(listener))

    def unwrap(self) -> Any:
        """Return the underlying object of this node."""
        return self._target

    def _wrap(self, value: Any) -> Any:
        if is_structured(value):
            return Reactive(value, self._signal)
        return value

    def __getattr__(self, name: str) -> Any:
        if name in Reactive.__slots__:
            raise AttributeError(name)
        _guard(name, "read")
        target = self._target
        if isinstance(target, Mapping) and name in target:
            return self._wrap(target[name])
        return self._wrap(getattr(target, name))

    def __setattr__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delattr__(self, name: str) -> None:
        _guard(name, "write")
        try:
            _remove(self._target, name)
        except KeyError:
            raise AttributeError(name) from None

    def __getitem__(self, key: Any) -> Any:
        _guard(key, "read")
        return self._wrap(_lookup(self._target, key))

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: Any) -> None:
        _guard(key, "write")
        _remove(self._target, key)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Reactive):
            item = item._target
        return item in self._target

    def __iter__(self) -> Iterator[Any]:
        if isinstance(self._target, Mapping):
            yield from self._target
            return
        for item in self._target:
            yield self._wrap(item)

    def __len__(self) -> int:
        return len(self._target)

    def __bool__(self) -> bool:
        return bool(self._target)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Reactive):
            other = other._target
        return bool(self._target == other)

    __hash__ = None  # type: ignore[assignment]

    def __copy__(self) -> "Reactive":
        return Reactive(self._target, self._signal)

    def __deepcopy__(self, memo: dict[int, Any]) -> Any:
        return copy.deepcopy(self._target, memo)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._target!r})"


def reactive(value: Any) -> Reactive:
    """Make a structured value observable.

    Args:
        value: Dict, list, dataclass or other object to observe. Passing a
            Reactive returns a new node over the same data and signal.

    Returns:
        Root node exposing pass-through access and watch().

    Raises:
        TypeError: If value is None, a scalar or a callable.
    """
    if isinstance(value, Reactive):
        return Reactive(value._target, value._signal)
    return Reactive(value)
