"""Event payload and subscription types."""
from collections.abc import Callable
from types import TracebackType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WatchEvent(BaseModel):
    """One observed assignment on a reactive value.

    Attributes:
        target: The underlying object whose field was assigned.
        prop: Key, index, slice or attribute name that was assigned.
        value: The newly stored value.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    target: Any = Field(description="Underlying object that was mutated")
    prop: Any = Field(description="Assigned key, index, slice or attribute")
    value: Any = Field(default=None, description="New value")


Listener = Callable[[Any], None]


class Subscription:
    """Handle returned by ``Reactive.watch``.

    Usable as a context manager; leaving the block unsubscribes.
    """

    __slots__ = ("_cancel", "_active")

    def __init__(self, cancel: Callable[[], None]) -> None:
        self._cancel = cancel
        self._active = True

    @property
    def active(self) -> bool:
        """Whether unsubscribe() has not been called yet."""
        return self._active

    def unsubscribe(self) -> None:
        """Remove the listener. Idempotent."""
        if not self._active:
            return
        self._active = False
        self._cancel()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unsubscribe()
