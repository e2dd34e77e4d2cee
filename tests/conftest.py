"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
import structlog

from reactive_signal import Signal


class Recorder:
    """Listener that records every value it receives."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, value: Any) -> None:
        self.calls.append(value)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def signal() -> Signal[Any]:
    """Create an empty signal."""
    return Signal()


@pytest.fixture
def recorder_factory() -> Callable[[], Recorder]:
    """Create independent recording listeners."""
    return Recorder


@pytest.fixture
def recorder() -> Recorder:
    """Create a recording listener."""
    return Recorder()


@pytest.fixture
def nested() -> dict[str, Any]:
    """Create sample nested data."""
    return {
        "a": {"b": 1},
        "items": [{"done": False}, {"done": True}],
        "name": "ada",
    }
