"""
Playback component ports.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class MonotonicClockPort(Protocol):
    """Port for a monotonic clock - enables deterministic testing."""

    def monotonic(self) -> float:
        """Seconds from an arbitrary, never-decreasing origin."""
        ...


class PlayerPort(Protocol):
    """Underlying media player controlled by the preview timer."""

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def stop(self) -> None: ...


class TickSourcePort(Protocol):
    """
    Periodic tick driver.

    cancel() must be deterministic: no callback runs after it returns,
    except a callback already in progress on the tick thread itself.
    """

    def start(self, callback: Callable[[], object]) -> None: ...

    def cancel(self) -> None: ...

    @property
    def is_running(self) -> bool: ...
