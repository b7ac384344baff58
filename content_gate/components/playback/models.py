"""
Playback component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PreviewState(str, Enum):
    """Preview timer states. RESTRICTED and STOPPED are terminal."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"
    RESTRICTED = "restricted"


TERMINAL_STATES: frozenset[PreviewState] = frozenset(
    {PreviewState.STOPPED, PreviewState.RESTRICTED}
)


@dataclass(frozen=True)
class PreviewSession:
    """Snapshot of one preview timer."""

    started_at_monotonic: float | None
    watched_seconds: int
    ceiling_seconds: int
    state: PreviewState

    @property
    def remaining_seconds(self) -> int:
        if self.state is PreviewState.RESTRICTED:
            return 0
        return max(0, self.ceiling_seconds - self.watched_seconds)

    def to_dict(self) -> dict[str, Any]:
        return {
            "startedAtMonotonic": self.started_at_monotonic,
            "watchedSeconds": self.watched_seconds,
            "ceilingSeconds": self.ceiling_seconds,
            "remainingSeconds": self.remaining_seconds,
            "state": self.state.value,
        }
