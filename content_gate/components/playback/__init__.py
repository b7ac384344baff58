"""
Playback component.

Public API for time-boxed preview enforcement.
"""

from .component import (
    DEFAULT_CEILING_SECONDS,
    PreviewTimer,
    create_preview_timer,
    needs_preview_timer,
    validate_ceiling,
    validate_initial_watched,
)
from .models import TERMINAL_STATES, PreviewSession, PreviewState
from .ports import MonotonicClockPort, PlayerPort, TickSourcePort

__all__ = [
    "PreviewTimer",
    "create_preview_timer",
    "needs_preview_timer",
    "validate_ceiling",
    "validate_initial_watched",
    "DEFAULT_CEILING_SECONDS",
    # Models
    "PreviewSession",
    "PreviewState",
    "TERMINAL_STATES",
    # Ports
    "MonotonicClockPort",
    "PlayerPort",
    "TickSourcePort",
]
