"""
Messaging component.

Public API for user-facing access and preview copy.
"""

from .component import (
    DEFAULT_WARNING_RATIO,
    format_access_message,
    format_duration,
    preview_countdown_message,
    should_show_upgrade_prompt,
)
from .models import AccessMessage, MessageConfig

__all__ = [
    "format_access_message",
    "format_duration",
    "preview_countdown_message",
    "should_show_upgrade_prompt",
    "DEFAULT_WARNING_RATIO",
    "AccessMessage",
    "MessageConfig",
]
