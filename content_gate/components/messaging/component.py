"""
Messaging component - turn decisions and preview state into UI copy.

All functions are pure; decisions are frozen, so results can be cached by
decision shape.
"""

from __future__ import annotations

import math
from functools import lru_cache

from content_gate.domain.entities import AccessDecision, AccessLevel, RequiredAction

from .models import AccessMessage, MessageConfig

DEFAULT_WARNING_RATIO = 0.8

_EMPTY = AccessMessage(title="", message="")


@lru_cache(maxsize=256)
def format_access_message(
    decision: AccessDecision, config: MessageConfig | None = None
) -> AccessMessage:
    """
    Map a decision to remediation copy.

    - login required: prompt to sign in
    - upgrade with preview: "continue reading" framing
    - upgrade without preview: premium-only framing
    - anything else: generic denial quoting decision.reason
    """
    config = config or MessageConfig()

    if decision.allowed:
        return _EMPTY

    if decision.required_action is RequiredAction.LOGIN:
        return AccessMessage(
            title="Sign in required",
            message="Please sign in to view this content.",
            cta_text="Sign in",
            cta_link=config.login_link,
        )

    if decision.required_action is RequiredAction.UPGRADE:
        if decision.level is AccessLevel.PARTIAL and decision.preview_allowed:
            return AccessMessage(
                title="Upgrade to Premium to keep reading",
                message="Get the full article plus unlimited access to every premium article.",
                cta_text="Continue reading with Premium",
                cta_link=config.upgrade_link,
            )
        return AccessMessage(
            title="Premium-only content",
            message="This content is available to Premium members only.",
            cta_text="Get Premium",
            cta_link=config.upgrade_link,
        )

    return AccessMessage(title="Access unavailable", message=decision.reason)


def format_duration(seconds: float) -> str:
    """Format seconds as M:SS, or H:MM:SS from one hour up."""
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def should_show_upgrade_prompt(
    watched_seconds: int,
    ceiling_seconds: int,
    warning_ratio: float = DEFAULT_WARNING_RATIO,
) -> bool:
    """True inside the warning window just before the ceiling is reached."""
    return ceiling_seconds * warning_ratio <= watched_seconds < ceiling_seconds


def preview_countdown_message(remaining_seconds: float) -> str:
    """Countdown copy shown to a viewer on a time-boxed preview."""
    if remaining_seconds <= 0:
        return "Your free preview has ended. Upgrade to continue watching!"

    if remaining_seconds <= 60:
        return f"Only {math.floor(remaining_seconds)} seconds remaining in your free preview!"

    minutes = math.floor(remaining_seconds / 60)
    plural = "s" if minutes != 1 else ""
    return f"{minutes} minute{plural} remaining in your free preview"
