"""
Wire rules.yaml settings into the gating components.

Callers that render content behind a decision use these instead of
building timers and excerpts by hand.
"""

from __future__ import annotations

from content_gate.adapters.clock import SystemClock
from content_gate.adapters.tick_source import ThreadedTickSource
from content_gate.components.access import ArticleExcerpt, build_article_excerpt
from content_gate.components.playback import (
    MonotonicClockPort,
    PlayerPort,
    PreviewTimer,
    create_preview_timer,
    needs_preview_timer,
)
from content_gate.components.watchtime import WatchTimeLedger
from content_gate.domain.entities import AccessDecision
from content_gate.rules.models import Rules


def build_preview_timer(
    decision: AccessDecision,
    rules: Rules,
    ledger: WatchTimeLedger,
    user_id: str,
    video_id: str,
    player: PlayerPort | None = None,
    clock: MonotonicClockPort | None = None,
) -> PreviewTimer | None:
    """
    Preview timer for a gated video, or None when playback is not metered.

    The timer resumes from the watch time the ledger has already confirmed
    for this viewer and video, so a reload cannot restart the allowance.
    It is driven by a background ticker at the configured interval and is
    returned idle; call start() when playback begins.
    """
    if not needs_preview_timer(decision):
        return None
    ceiling = rules.preview.ceiling_seconds
    watched = min(ceiling, ledger.status(user_id, video_id).watched_seconds)
    return create_preview_timer(
        decision,
        clock=clock or SystemClock(),
        ceiling_seconds=ceiling,
        player=player,
        tick_source=ThreadedTickSource(rules.preview.tick_interval_seconds),
        initial_watched_seconds=watched,
    )


def article_excerpt(content: str, rules: Rules) -> ArticleExcerpt:
    """Length-boxed article preview using the configured ratio and minimum."""
    return build_article_excerpt(
        content,
        ratio=rules.article_preview.ratio,
        min_lines=rules.article_preview.min_lines,
    )
