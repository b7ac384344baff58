"""
Watch-time component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class WatchRecord:
    """Server-side high-water mark of preview time for one (user, video)."""

    user_id: str
    video_id: str
    watched_seconds: int
    updated_at: datetime


@dataclass(frozen=True)
class WatchTimeConfirmation:
    """Answer to a client's periodic watch-time report."""

    video_id: str
    watched_seconds: int
    ceiling_seconds: int
    remaining_seconds: int
    restricted: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "videoId": self.video_id,
            "watchedSeconds": self.watched_seconds,
            "ceilingSeconds": self.ceiling_seconds,
            "remainingSeconds": self.remaining_seconds,
            "restricted": self.restricted,
        }
