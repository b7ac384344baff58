"""
Watch-time component - server-side counterpart of the preview timer.

The client timer is advisory; a fresh tab or a reload starts a new timer.
Clients report their watched seconds here periodically and the ledger keeps
the high-water mark per (user, video), so a restart cannot hand back time
already spent.

Invariants:
- Confirmed watch time never decreases
- Confirmed watch time never exceeds the ceiling
- Once the ceiling is reached the video stays restricted for that user
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime

from content_gate.domain.errors import InvalidWatchTime

from .models import WatchRecord, WatchTimeConfirmation
from .ports import TimePort, WatchLedgerRepoPort

logger = logging.getLogger(__name__)


class _UtcClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)


def _validate_reported(reported_seconds: object) -> int:
    if isinstance(reported_seconds, bool) or not isinstance(reported_seconds, int | float):
        raise InvalidWatchTime(f"Invalid watch duration: {reported_seconds!r}")
    if not math.isfinite(reported_seconds) or reported_seconds < 0:
        raise InvalidWatchTime(f"Invalid watch duration: {reported_seconds!r}")
    return math.floor(reported_seconds)


class WatchTimeLedger:
    """Confirms client-reported preview time against a server-side record."""

    def __init__(
        self,
        repo: WatchLedgerRepoPort,
        ceiling_seconds: int,
        time_port: TimePort | None = None,
    ) -> None:
        if ceiling_seconds <= 0:
            raise ValueError(f"Preview ceiling must be positive, got {ceiling_seconds}")
        self._repo = repo
        self._ceiling = ceiling_seconds
        self._time = time_port or _UtcClock()

    @property
    def ceiling_seconds(self) -> int:
        return self._ceiling

    def _confirmation(self, video_id: str, watched: int) -> WatchTimeConfirmation:
        return WatchTimeConfirmation(
            video_id=video_id,
            watched_seconds=watched,
            ceiling_seconds=self._ceiling,
            remaining_seconds=max(0, self._ceiling - watched),
            restricted=watched >= self._ceiling,
        )

    def confirm(
        self, user_id: str, video_id: str, reported_seconds: float
    ) -> WatchTimeConfirmation:
        """
        Merge a client report into the ledger.

        Args:
            user_id: Viewer
            video_id: Video being previewed
            reported_seconds: Watched seconds according to the client

        Returns:
            WatchTimeConfirmation with the authoritative totals

        Raises:
            InvalidWatchTime: for negative or non-numeric reports
        """
        reported = _validate_reported(reported_seconds)
        existing = self._repo.get(user_id, video_id)
        previous = existing.watched_seconds if existing else 0

        if reported < previous:
            logger.info(
                "Watch time regressed for user=%s video=%s (%d < %d), keeping ledger value",
                user_id,
                video_id,
                reported,
                previous,
            )

        watched = min(self._ceiling, max(previous, reported))
        if existing is None or watched != previous:
            self._repo.save(
                WatchRecord(
                    user_id=user_id,
                    video_id=video_id,
                    watched_seconds=watched,
                    updated_at=self._time.now_utc(),
                )
            )
        return self._confirmation(video_id, watched)

    def status(self, user_id: str, video_id: str) -> WatchTimeConfirmation:
        """Current totals without recording anything."""
        existing = self._repo.get(user_id, video_id)
        return self._confirmation(video_id, existing.watched_seconds if existing else 0)

    def remaining(self, user_id: str, video_id: str) -> int:
        return self.status(user_id, video_id).remaining_seconds

    def reset(self, user_id: str, video_id: str) -> None:
        """Drop the ledger entry (e.g. after the viewer upgrades)."""
        self._repo.delete(user_id, video_id)
