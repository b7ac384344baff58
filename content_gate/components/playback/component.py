"""
Playback component - time-boxed preview enforcement.

PreviewTimer caps how long a non-privileged viewer can play gated video.

States: idle -> playing <-> paused -> stopped, and playing -> restricted.

Invariants:
- watched_seconds never decreases and never exceeds the ceiling
- paused time is never counted
- restricted is entered exactly once, stops the player and cancels ticks
  in the same call, and is terminal for the timer
- watched time is reconciled against a monotonic clock, so a throttled or
  suspended tick source cannot under-count
- playing time is banked at full precision across pause and resume, so
  short play bursts still add up
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable

from content_gate.domain.entities import AccessDecision, RequiredAction
from content_gate.domain.errors import InvalidTransitionError, PreviewConfigError

from .models import TERMINAL_STATES, PreviewSession, PreviewState
from .ports import MonotonicClockPort, PlayerPort, TickSourcePort

logger = logging.getLogger(__name__)

DEFAULT_CEILING_SECONDS = 300

RestrictedListener = Callable[[PreviewSession], object]


def validate_ceiling(ceiling_seconds: object) -> int:
    """Return the ceiling if it is a positive int, else raise PreviewConfigError."""
    if isinstance(ceiling_seconds, bool) or not isinstance(ceiling_seconds, int):
        raise PreviewConfigError(f"Preview ceiling must be an integer, got {ceiling_seconds!r}")
    if ceiling_seconds <= 0:
        raise PreviewConfigError(f"Preview ceiling must be positive, got {ceiling_seconds}")
    return ceiling_seconds


def validate_initial_watched(initial_watched_seconds: object, ceiling_seconds: int) -> int:
    """Return previously watched seconds if they lie within 0..ceiling."""
    if isinstance(initial_watched_seconds, bool) or not isinstance(initial_watched_seconds, int):
        raise PreviewConfigError(
            f"Initial watched seconds must be an integer, got {initial_watched_seconds!r}"
        )
    if not 0 <= initial_watched_seconds <= ceiling_seconds:
        raise PreviewConfigError(
            f"Initial watched seconds must be within 0..{ceiling_seconds}, "
            f"got {initial_watched_seconds}"
        )
    return initial_watched_seconds


class PreviewTimer:
    """
    State machine for one preview playback session.

    A stopped or restricted timer cannot be revived; construct a new one.
    initial_watched_seconds carries time already spent on this video in
    earlier sessions; a timer seeded at the ceiling starts restricted.
    """

    def __init__(
        self,
        ceiling_seconds: int,
        clock: MonotonicClockPort,
        player: PlayerPort | None = None,
        tick_source: TickSourcePort | None = None,
        initial_watched_seconds: int = 0,
    ) -> None:
        self._ceiling = validate_ceiling(ceiling_seconds)
        self._initial = validate_initial_watched(initial_watched_seconds, self._ceiling)
        self._clock = clock
        self._player = player
        self._ticks = tick_source
        self._lock = threading.RLock()
        self._listeners: list[RestrictedListener] = []

        self._state = PreviewState.IDLE
        self._watched = self._initial
        self._ticked = self._initial
        self._started_at: float | None = None
        # Playing time from closed segments, and the clock mark of the open one
        self._elapsed = 0.0
        self._segment_started_at: float | None = None

        if self._initial >= self._ceiling:
            self._state = PreviewState.RESTRICTED
            logger.info("Preview allowance already spent, starting restricted")

    # --- Read-only view ---

    @property
    def state(self) -> PreviewState:
        return self._state

    @property
    def watched_seconds(self) -> int:
        return self._watched

    @property
    def ceiling_seconds(self) -> int:
        return self._ceiling

    @property
    def remaining_seconds(self) -> int:
        if self._state is PreviewState.RESTRICTED:
            return 0
        return max(0, self._ceiling - self._watched)

    @property
    def is_restricted(self) -> bool:
        return self._state is PreviewState.RESTRICTED

    @property
    def can_play(self) -> bool:
        """False once the timer is stopped or restricted."""
        return self._state not in TERMINAL_STATES

    def snapshot(self) -> PreviewSession:
        with self._lock:
            return PreviewSession(
                started_at_monotonic=self._started_at,
                watched_seconds=self._watched,
                ceiling_seconds=self._ceiling,
                state=self._state,
            )

    def on_restricted(self, listener: RestrictedListener) -> None:
        """Register a callback fired once when the ceiling is reached."""
        self._listeners.append(listener)

    # --- Commands ---
    #
    # State changes happen under the lock; the tick source is reconciled
    # afterwards so cancel() never joins a tick thread waiting on the lock.

    def start(self) -> PreviewState:
        """idle -> playing. Refused (no-op) once stopped or restricted."""
        with self._lock:
            state = self._start_locked()
        self._sync_ticks()
        return state

    def tick(self) -> PreviewState:
        """
        Count one second of playback.

        No-op unless playing. Reaching the ceiling restricts immediately.
        """
        with self._lock:
            if self._state is PreviewState.PLAYING:
                self._ticked += 1
                self._advance()
            state = self._state
        self._sync_ticks()
        return state

    def sync(self) -> PreviewState:
        """Catch up with the monotonic clock without counting a tick."""
        with self._lock:
            if self._state is PreviewState.PLAYING:
                self._advance()
            state = self._state
        self._sync_ticks()
        return state

    def pause(self) -> PreviewState:
        """playing -> paused, keeping watched time."""
        with self._lock:
            state = self._pause_locked()
        self._sync_ticks()
        return state

    def resume(self) -> PreviewState:
        """paused -> playing from the preserved watched time."""
        with self._lock:
            state = self._resume_locked()
        self._sync_ticks()
        return state

    def stop(self) -> PreviewState:
        """
        Tear the session down.

        Always cancels the tick source. A restricted timer stays restricted.
        """
        with self._lock:
            state = self._stop_locked()
        self._sync_ticks()
        return state

    # --- Internals ---

    def _start_locked(self) -> PreviewState:
        if self._state in TERMINAL_STATES:
            logger.debug("Ignoring start while %s", self._state.value)
            return self._state
        if self._state is not PreviewState.IDLE:
            raise InvalidTransitionError("start", self._state.value)

        now = self._clock.monotonic()
        self._started_at = now
        self._begin_segment(now)
        self._state = PreviewState.PLAYING
        if self._player is not None:
            self._player.play()
        return self._state

    def _pause_locked(self) -> PreviewState:
        if self._state in TERMINAL_STATES or self._state is PreviewState.PAUSED:
            return self._state
        if self._state is not PreviewState.PLAYING:
            raise InvalidTransitionError("pause", self._state.value)

        self._end_segment()
        self._advance()
        if self._state is PreviewState.RESTRICTED:
            return self._state

        self._state = PreviewState.PAUSED
        if self._player is not None:
            self._player.pause()
        return self._state

    def _resume_locked(self) -> PreviewState:
        if self._state in TERMINAL_STATES:
            logger.debug("Ignoring resume while %s", self._state.value)
            return self._state
        if self._state is not PreviewState.PAUSED:
            raise InvalidTransitionError("resume", self._state.value)

        self._begin_segment(self._clock.monotonic())
        self._state = PreviewState.PLAYING
        if self._player is not None:
            self._player.play()
        return self._state

    def _stop_locked(self) -> PreviewState:
        if self._state in TERMINAL_STATES:
            return self._state

        if self._state is PreviewState.PLAYING:
            self._end_segment()
            self._advance()
            if self._state is PreviewState.RESTRICTED:
                return self._state

        self._state = PreviewState.STOPPED
        if self._player is not None:
            self._player.stop()
        return self._state

    def _begin_segment(self, now: float) -> None:
        self._segment_started_at = now

    def _end_segment(self) -> None:
        if self._segment_started_at is None:
            return
        self._elapsed += max(0.0, self._clock.monotonic() - self._segment_started_at)
        self._segment_started_at = None

    def _clock_watched(self) -> int:
        elapsed = self._elapsed
        if self._segment_started_at is not None:
            elapsed += max(0.0, self._clock.monotonic() - self._segment_started_at)
        return self._initial + math.floor(elapsed)

    def _advance(self) -> None:
        # Ticks and the clock are counted separately; the larger one wins
        watched = max(self._watched, self._ticked, self._clock_watched())
        self._watched = min(self._ceiling, watched)
        if self._watched >= self._ceiling:
            self._restrict()

    def _restrict(self) -> None:
        self._end_segment()
        self._state = PreviewState.RESTRICTED
        self._watched = self._ceiling
        if self._player is not None:
            self._player.stop()

        logger.info("Preview ceiling reached after %ds, playback restricted", self._ceiling)
        session = self.snapshot()
        for listener in self._listeners:
            try:
                listener(session)
            except Exception:
                logger.exception("Preview restricted listener failed")

    def _sync_ticks(self) -> None:
        if self._ticks is None:
            return
        if self._state is PreviewState.PLAYING:
            if not self._ticks.is_running:
                self._ticks.start(self.tick)
        elif self._ticks.is_running:
            self._ticks.cancel()


def needs_preview_timer(decision: AccessDecision) -> bool:
    """
    Whether playback behind this decision must run under a preview timer.

    Only authenticated viewers denied for lack of premium get a preview;
    anonymous viewers must sign in first.
    """
    return not decision.allowed and decision.required_action is RequiredAction.UPGRADE


def create_preview_timer(
    decision: AccessDecision,
    clock: MonotonicClockPort,
    ceiling_seconds: int = DEFAULT_CEILING_SECONDS,
    player: PlayerPort | None = None,
    tick_source: TickSourcePort | None = None,
    initial_watched_seconds: int = 0,
) -> PreviewTimer | None:
    """
    Build a preview timer for a gated playback, or None.

    Returns None when the decision grants full playback or requires login.
    Pass the watch time already confirmed for this viewer and video as
    initial_watched_seconds so a reload resumes the same allowance.
    """
    if not needs_preview_timer(decision):
        return None
    return PreviewTimer(
        ceiling_seconds=ceiling_seconds,
        clock=clock,
        player=player,
        tick_source=tick_source,
        initial_watched_seconds=initial_watched_seconds,
    )
