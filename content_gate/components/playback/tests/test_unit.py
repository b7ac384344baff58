"""
Unit tests for the playback component.

Tests:
- Preview timer state transitions
- Ceiling enforcement from ticks and from the monotonic clock
- Pause never counts time
- Restriction is terminal, stops the player, cancels ticks, fires once
- Timer creation from access decisions
"""

import threading
from collections.abc import Callable

import pytest

from content_gate.adapters.tick_source import ThreadedTickSource
from content_gate.components.playback import (
    PreviewSession,
    PreviewState,
    PreviewTimer,
    create_preview_timer,
    needs_preview_timer,
    validate_ceiling,
)
from content_gate.domain.entities import (
    AccessDecision,
    AccessLevel,
    RequiredAction,
    RoleName,
)
from content_gate.domain.errors import InvalidTransitionError, PreviewConfigError

# --- Test doubles ---


class MockClock:
    """Monotonic clock moved by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self._now = start

    def monotonic(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds


class FakePlayer:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def play(self) -> None:
        self.calls.append("play")

    def pause(self) -> None:
        self.calls.append("pause")

    def stop(self) -> None:
        self.calls.append("stop")


class ManualTickSource:
    """Tick source the test drives directly."""

    def __init__(self) -> None:
        self.callback: Callable[[], object] | None = None
        self.starts = 0
        self.cancels = 0

    @property
    def is_running(self) -> bool:
        return self.callback is not None

    def start(self, callback: Callable[[], object]) -> None:
        self.starts += 1
        self.callback = callback

    def cancel(self) -> None:
        self.cancels += 1
        self.callback = None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


# --- Fixtures ---


@pytest.fixture
def clock() -> MockClock:
    return MockClock()


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def ticks() -> ManualTickSource:
    return ManualTickSource()


@pytest.fixture
def timer(clock: MockClock, player: FakePlayer, ticks: ManualTickSource) -> PreviewTimer:
    return PreviewTimer(ceiling_seconds=300, clock=clock, player=player, tick_source=ticks)


def play_seconds(timer: PreviewTimer, clock: MockClock, seconds: int) -> None:
    """Advance the clock and tick in lock-step, like a healthy ticker."""
    for _ in range(seconds):
        clock.advance(1.0)
        timer.tick()


# --- Configuration ---


class TestValidateCeiling:
    """Tests for ceiling validation."""

    def test_accepts_positive_int(self) -> None:
        assert validate_ceiling(300) == 300

    @pytest.mark.parametrize("value", [0, -5, 1.5, "300", None, True])
    def test_rejects_invalid(self, value: object) -> None:
        with pytest.raises(PreviewConfigError):
            validate_ceiling(value)

    def test_timer_rejects_invalid_ceiling(self, clock: MockClock) -> None:
        with pytest.raises(PreviewConfigError):
            PreviewTimer(ceiling_seconds=0, clock=clock)

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_ceiling(-1)


# --- Transitions ---


class TestTransitions:
    """Tests for the preview timer state machine."""

    def test_initial_state(self, timer: PreviewTimer) -> None:
        assert timer.state is PreviewState.IDLE
        assert timer.watched_seconds == 0
        assert timer.remaining_seconds == 300
        assert timer.can_play is True

    def test_start_plays(
        self, timer: PreviewTimer, player: FakePlayer, ticks: ManualTickSource
    ) -> None:
        assert timer.start() is PreviewState.PLAYING
        assert player.calls == ["play"]
        assert ticks.is_running is True

    def test_start_twice_raises(self, timer: PreviewTimer) -> None:
        timer.start()
        with pytest.raises(InvalidTransitionError):
            timer.start()

    def test_pause_and_resume(
        self, timer: PreviewTimer, player: FakePlayer, ticks: ManualTickSource
    ) -> None:
        timer.start()
        assert timer.pause() is PreviewState.PAUSED
        assert ticks.is_running is False
        assert timer.resume() is PreviewState.PLAYING
        assert ticks.is_running is True
        assert player.calls == ["play", "pause", "play"]

    def test_pause_idle_raises(self, timer: PreviewTimer) -> None:
        with pytest.raises(InvalidTransitionError):
            timer.pause()

    def test_resume_while_playing_raises(self, timer: PreviewTimer) -> None:
        timer.start()
        with pytest.raises(InvalidTransitionError):
            timer.resume()

    def test_pause_twice_is_noop(self, timer: PreviewTimer, player: FakePlayer) -> None:
        timer.start()
        timer.pause()
        assert timer.pause() is PreviewState.PAUSED
        assert player.calls == ["play", "pause"]

    def test_stop_is_terminal(
        self, timer: PreviewTimer, player: FakePlayer, ticks: ManualTickSource
    ) -> None:
        timer.start()
        assert timer.stop() is PreviewState.STOPPED
        assert ticks.is_running is False
        assert player.calls[-1] == "stop"
        assert timer.can_play is False
        assert timer.start() is PreviewState.STOPPED
        assert timer.resume() is PreviewState.STOPPED

    def test_stop_from_idle(self, timer: PreviewTimer) -> None:
        assert timer.stop() is PreviewState.STOPPED

    def test_tick_ignored_unless_playing(self, timer: PreviewTimer) -> None:
        timer.tick()
        assert timer.watched_seconds == 0


# --- Ceiling enforcement ---


class TestCeiling:
    """Tests for restriction at the ceiling."""

    def test_299_ticks_still_playing(self, timer: PreviewTimer, clock: MockClock) -> None:
        timer.start()
        play_seconds(timer, clock, 299)
        assert timer.state is PreviewState.PLAYING
        assert timer.watched_seconds == 299
        assert timer.remaining_seconds == 1

    def test_300th_tick_restricts(
        self,
        timer: PreviewTimer,
        clock: MockClock,
        player: FakePlayer,
        ticks: ManualTickSource,
    ) -> None:
        """Reaching the ceiling stops the player and cancels ticks in one step."""
        timer.start()
        play_seconds(timer, clock, 300)
        assert timer.state is PreviewState.RESTRICTED
        assert timer.watched_seconds == 300
        assert timer.remaining_seconds == 0
        assert player.calls[-1] == "stop"
        assert ticks.is_running is False

    def test_ticks_without_clock_movement(self, timer: PreviewTimer) -> None:
        """Tick counting alone enforces the ceiling."""
        timer.start()
        for _ in range(300):
            timer.tick()
        assert timer.is_restricted is True

    def test_throttled_ticker_caught_by_clock(
        self, timer: PreviewTimer, clock: MockClock
    ) -> None:
        """A starved tick source cannot stretch the preview."""
        timer.start()
        play_seconds(timer, clock, 5)
        clock.advance(400)
        timer.tick()
        assert timer.is_restricted is True
        assert timer.watched_seconds == 300

    def test_sync_catches_up(self, timer: PreviewTimer, clock: MockClock) -> None:
        timer.start()
        clock.advance(120.7)
        timer.sync()
        assert timer.watched_seconds == 120
        assert timer.state is PreviewState.PLAYING

    def test_pause_does_not_count(self, timer: PreviewTimer, clock: MockClock) -> None:
        timer.start()
        play_seconds(timer, clock, 100)
        timer.pause()
        clock.advance(1000)
        timer.tick()
        assert timer.watched_seconds == 100
        timer.resume()
        play_seconds(timer, clock, 10)
        assert timer.watched_seconds == 110
        assert timer.state is PreviewState.PLAYING

    def test_short_play_bursts_add_up(self, timer: PreviewTimer, clock: MockClock) -> None:
        """Pausing before each second completes cannot hide playing time."""
        timer.start()
        for _ in range(1000):
            clock.advance(0.9)
            timer.pause()
            timer.resume()
        assert timer.state is PreviewState.RESTRICTED
        assert timer.watched_seconds == 300

    def test_fractions_carry_across_pause(self, timer: PreviewTimer, clock: MockClock) -> None:
        timer.start()
        clock.advance(0.6)
        timer.pause()
        assert timer.watched_seconds == 0
        timer.resume()
        clock.advance(0.6)
        timer.sync()
        assert timer.watched_seconds == 1

    def test_stop_banks_partial_segment(self, timer: PreviewTimer, clock: MockClock) -> None:
        timer.start()
        clock.advance(10.5)
        timer.pause()
        timer.resume()
        clock.advance(0.5)
        assert timer.stop() is PreviewState.STOPPED
        assert timer.watched_seconds == 11

    def test_pause_after_overrun_restricts(self, timer: PreviewTimer, clock: MockClock) -> None:
        timer.start()
        clock.advance(301)
        assert timer.pause() is PreviewState.RESTRICTED

    def test_watched_never_decreases(self, timer: PreviewTimer, clock: MockClock) -> None:
        timer.start()
        seen = []
        for _ in range(50):
            clock.advance(1.0)
            timer.tick()
            timer.sync()
            seen.append(timer.watched_seconds)
        assert seen == sorted(seen)

    def test_restricted_is_terminal(
        self, timer: PreviewTimer, clock: MockClock, player: FakePlayer
    ) -> None:
        timer.start()
        play_seconds(timer, clock, 300)
        calls_before = list(player.calls)
        assert timer.start() is PreviewState.RESTRICTED
        assert timer.resume() is PreviewState.RESTRICTED
        assert timer.pause() is PreviewState.RESTRICTED
        assert timer.stop() is PreviewState.RESTRICTED
        timer.tick()
        assert timer.watched_seconds == 300
        assert player.calls == calls_before

    def test_listener_fires_once(self, timer: PreviewTimer, clock: MockClock) -> None:
        sessions: list[PreviewSession] = []
        timer.on_restricted(sessions.append)
        timer.start()
        play_seconds(timer, clock, 310)
        timer.stop()
        assert len(sessions) == 1
        assert sessions[0].state is PreviewState.RESTRICTED
        assert sessions[0].remaining_seconds == 0

    def test_failing_listener_does_not_break_restriction(
        self, timer: PreviewTimer, clock: MockClock
    ) -> None:
        def boom(session: PreviewSession) -> None:
            raise RuntimeError("overlay failed")

        timer.on_restricted(boom)
        timer.start()
        play_seconds(timer, clock, 300)
        assert timer.is_restricted is True

    def test_ticks_from_source(self, timer: PreviewTimer, ticks: ManualTickSource) -> None:
        timer.start()
        ticks.fire(300)
        assert timer.is_restricted is True
        assert ticks.cancels == 1

    def test_snapshot(self, timer: PreviewTimer, clock: MockClock) -> None:
        timer.start()
        play_seconds(timer, clock, 30)
        data = timer.snapshot().to_dict()
        assert data["watchedSeconds"] == 30
        assert data["remainingSeconds"] == 270
        assert data["state"] == "playing"

    def test_small_ceiling(self, clock: MockClock) -> None:
        timer = PreviewTimer(ceiling_seconds=1, clock=clock)
        timer.start()
        timer.tick()
        assert timer.is_restricted is True


# --- Previously watched time ---


class TestInitialWatched:
    """Tests for timers seeded with time spent in earlier sessions."""

    def test_resumes_allowance(self, clock: MockClock, player: FakePlayer) -> None:
        timer = PreviewTimer(
            ceiling_seconds=300, clock=clock, player=player, initial_watched_seconds=299
        )
        assert timer.state is PreviewState.IDLE
        assert timer.remaining_seconds == 1
        timer.start()
        play_seconds(timer, clock, 1)
        assert timer.is_restricted is True
        assert player.calls == ["play", "stop"]

    def test_clock_counts_on_top_of_initial(self, clock: MockClock) -> None:
        timer = PreviewTimer(ceiling_seconds=300, clock=clock, initial_watched_seconds=200)
        timer.start()
        clock.advance(50.5)
        timer.sync()
        assert timer.watched_seconds == 250

    def test_spent_allowance_starts_restricted(
        self, clock: MockClock, player: FakePlayer, ticks: ManualTickSource
    ) -> None:
        timer = PreviewTimer(
            ceiling_seconds=300,
            clock=clock,
            player=player,
            tick_source=ticks,
            initial_watched_seconds=300,
        )
        assert timer.is_restricted is True
        assert timer.remaining_seconds == 0
        assert timer.start() is PreviewState.RESTRICTED
        assert player.calls == []
        assert ticks.starts == 0

    @pytest.mark.parametrize("value", [-1, 301, 1.5, "10", None, True])
    def test_rejects_out_of_range(self, clock: MockClock, value: object) -> None:
        with pytest.raises(PreviewConfigError):
            PreviewTimer(
                ceiling_seconds=300,
                clock=clock,
                initial_watched_seconds=value,  # type: ignore[arg-type]
            )

    def test_create_passes_initial(self, clock: MockClock) -> None:
        decision = AccessDecision(
            allowed=False,
            reason="Premium subscription required",
            required_action=RequiredAction.UPGRADE,
        )
        timer = create_preview_timer(decision, clock, initial_watched_seconds=120)
        assert timer is not None
        assert timer.watched_seconds == 120


# --- Threaded tick source ---


class TestThreadedTickSource:
    """Tests for the background tick adapter."""

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            ThreadedTickSource(interval_seconds=0)

    def test_drives_timer_to_restriction(self, clock: MockClock) -> None:
        restricted = threading.Event()
        source = ThreadedTickSource(interval_seconds=0.001)
        timer = PreviewTimer(ceiling_seconds=5, clock=clock, tick_source=source)
        timer.on_restricted(lambda session: restricted.set())

        timer.start()
        assert restricted.wait(timeout=5.0) is True
        assert timer.watched_seconds == 5
        assert timer.is_restricted is True

    def test_cancel_stops_ticks(self) -> None:
        count = 0
        lock = threading.Lock()

        def callback() -> None:
            nonlocal count
            with lock:
                count += 1

        source = ThreadedTickSource(interval_seconds=0.001)
        source.start(callback)
        source.cancel()
        assert source.is_running is False
        with lock:
            after_cancel = count
        threading.Event().wait(0.05)
        with lock:
            assert count == after_cancel


# --- Decision wiring ---


class TestPreviewTimerCreation:
    """Tests for deciding when a preview timer applies."""

    def test_upgrade_denial_needs_timer(self, clock: MockClock) -> None:
        decision = AccessDecision(
            allowed=False,
            reason="Premium subscription required",
            required_action=RequiredAction.UPGRADE,
            required_roles=(RoleName.PREMIUM_USER,),
        )
        assert needs_preview_timer(decision) is True
        timer = create_preview_timer(decision, clock, ceiling_seconds=60)
        assert timer is not None
        assert timer.ceiling_seconds == 60

    def test_allowed_needs_no_timer(self, clock: MockClock) -> None:
        decision = AccessDecision(allowed=True, reason="Premium access")
        assert create_preview_timer(decision, clock) is None

    def test_login_needs_no_timer(self, clock: MockClock) -> None:
        decision = AccessDecision(
            allowed=False,
            reason="Authentication required",
            level=AccessLevel.PREMIUM,
            required_action=RequiredAction.LOGIN,
        )
        assert needs_preview_timer(decision) is False
