"""
Threaded tick source adapter.

Drives a preview timer from a background thread at a fixed interval.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ThreadedTickSource:
    """
    Background ticker with deterministic cancellation.

    cancel() joins the thread, so no tick fires after it returns. Called
    from inside a tick (e.g. when the callback restricts playback), it only
    signals the loop to exit.
    """

    def __init__(self, interval_seconds: float = 1.0) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_seconds}")
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._callback: Callable[[], object] | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self, callback: Callable[[], object]) -> None:
        """Start ticking; a no-op if already running."""
        if self.is_running:
            return

        self._callback = callback
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._tick_loop, args=(self._stop_event,), daemon=True
        )
        self._thread.start()
        logger.debug("Tick source started (interval: %.2fs)", self._interval)

    def cancel(self) -> None:
        """Stop ticking."""
        thread = self._thread
        self._stop_event.set()
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout=5.0)
        self._thread = None
        logger.debug("Tick source cancelled")

    def _tick_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(timeout=self._interval):
            callback = self._callback
            if callback is None:
                continue
            try:
                callback()
            except Exception:
                logger.exception("Error in preview tick callback")
