"""In-memory watch ledger adapter.

This adapter implements WatchLedgerRepoPort for the watchtime component.
Suitable for single-process deployments and tests.
"""

import threading

from content_gate.components.watchtime import WatchRecord


class InMemoryWatchLedgerRepo:
    """In-memory watch-time storage keyed by (user_id, video_id)."""

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], WatchRecord] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str, video_id: str) -> WatchRecord | None:
        with self._lock:
            return self._records.get((user_id, video_id))

    def save(self, record: WatchRecord) -> WatchRecord:
        with self._lock:
            self._records[(record.user_id, record.video_id)] = record
        return record

    def delete(self, user_id: str, video_id: str) -> None:
        with self._lock:
            self._records.pop((user_id, video_id), None)

    def clear(self) -> None:
        """Clear all records - useful for testing."""
        with self._lock:
            self._records.clear()
