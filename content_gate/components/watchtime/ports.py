from datetime import datetime
from typing import Protocol

from .models import WatchRecord


class WatchLedgerRepoPort(Protocol):
    def get(self, user_id: str, video_id: str) -> WatchRecord | None: ...
    def save(self, record: WatchRecord) -> WatchRecord: ...
    def delete(self, user_id: str, video_id: str) -> None: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
