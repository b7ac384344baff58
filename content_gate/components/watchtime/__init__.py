"""
Watch-time component.

Public API for server-side preview time confirmation.
"""

from .component import WatchTimeLedger
from .models import WatchRecord, WatchTimeConfirmation
from .ports import TimePort, WatchLedgerRepoPort

__all__ = [
    "WatchTimeLedger",
    "WatchRecord",
    "WatchTimeConfirmation",
    "TimePort",
    "WatchLedgerRepoPort",
]
