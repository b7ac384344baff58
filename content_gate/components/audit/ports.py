"""
Audit component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import AuditRecord


class AuditSinkPort(Protocol):
    """
    Destination for audit records.

    Best-effort: implementations raise AuditWriteFailure (or anything else)
    when a record cannot be persisted; the auditor absorbs it.
    """

    def record(self, entry: AuditRecord) -> None:
        """Persist one audit record."""
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
