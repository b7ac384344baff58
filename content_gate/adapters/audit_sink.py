"""
Audit sink adapters.

InMemoryAuditSink keeps records for tests and the admin audit route.
LoggingAuditSink emits one structured log line per record.
"""

from __future__ import annotations

import logging
import threading

from content_gate.components.audit import AuditRecord

logger = logging.getLogger(__name__)


class InMemoryAuditSink:
    """In-memory append-only audit store for testing/dev."""

    def __init__(self) -> None:
        self._records: list[AuditRecord] = []
        self._lock = threading.Lock()

    def record(self, entry: AuditRecord) -> None:
        with self._lock:
            self._records.append(entry)

    def _filtered(
        self,
        user_id: str | None,
        resource: str | None,
        allowed: bool | None,
    ) -> list[AuditRecord]:
        with self._lock:
            results = list(self._records)

        if user_id is not None:
            results = [r for r in results if r.user_id == user_id]
        if resource is not None:
            results = [r for r in results if r.resource == resource]
        if allowed is not None:
            results = [r for r in results if r.allowed is allowed]
        return results

    def query(
        self,
        user_id: str | None = None,
        resource: str | None = None,
        allowed: bool | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditRecord]:
        """Query with filters, newest first."""
        results = self._filtered(user_id, resource, allowed)
        results.sort(key=lambda r: r.timestamp, reverse=True)
        return results[offset : offset + limit]

    def count(
        self,
        user_id: str | None = None,
        resource: str | None = None,
        allowed: bool | None = None,
    ) -> int:
        return len(self._filtered(user_id, resource, allowed))

    def __len__(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        """Clear all records (for testing)."""
        with self._lock:
            self._records.clear()


class LoggingAuditSink:
    """Audit sink that writes structured log lines."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def record(self, entry: AuditRecord) -> None:
        self._log.info(
            "Access %s",
            "allowed" if entry.allowed else "denied",
            extra={
                "audit_id": str(entry.id),
                "user_id": entry.user_id,
                "resource": entry.resource,
                "action": entry.action,
                "resource_id": entry.resource_id,
                "allowed": entry.allowed,
                "reason": entry.reason,
                "ip_address": entry.request_context.ip_address,
                "user_agent": entry.request_context.user_agent,
            },
        )
