"""
Audit component - records authorization checks.

Invariants:
- Records are append-only
- A failing sink never blocks or alters the decision already made
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from content_gate.domain.entities import AccessDecision

from .models import AuditConfig, AuditRecord, RequestContext
from .ports import AuditSinkPort, TimePort

logger = logging.getLogger(__name__)


class _UtcClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)


class AccessAuditor:
    """
    Fire-and-forget front for an AuditSinkPort.

    Every sink error is swallowed and logged for operators.
    """

    def __init__(
        self,
        sink: AuditSinkPort,
        time_port: TimePort | None = None,
        config: AuditConfig | None = None,
    ) -> None:
        self._sink = sink
        self._time = time_port or _UtcClock()
        self._config = config or AuditConfig()

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def should_record(self, informational: bool) -> bool:
        """Whether a check of this kind produces an audit record."""
        if not self._config.enabled:
            return False
        return not informational or self._config.log_informational

    def record(
        self,
        *,
        user_id: str | None,
        resource: str,
        action: str,
        allowed: bool,
        resource_id: str | None = None,
        reason: str | None = None,
        context: RequestContext | None = None,
    ) -> AuditRecord | None:
        """
        Build and hand off one audit record.

        Returns:
            The record handed to the sink, or None if disabled or the sink failed.
        """
        if not self._config.enabled:
            return None

        try:
            entry = AuditRecord(
                user_id=user_id,
                resource=resource,
                action=action,
                resource_id=resource_id,
                allowed=allowed,
                reason=reason,
                timestamp=self._time.now_utc(),
                request_context=context or RequestContext(),
            )
            self._sink.record(entry)
        except Exception:
            logger.exception(
                "Audit log error",
                extra={"user_id": user_id, "resource": resource, "action": action},
            )
            return None
        return entry

    def record_decision(
        self,
        decision: AccessDecision,
        *,
        user_id: str | None,
        resource: str,
        action: str,
        resource_id: str | None = None,
        context: RequestContext | None = None,
    ) -> AuditRecord | None:
        """Record the outcome of an access decision."""
        return self.record(
            user_id=user_id,
            resource=resource,
            action=action,
            allowed=decision.allowed,
            resource_id=resource_id,
            reason=decision.reason,
            context=context,
        )

    def record_authentication(
        self, user_id: str, request_url: str, context: RequestContext | None = None
    ) -> AuditRecord | None:
        """Record a successful authentication at the API boundary."""
        return self.record(
            user_id=user_id,
            resource="api",
            action="authenticate",
            allowed=True,
            resource_id=request_url,
            context=context,
        )
