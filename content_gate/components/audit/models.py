"""
Audit component models.

Append-only records of authorization checks made at a trust boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4


@dataclass(frozen=True)
class RequestContext:
    """Request metadata captured alongside an audit record."""

    ip_address: str = "unknown"
    user_agent: str = "unknown"
    request_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "request_id": self.request_id,
        }


@dataclass(frozen=True)
class AuditRecord:
    """Immutable record of one authorization check."""

    user_id: str | None
    resource: str
    action: str
    allowed: bool
    timestamp: datetime
    resource_id: str | None = None
    reason: str | None = None
    request_context: RequestContext = field(default_factory=RequestContext)
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "user_id": self.user_id,
            "resource": self.resource,
            "action": self.action,
            "resource_id": self.resource_id,
            "allowed": self.allowed,
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
            "request_context": self.request_context.to_dict(),
        }


@dataclass(frozen=True)
class AuditConfig:
    """Audit logging configuration."""

    enabled: bool = True
    log_informational: bool = False
