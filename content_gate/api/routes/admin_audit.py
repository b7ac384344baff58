"""
Admin Audit Log API.

Lists access-check audit records. The caller must pass the admin panel gate.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from content_gate.adapters.audit_sink import InMemoryAuditSink
from content_gate.api.deps import (
    get_access_service,
    get_audit_sink,
    get_auditor,
    get_current_user_id,
    get_message_config,
    get_request_context,
)
from content_gate.api.responses import decision_response, unauthorized_response
from content_gate.components.access import AccessService
from content_gate.components.audit import AccessAuditor, AuditRecord, RequestContext
from content_gate.components.messaging import MessageConfig
from content_gate.domain.entities import Action, ResourceKind

router = APIRouter()


# --- Response Models ---


class AuditRecordResponse(BaseModel):
    """Audit record response model."""

    id: str
    timestamp: str
    user_id: str | None
    resource: str
    action: str
    resource_id: str | None
    allowed: bool
    reason: str | None
    ip_address: str
    user_agent: str


class AuditQueryResponse(BaseModel):
    """Paginated audit query response."""

    items: list[AuditRecordResponse]
    total: int
    offset: int
    limit: int


def record_to_response(record: AuditRecord) -> AuditRecordResponse:
    """Convert AuditRecord to response model."""
    return AuditRecordResponse(
        id=str(record.id),
        timestamp=record.timestamp.isoformat(),
        user_id=record.user_id,
        resource=record.resource,
        action=record.action,
        resource_id=record.resource_id,
        allowed=record.allowed,
        reason=record.reason,
        ip_address=record.request_context.ip_address,
        user_agent=record.request_context.user_agent,
    )


# --- Routes ---


@router.get("", response_model=None)
def query_audit_records(
    request: Request,
    user_id: str | None = Query(None, description="Filter by user ID"),
    resource: str | None = Query(None, description="Filter by resource kind"),
    allowed: bool | None = Query(None, description="Filter by outcome"),
    limit: int = Query(50, ge=1, le=500, description="Number of results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    caller_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    auditor: AccessAuditor = Depends(get_auditor),
    sink: InMemoryAuditSink = Depends(get_audit_sink),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> AuditQueryResponse | JSONResponse:
    """Query audit records, newest first."""
    if caller_id is None:
        return unauthorized_response()
    auditor.record_authentication(caller_id, str(request.url), context)

    decision = service.check(
        caller_id, ResourceKind.ADMIN_PANEL, None, Action.ACCESS, context=context
    )
    if not decision.allowed:
        return decision_response(
            decision,
            resource=ResourceKind.ADMIN_PANEL.value,
            action=Action.ACCESS.value,
            config=config,
        )

    records = sink.query(
        user_id=user_id, resource=resource, allowed=allowed, limit=limit, offset=offset
    )
    total = sink.count(user_id=user_id, resource=resource, allowed=allowed)
    return AuditQueryResponse(
        items=[record_to_response(r) for r in records],
        total=total,
        offset=offset,
        limit=limit,
    )


@router.get("/stats")
def audit_stats(
    caller_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    sink: InMemoryAuditSink = Depends(get_audit_sink),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> Any:
    """Allowed/denied totals."""
    if caller_id is None:
        return unauthorized_response()
    decision = service.check(
        caller_id, ResourceKind.ADMIN_PANEL, None, Action.ACCESS, context=context
    )
    if not decision.allowed:
        return decision_response(
            decision,
            resource=ResourceKind.ADMIN_PANEL.value,
            action=Action.ACCESS.value,
            config=config,
        )
    return {
        "total": sink.count(),
        "allowed": sink.count(allowed=True),
        "denied": sink.count(allowed=False),
    }
