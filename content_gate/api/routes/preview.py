"""
Preview watch-time API.

Clients report watched seconds while a preview plays; the server keeps the
authoritative total so a reload or second tab cannot restart the allowance.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from content_gate.api.deps import (
    get_access_service,
    get_auditor,
    get_current_user_id,
    get_message_config,
    get_request_context,
    get_rules,
    get_video_catalog,
    get_watch_ledger,
)
from content_gate.api.responses import decision_response, unauthorized_response
from content_gate.components.access import AccessService, VideoCatalogPort
from content_gate.components.audit import AccessAuditor, RequestContext
from content_gate.components.messaging import (
    MessageConfig,
    format_duration,
    preview_countdown_message,
    should_show_upgrade_prompt,
)
from content_gate.components.playback import needs_preview_timer
from content_gate.components.watchtime import WatchTimeConfirmation, WatchTimeLedger
from content_gate.domain.entities import Action, ResourceKind
from content_gate.domain.errors import InvalidWatchTime
from content_gate.rules.models import Rules

router = APIRouter()


class WatchTimeRequest(BaseModel):
    """Client watch-time report."""

    watched_seconds: float


def _preview_body(confirmation: WatchTimeConfirmation, warning_ratio: float) -> dict[str, Any]:
    return {
        "preview": confirmation.to_dict(),
        "countdown": preview_countdown_message(confirmation.remaining_seconds),
        "remainingDisplay": format_duration(confirmation.remaining_seconds),
        "showUpgradePrompt": should_show_upgrade_prompt(
            confirmation.watched_seconds, confirmation.ceiling_seconds, warning_ratio
        ),
    }


def _gate_preview(
    request: Request,
    video_id: str,
    user_id: str | None,
    service: AccessService,
    catalog: VideoCatalogPort,
    auditor: AccessAuditor,
    config: MessageConfig,
    context: RequestContext,
) -> JSONResponse | None:
    """Return a response when the caller is not in preview mode, else None."""
    if user_id is None:
        return unauthorized_response()
    auditor.record_authentication(user_id, str(request.url), context)

    decision = service.check(
        user_id,
        ResourceKind.VIDEO,
        video_id,
        Action.ACCESS,
        is_premium_video=catalog.is_premium(video_id),
        context=context,
        informational=True,
    )
    if needs_preview_timer(decision):
        return None
    # Full access (or an error) - there is no preview to meter
    return decision_response(
        decision,
        resource=ResourceKind.VIDEO.value,
        action=Action.ACCESS.value,
        config=config,
        extra={"preview": None},
    )


@router.post("/{video_id}/watch-time")
def report_watch_time(
    video_id: str,
    body: WatchTimeRequest,
    request: Request,
    user_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    catalog: VideoCatalogPort = Depends(get_video_catalog),
    auditor: AccessAuditor = Depends(get_auditor),
    ledger: WatchTimeLedger = Depends(get_watch_ledger),
    rules: Rules = Depends(get_rules),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> Any:
    """Record the client's watched seconds and return the confirmed totals."""
    gated = _gate_preview(
        request, video_id, user_id, service, catalog, auditor, config, context
    )
    if gated is not None:
        return gated
    assert user_id is not None

    try:
        confirmation = ledger.confirm(user_id, video_id, body.watched_seconds)
    except InvalidWatchTime as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid watch duration", "detail": e.message},
        )
    return _preview_body(confirmation, rules.preview.warning_ratio)


@router.get("/{video_id}")
def get_preview_status(
    video_id: str,
    request: Request,
    user_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    catalog: VideoCatalogPort = Depends(get_video_catalog),
    auditor: AccessAuditor = Depends(get_auditor),
    ledger: WatchTimeLedger = Depends(get_watch_ledger),
    rules: Rules = Depends(get_rules),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> Any:
    """Confirmed preview totals for the caller."""
    gated = _gate_preview(
        request, video_id, user_id, service, catalog, auditor, config, context
    )
    if gated is not None:
        return gated
    assert user_id is not None

    return _preview_body(ledger.status(user_id, video_id), rules.preview.warning_ratio)
