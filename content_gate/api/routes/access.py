"""
Access check API.

Every endpoint runs the caller through the decision engine and translates the
outcome into 200 / 401 / 403 with a display-ready message.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from content_gate.api.deps import (
    get_access_service,
    get_current_user_id,
    get_message_config,
    get_request_context,
    get_video_catalog,
    get_watch_ledger,
)
from content_gate.api.responses import decision_payload, decision_response
from content_gate.components.access import AccessRequest, AccessService, VideoCatalogPort
from content_gate.components.audit import RequestContext
from content_gate.components.messaging import MessageConfig
from content_gate.components.playback import needs_preview_timer
from content_gate.components.watchtime import WatchTimeLedger
from content_gate.domain.entities import Action, ResourceKind

router = APIRouter()


# --- Request Models ---


class BatchArticlesRequest(BaseModel):
    """Batch article check request."""

    article_ids: list[str] = Field(..., min_length=1, max_length=200)
    action: Action = Action.READ


# --- Endpoints ---


@router.get("/articles/{article_id}")
def check_article(
    article_id: str,
    action: Action = Query(Action.READ),
    user_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    """Check access to a single article."""
    decision = service.check(
        user_id, ResourceKind.ARTICLE, article_id, action, context=context
    )
    return decision_response(
        decision, resource=ResourceKind.ARTICLE.value, action=action.value, config=config
    )


@router.post("/articles/batch")
def check_articles(
    request: BatchArticlesRequest,
    user_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> dict[str, Any]:
    """
    Check many articles at once, e.g. for a listing page.

    Always 200; each entry carries its own decision and message.
    """
    items = [
        AccessRequest(kind=ResourceKind.ARTICLE, resource_id=article_id, action=request.action)
        for article_id in request.article_ids
    ]
    decisions = service.check_many(user_id, items, context=context)
    return {
        "results": {
            str(resource_id): decision_payload(decision, config)
            for resource_id, decision in decisions.items()
        }
    }


@router.get("/videos/{video_id}")
def check_video(
    video_id: str,
    user_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    catalog: VideoCatalogPort = Depends(get_video_catalog),
    ledger: WatchTimeLedger = Depends(get_watch_ledger),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    """
    Check access to a video.

    The video tier comes from the catalog, never from the request. A
    premium video denied for upgrade still carries the preview allowance
    remaining for this viewer.
    """
    decision = service.check(
        user_id,
        ResourceKind.VIDEO,
        video_id,
        Action.ACCESS,
        is_premium_video=catalog.is_premium(video_id),
        context=context,
    )
    extra = None
    if user_id is not None and needs_preview_timer(decision):
        extra = {"preview": ledger.status(user_id, video_id).to_dict()}
    return decision_response(
        decision,
        resource=ResourceKind.VIDEO.value,
        action=Action.ACCESS.value,
        config=config,
        extra=extra,
    )


@router.get("/forum")
def check_forum(
    action: Action = Query(Action.READ),
    user_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    decision = service.check(user_id, ResourceKind.FORUM, None, action, context=context)
    return decision_response(
        decision, resource=ResourceKind.FORUM.value, action=action.value, config=config
    )


@router.get("/profiles/{profile_id}")
def check_profile(
    profile_id: str,
    action: Action = Query(Action.READ),
    user_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    decision = service.check(
        user_id, ResourceKind.USER_PROFILE, profile_id, action, context=context
    )
    return decision_response(
        decision,
        resource=ResourceKind.USER_PROFILE.value,
        action=action.value,
        config=config,
    )


@router.get("/admin-panel")
def check_admin_panel(
    user_id: str | None = Depends(get_current_user_id),
    service: AccessService = Depends(get_access_service),
    config: MessageConfig = Depends(get_message_config),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    decision = service.check(
        user_id, ResourceKind.ADMIN_PANEL, None, Action.ACCESS, context=context
    )
    return decision_response(
        decision,
        resource=ResourceKind.ADMIN_PANEL.value,
        action=Action.ACCESS.value,
        config=config,
    )
