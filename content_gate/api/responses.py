"""
Translate access decisions into HTTP responses.

- allowed: 200 with the decision
- login required: 401 {"error": "Authentication required"}
- role lookup failed: 503 {"error": "Failed to verify user permissions"}
- any other denial: 403 {"error": "Insufficient permissions", "required": {...}}
"""

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from content_gate.components.access import REASON_ROLE_FAILURE
from content_gate.components.messaging import MessageConfig, format_access_message
from content_gate.domain.entities import AccessDecision, RequiredAction


def decision_payload(decision: AccessDecision, config: MessageConfig) -> dict[str, Any]:
    return {
        "decision": decision.to_dict(),
        "message": format_access_message(decision, config).to_dict(),
    }


def unauthorized_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": "Authentication required"},
        headers={"WWW-Authenticate": "Bearer"},
    )


def decision_response(
    decision: AccessDecision,
    *,
    resource: str,
    action: str,
    config: MessageConfig,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    body = decision_payload(decision, config)
    if extra:
        body.update(extra)

    if decision.allowed:
        return JSONResponse(status_code=status.HTTP_200_OK, content=body)

    if decision.required_action is RequiredAction.LOGIN:
        body["error"] = "Authentication required"
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=body,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if decision.reason == REASON_ROLE_FAILURE:
        body["error"] = REASON_ROLE_FAILURE
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)

    body["error"] = "Insufficient permissions"
    body["required"] = {"resource": resource, "action": action}
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=body)
