import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Header, Request

from content_gate.adapters.audit_sink import InMemoryAuditSink
from content_gate.adapters.clock import SystemClock
from content_gate.adapters.role_resolver import RequestScopedRoleResolver, StaticRoleResolver
from content_gate.adapters.video_catalog import StaticVideoCatalog
from content_gate.adapters.watch_ledger import InMemoryWatchLedgerRepo
from content_gate.components.access import AccessService
from content_gate.components.audit import AccessAuditor, AuditConfig, RequestContext
from content_gate.components.messaging import MessageConfig
from content_gate.components.watchtime import WatchTimeLedger
from content_gate.rules.loader import load_rules
from content_gate.rules.models import Rules

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(
            os.environ.get("CONTENT_GATE_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Process-wide adapters ---
@lru_cache
def get_role_resolver() -> StaticRoleResolver:
    return StaticRoleResolver()


@lru_cache
def get_audit_sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@lru_cache
def get_watch_repo() -> InMemoryWatchLedgerRepo:
    return InMemoryWatchLedgerRepo()


@lru_cache
def get_clock() -> SystemClock:
    return SystemClock()


# --- Per-request services ---
def get_auditor(
    sink: InMemoryAuditSink = Depends(get_audit_sink),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> AccessAuditor:
    config = AuditConfig(
        enabled=rules.audit.enabled,
        log_informational=rules.audit.log_informational,
    )
    return AccessAuditor(sink=sink, time_port=clock, config=config)


def get_access_service(
    resolver: StaticRoleResolver = Depends(get_role_resolver),
    auditor: AccessAuditor = Depends(get_auditor),
) -> AccessService:
    """One service per request, so role lookups are memoized per request."""
    return AccessService(resolver=RequestScopedRoleResolver(resolver), auditor=auditor)


def get_video_catalog(rules: Rules = Depends(get_rules)) -> StaticVideoCatalog:
    return StaticVideoCatalog.from_rules(rules.videos)


def get_watch_ledger(
    repo: InMemoryWatchLedgerRepo = Depends(get_watch_repo),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> WatchTimeLedger:
    return WatchTimeLedger(repo=repo, ceiling_seconds=rules.preview.ceiling_seconds, time_port=clock)


def get_message_config(rules: Rules = Depends(get_rules)) -> MessageConfig:
    return MessageConfig(
        login_link=rules.messages.login_link,
        upgrade_link=rules.messages.upgrade_link,
    )


# --- Request identity ---
def get_request_context(request: Request) -> RequestContext:
    forwarded = request.headers.get("x-forwarded-for")
    ip = (
        forwarded.split(",")[0].strip()
        if forwarded
        else request.headers.get("x-real-ip")
        or (request.client.host if request.client else "unknown")
    )
    return RequestContext(
        ip_address=ip,
        user_agent=request.headers.get("user-agent", "unknown"),
        request_id=request.headers.get("x-request-id"),
    )


def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str | None:
    """
    Identity of the already-authenticated caller.

    Token verification happens upstream; an absent header means anonymous.
    """
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()
