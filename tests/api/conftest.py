from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from content_gate.adapters.audit_sink import InMemoryAuditSink
from content_gate.adapters.role_resolver import StaticRoleResolver
from content_gate.adapters.video_catalog import StaticVideoCatalog
from content_gate.adapters.watch_ledger import InMemoryWatchLedgerRepo
from content_gate.api import deps
from content_gate.api.routes import access, admin_audit, preview
from content_gate.rules.models import Rules

USERS = {
    "u-free": ["free_user"],
    "u-premium": ["premium_user"],
    "u-admin": ["admin"],
}

PREMIUM_VIDEOS = ["v1", "v2"]


@pytest.fixture
def resolver() -> StaticRoleResolver:
    return StaticRoleResolver.from_mapping(USERS)


@pytest.fixture
def sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture
def catalog() -> StaticVideoCatalog:
    return StaticVideoCatalog.from_ids(PREMIUM_VIDEOS)


@pytest.fixture
def watch_repo() -> InMemoryWatchLedgerRepo:
    return InMemoryWatchLedgerRepo()


@pytest.fixture
def app(
    rules: Rules,
    resolver: StaticRoleResolver,
    sink: InMemoryAuditSink,
    watch_repo: InMemoryWatchLedgerRepo,
    catalog: StaticVideoCatalog,
) -> FastAPI:
    """Test FastAPI app with in-memory adapters."""
    app = FastAPI()
    app.include_router(access.router, prefix="/api/access")
    app.include_router(preview.router, prefix="/api/preview")
    app.include_router(admin_audit.router, prefix="/api/admin/audit")

    app.dependency_overrides[deps.get_rules] = lambda: rules
    app.dependency_overrides[deps.get_role_resolver] = lambda: resolver
    app.dependency_overrides[deps.get_audit_sink] = lambda: sink
    app.dependency_overrides[deps.get_watch_repo] = lambda: watch_repo
    app.dependency_overrides[deps.get_video_catalog] = lambda: catalog

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)