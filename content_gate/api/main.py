import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from content_gate.api.deps import get_settings
from content_gate.rules.loader import load_rules

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
    except (FileNotFoundError, ValueError):
        logger.critical("Rules load failed from %s", settings.rules_path, exc_info=True)
        raise
    logger.info(
        "Rules loaded from %s (preview ceiling %ds)",
        settings.rules_path,
        rules.preview.ceiling_seconds,
    )

    yield


app = FastAPI(
    title="Content Gate API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from content_gate.api.routes import access, admin_audit, preview  # noqa: E402

app.include_router(access.router, prefix="/api/access", tags=["Access"])
app.include_router(preview.router, prefix="/api/preview", tags=["Preview"])
app.include_router(admin_audit.router, prefix="/api/admin/audit", tags=["Admin Audit"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "content-gate"}
