# app/main.py
from __future__ import annotations

"""
# ReelVault API — Application Entrypoint (FastAPI)

ASGI application factory and lifecycle for the ReelVault video-asset backend.

## Design Goals
- Deterministic, testable **app factory** (`create_app`) with explicit lifespan.
- Explicit **middleware order**: 1) request id → 2) CORS → 3) gzip
  (bypassed for byte streams and published images).
- Centralized problem+json exception handling.
- Covers/thumbnails served under `UPLOAD_URL_PREFIX` with the owning video's
  visibility; video payloads are reachable through `/videos/{id}/stream` only.

## Probes
- `/healthz` — liveness (process up).
- `/readyz` — readiness (quick DB check).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

# -- Logging bootstrap (Loguru + stdlib intercept) ----------------------------
from app.core import logger as _logsetup  # noqa: F401

from app.api.uploads import router as uploads_router
from app.api.v1.routers import router as api_v1_router
from app.core.config import settings
from app.core.exception_handlers import install_exception_handlers
from app.db.session import db_healthcheck, dispose_engine
from app.middleware.compression import MediaAwareGZipMiddleware
from app.middleware.request_id import RequestIDMiddleware
from app.services.background import get_dispatcher

logger = logging.getLogger("app")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifecycle manager.

    Startup:
        - Log a startup banner.

    Shutdown:
        - Wait for in-flight background work (view counters).
        - Dispose the DB async engine.
    """
    logger.info("✅ %s starting up", settings.PROJECT_NAME)
    try:
        yield
    finally:
        await get_dispatcher().drain()
        await dispose_engine()
        logger.info("🛑 %s shutting down", settings.PROJECT_NAME)


def configure_cors(app: FastAPI) -> None:
    """Install CORS from `BACKEND_CORS_ORIGINS`."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.BACKEND_CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "Range", "X-Request-ID"],
        expose_headers=[
            "Accept-Ranges",
            "Content-Length",
            "Content-Range",
            "Link",
            "X-Request-ID",
            "X-Total-Count",
        ],
        max_age=3600,
    )


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """
    Build and configure the FastAPI app instance.

    Returns:
        FastAPI: fully wired application with middleware, exception handlers,
        routers, image delivery and health/readiness endpoints.
    """
    enable_docs = settings.ENABLE_DOCS
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs" if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
        openapi_url="/openapi.json" if enable_docs else None,
        lifespan=lifespan,
    )

    # ── Middlewares (added innermost first) ────────────────────────────────
    app.add_middleware(
        MediaAwareGZipMiddleware,
        minimum_size=1024,
        skip_prefixes=(settings.UPLOAD_URL_PREFIX,),
    )
    configure_cors(app)
    app.add_middleware(RequestIDMiddleware)

    install_exception_handlers(app)

    # ── Routers (versioned API) ─────────────────────────────────────────────
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    # ── Published images (covers, thumbnails) ──────────────────────────────
    app.include_router(uploads_router, prefix=settings.UPLOAD_URL_PREFIX)

    # ── Meta endpoints ──────────────────────────────────────────────────────
    @app.get("/healthz", tags=["meta"])
    async def healthz() -> dict[str, bool]:
        """Liveness probe. No external checks."""
        return {"ok": True}

    @app.get("/readyz", tags=["meta"])
    async def readyz() -> JSONResponse:
        """Readiness probe (`SELECT 1` against the database)."""
        db_ok = await db_healthcheck()
        return JSONResponse(
            {"ready": db_ok, "checks": {"db": db_ok}},
            status_code=200 if db_ok else 503,
        )

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Minimal root that points to docs (when enabled)."""
        return JSONResponse(
            {
                "name": settings.PROJECT_NAME,
                "docs": app.docs_url or "",
                "version": settings.VERSION,
            }
        )

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn/Gunicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app"]


# Local dev runner (prefer: `uvicorn app.main:app --reload`)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
        workers=int(os.getenv("WORKERS", "1")),
        log_level=settings.LOG_LEVEL.lower(),
    )
