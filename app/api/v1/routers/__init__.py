"""
🧭 ReelVault • API v1 Router Aggregator
======================================

Exports the **combined `router`** and each **individual sub-router**.

Quick usage
-----------
    from app.api.v1.routers import router as v1_router
    app.include_router(v1_router, prefix="/api/v1")

Or with the factory:

    from app.api.v1.routers import build_v1_router
    app.include_router(build_v1_router(), prefix="/api/v1")

Auth lives in the child routers; this layer only composes them.
"""

from fastapi import APIRouter

from .videos import router as videos_router
from .users import router as users_router


# ─────────────────────────────────────────────────────────────────────────────
# 🧩 Factory: build a combined v1 router with stable path layout
# ─────────────────────────────────────────────────────────────────────────────
def build_v1_router() -> APIRouter:
    """
    Compose the API v1 surface into a single `APIRouter`.

    Returns
    -------
    fastapi.APIRouter
        A router that includes:
          • Video endpoints under `/videos`
          • Per-user collections under `/users`
    """
    r = APIRouter()
    r.include_router(videos_router)
    r.include_router(users_router)
    return r


# ─────────────────────────────────────────────────────────────────────────────
# 📦 Default export
# ─────────────────────────────────────────────────────────────────────────────
router = build_v1_router()


__all__ = [
    "router",
    "build_v1_router",
    "videos_router",
    "users_router",
]
