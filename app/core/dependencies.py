# app/core/dependencies.py
from __future__ import annotations

"""
Request dependencies — ReelVault
================================

Two families of FastAPI dependencies:

Identity
--------
The authenticated identity is a plain string user id (the JWT `sub`). Token
parsing and verification live in `app.core.jwt`; this module only *uses*
them.

- `get_current_user_id`   → 401 without a valid Bearer token
- `get_optional_user_id`  → `None` when no Authorization header is sent
                            (a *bad* token is still a 401)

Services
--------
Each service is built per request from injected collaborators:
`get_session_factory` (DB), `get_storage` (blobs) and `get_dispatcher`
(background work). Tests override those three and get a fully isolated
service graph.
"""

from typing import Optional
import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.jwt import decode_token, get_bearer_token, get_optional_bearer_token
from app.core.storage import LocalFileStorage, get_storage
from app.db.session import get_session_factory
from app.services.background import TaskDispatcher, get_dispatcher
from app.services.batch_executor import BatchExecutor
from app.services.consistency import VideoDeletionCoordinator
from app.services.content_streamer import ContentStreamer
from app.services.favorite_ledger import FavoriteLedger
from app.services.video_service import VideoService
from app.services.watch_history_service import WatchHistoryService

logger = logging.getLogger(__name__)

__all__ = [
    "get_current_user_id",
    "get_optional_user_id",
    "get_video_service",
    "get_favorite_ledger",
    "get_watch_history_service",
    "get_deletion_coordinator",
    "get_batch_executor",
    "get_content_streamer",
]


# ──────────────────────────────────────────────────────────────
# 🔐 Identity
# ──────────────────────────────────────────────────────────────
def _subject(payload: dict) -> str:
    return str(payload.get("sub") or payload.get("user_id"))


def get_current_user_id(request: Request) -> str:
    """Verified user id from the Bearer token (401 otherwise)."""
    payload = decode_token(get_bearer_token(request))
    return _subject(payload)


def get_optional_user_id(request: Request) -> Optional[str]:
    """Verified user id, or `None` for anonymous callers."""
    token = get_optional_bearer_token(request)
    if token is None:
        return None
    return _subject(decode_token(token))


# ──────────────────────────────────────────────────────────────
# 🧰 Service providers
# ──────────────────────────────────────────────────────────────
SessionFactory = async_sessionmaker[AsyncSession]


def get_video_service(
    session_factory: SessionFactory = Depends(get_session_factory),
    storage: LocalFileStorage = Depends(get_storage),
) -> VideoService:
    return VideoService(session_factory, storage)


def get_favorite_ledger(session_factory: SessionFactory = Depends(get_session_factory)) -> FavoriteLedger:
    return FavoriteLedger(session_factory)


def get_watch_history_service(
    session_factory: SessionFactory = Depends(get_session_factory),
) -> WatchHistoryService:
    return WatchHistoryService(session_factory)


def get_deletion_coordinator(
    session_factory: SessionFactory = Depends(get_session_factory),
    storage: LocalFileStorage = Depends(get_storage),
) -> VideoDeletionCoordinator:
    return VideoDeletionCoordinator(session_factory, storage)


def get_batch_executor(
    session_factory: SessionFactory = Depends(get_session_factory),
    videos: VideoService = Depends(get_video_service),
    coordinator: VideoDeletionCoordinator = Depends(get_deletion_coordinator),
) -> BatchExecutor:
    return BatchExecutor(session_factory, videos, coordinator)


def get_content_streamer(
    storage: LocalFileStorage = Depends(get_storage),
    videos: VideoService = Depends(get_video_service),
    dispatcher: TaskDispatcher = Depends(get_dispatcher),
) -> ContentStreamer:
    return ContentStreamer(storage, videos, dispatcher)
