# app/services/watch_history_service.py
from __future__ import annotations

"""
ReelVault — Watch history
=========================

Last-write-wins upsert keyed by `(user_id, video_id)`. Each watch event
refreshes the denormalized title/cover/duration, `progress` (explicit value
or the full duration) and `watched_at`.
"""

import logging
from typing import List, Optional, Tuple
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import VideoForbiddenException
from app.db.base_class import utcnow
from app.db.models.watch_history import WatchHistory
from app.services.video_service import VideoService, can_view, page_window

logger = logging.getLogger(__name__)


class WatchHistoryService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def _upsert(self, user_id: str, video_id: uuid.UUID, progress: Optional[float]) -> WatchHistory:
        async with self.session_factory.begin() as session:
            video = await VideoService.load(session, video_id)
            if not can_view(video, user_id):
                raise VideoForbiddenException(video_id, user_id=user_id)

            entry = await session.scalar(
                select(WatchHistory).where(
                    WatchHistory.user_id == user_id,
                    WatchHistory.video_id == video_id,
                )
            )
            if entry is None:
                entry = WatchHistory(user_id=user_id, video_id=video_id)
                session.add(entry)

            entry.title = video.title
            entry.cover_url = video.cover_url
            entry.duration = video.duration or 0.0
            entry.progress = progress if progress is not None else (video.duration or 0.0)
            entry.watched_at = utcnow()
        return entry

    async def record(self, user_id: str, video_id: uuid.UUID, progress: Optional[float] = None) -> WatchHistory:
        try:
            return await self._upsert(user_id, video_id, progress)
        except IntegrityError:
            # A concurrent first watch inserted the row; the retry takes the update path.
            logger.info("Watch history insert raced for user=%s video=%s; retrying", user_id, video_id)
            return await self._upsert(user_id, video_id, progress)

    async def list_for_user(
        self, user_id: str, page: int = 1, page_size: Optional[int] = None
    ) -> Tuple[List[WatchHistory], int]:
        """A user's history, most recently watched first."""
        limit, offset = page_window(page, page_size)
        async with self.session_factory() as session:
            total = await session.scalar(
                select(func.count()).select_from(WatchHistory).where(WatchHistory.user_id == user_id)
            )
            rows = (
                await session.execute(
                    select(WatchHistory)
                    .where(WatchHistory.user_id == user_id)
                    .order_by(WatchHistory.watched_at.desc(), WatchHistory.id)
                    .offset(offset)
                    .limit(limit)
                )
            ).scalars().all()
        return list(rows), int(total or 0)


__all__ = ["WatchHistoryService"]
