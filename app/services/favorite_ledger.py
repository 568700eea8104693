# app/services/favorite_ledger.py
from __future__ import annotations

"""
ReelVault — Favorite Ledger
===========================

Owns two facts and keeps them moving together:

1. a `(user_id, video_id)` favorite exists at most once, and
2. `videos.likes` tracks the number of favorites for that video (never < 0).

State per pair: ABSENT → FAVORITED → ABSENT.

Add
---
Inside one transaction: load the video (404 if gone, 403 if the caller may
not see it), look for an existing row (409), insert the favorite, then
`likes = likes + 1`. Two racing adds both pass the look-up but only one insert
survives the unique constraint; the loser's `IntegrityError` rolls its whole
transaction back (so no second increment) and surfaces as
`AlreadyFavoritedException`. An add racing the video's deletion fails the
foreign key (or finds no row to increment) instead, and surfaces as
`VideoNotFoundException`.

Remove
------
Inside one transaction: delete the favorite (404 when nothing was deleted),
then `likes = likes - 1 WHERE likes > 0`. If the counter already drifted to
zero the row is still removed and the counter stays at zero.

Known drift: nothing reconciles `likes` with the favorites table after the
fact; the favorites table is the source of truth for "is favorited".
"""

import logging
from typing import List, Optional, Tuple
import uuid

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import (
    AlreadyFavoritedException,
    FavoriteNotFoundException,
    VideoForbiddenException,
    VideoNotFoundException,
)
from app.db.models.favorite import Favorite
from app.db.models.video import Video
from app.services.video_service import VideoService, can_view, page_window

logger = logging.getLogger(__name__)


class FavoriteLedger:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @staticmethod
    def _pair(user_id: str, video_id: uuid.UUID):
        return (Favorite.user_id == user_id, Favorite.video_id == video_id)

    # ── Mutations ────────────────────────────────────────────
    async def add(self, user_id: str, video_id: uuid.UUID) -> Favorite:
        """Favorite a video and bump its like counter atomically."""
        try:
            async with self.session_factory.begin() as session:
                video = await VideoService.load(session, video_id)
                if not can_view(video, user_id):
                    raise VideoForbiddenException(video_id, user_id=user_id)

                existing = await session.scalar(select(Favorite.id).where(*self._pair(user_id, video_id)))
                if existing is not None:
                    raise AlreadyFavoritedException(video_id)

                favorite = Favorite(
                    user_id=user_id,
                    video_id=video_id,
                    title=video.title,
                    cover_url=video.cover_url,
                    duration=video.duration or 0.0,
                )
                session.add(favorite)
                await session.flush()

                result = await session.execute(
                    update(Video).where(Video.id == video_id).values(likes=Video.likes + 1)
                )
                if result.rowcount == 0:
                    raise VideoNotFoundException(video_id)
        except IntegrityError as exc:
            if not await self._video_exists(video_id):
                raise VideoNotFoundException(video_id) from exc
            logger.info("Concurrent favorite for user=%s video=%s lost the race", user_id, video_id)
            raise AlreadyFavoritedException(video_id) from exc
        return favorite

    async def remove(self, user_id: str, video_id: uuid.UUID) -> None:
        """Unfavorite a video; the like counter is decremented only while positive."""
        async with self.session_factory.begin() as session:
            result = await session.execute(delete(Favorite).where(*self._pair(user_id, video_id)))
            if result.rowcount == 0:
                raise FavoriteNotFoundException(video_id)

            result = await session.execute(
                update(Video)
                .where(Video.id == video_id, Video.likes > 0)
                .values(likes=Video.likes - 1)
            )
            if result.rowcount == 0:
                logger.warning("likes for video %s already at 0; counter left untouched", video_id)

    # ── Reads ────────────────────────────────────────────────
    async def is_favorite(self, user_id: Optional[str], video_id: uuid.UUID) -> bool:
        if not user_id:
            return False
        async with self.session_factory() as session:
            found = await session.scalar(select(Favorite.id).where(*self._pair(user_id, video_id)))
        return found is not None

    async def count_for_video(self, video_id: uuid.UUID) -> int:
        async with self.session_factory() as session:
            total = await session.scalar(
                select(func.count()).select_from(Favorite).where(Favorite.video_id == video_id)
            )
        return int(total or 0)

    async def list_for_user(self, user_id: str, page: int = 1, page_size: Optional[int] = None) -> Tuple[List[Favorite], int]:
        """A user's favorites, newest first."""
        limit, offset = page_window(page, page_size)
        async with self.session_factory() as session:
            total = await session.scalar(
                select(func.count()).select_from(Favorite).where(Favorite.user_id == user_id)
            )
            rows = (
                await session.execute(
                    select(Favorite)
                    .where(Favorite.user_id == user_id)
                    .order_by(Favorite.created_at.desc(), Favorite.id)
                    .offset(offset)
                    .limit(limit)
                )
            ).scalars().all()
        return list(rows), int(total or 0)


__all__ = ["FavoriteLedger"]
