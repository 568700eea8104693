# app/services/consistency.py
from __future__ import annotations

"""
ReelVault — Video deletion coordinator
======================================

`delete_video(video_id, requesting_user_id)` removes a video and everything
that references it in two explicit phases.

Phase 1 — metadata (one transaction)
    1. Load the video, re-validating existence and ownership, and capture its
       stored file names (payload, cover, thumbnail) while the row still exists.
    2. Delete favorites, watch history, comments, annotations, marks and notes
       bound to the video, then the video row itself.
    Any failure rolls the whole transaction back: the video and all dependents
    stay intact and the error propagates. No partial cascade is observable.

Phase 2 — blobs (after commit, best effort)
    Remove the captured files. Errors are logged at WARNING and swallowed; an
    orphaned file is recoverable by a sweep, whereas a dangling row pointing at
    a deleted video is not. Phase 2 never starts unless phase 1 committed.
"""

from dataclasses import dataclass, field
import logging
from typing import List, Optional
import uuid

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import VideoNotFoundException
from app.core.storage import LocalFileStorage
from app.db.models.comment import Comment
from app.db.models.favorite import Favorite
from app.db.models.mark import Annotation, Mark, Note
from app.db.models.video import Video
from app.db.models.watch_history import WatchHistory
from app.services.video_service import VideoService, require_owner

logger = logging.getLogger(__name__)


@dataclass
class DeletionReport:
    """What a committed deletion removed (blob failures included for observability)."""

    video_id: uuid.UUID
    dependents: dict = field(default_factory=dict)
    files_removed: List[str] = field(default_factory=list)
    files_failed: List[str] = field(default_factory=list)


class VideoDeletionCoordinator:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], storage: LocalFileStorage) -> None:
        self.session_factory = session_factory
        self.storage = storage

    # ── Phase 1 pieces ───────────────────────────────────────
    async def _delete_dependents(self, session: AsyncSession, video_id: uuid.UUID) -> dict:
        """Sweep every row that references the video (annotations before their marks)."""
        counts: dict = {}
        counts["favorites"] = (await session.execute(delete(Favorite).where(Favorite.video_id == video_id))).rowcount
        counts["watch_history"] = (
            await session.execute(delete(WatchHistory).where(WatchHistory.video_id == video_id))
        ).rowcount
        counts["comments"] = (await session.execute(delete(Comment).where(Comment.video_id == video_id))).rowcount

        mark_ids = select(Mark.id).where(Mark.video_id == video_id)
        counts["annotations"] = (
            await session.execute(
                delete(Annotation).where(or_(Annotation.video_id == video_id, Annotation.mark_id.in_(mark_ids)))
            )
        ).rowcount
        counts["marks"] = (await session.execute(delete(Mark).where(Mark.video_id == video_id))).rowcount
        counts["notes"] = (await session.execute(delete(Note).where(Note.video_id == video_id))).rowcount
        return counts

    async def _delete_video_row(self, session: AsyncSession, video_id: uuid.UUID) -> None:
        result = await session.execute(delete(Video).where(Video.id == video_id))
        if result.rowcount == 0:
            raise VideoNotFoundException(video_id)

    def _stored_names(self, video: Video) -> List[str]:
        names: List[Optional[str]] = [
            video.file_name,
            self.storage.name_from_url(video.cover_url),
            self.storage.name_from_url(video.thumbnail_url),
        ]
        return [n for n in dict.fromkeys(names) if n]

    # ── Phase 2 ──────────────────────────────────────────────
    async def _remove_files(self, report: DeletionReport, names: List[str]) -> None:
        for name in names:
            try:
                await run_in_threadpool(self.storage.delete, name)
            except (OSError, ValueError) as exc:
                report.files_failed.append(name)
                logger.warning(
                    "Video %s deleted but file %s could not be removed: %s",
                    report.video_id, name, exc,
                )
            else:
                report.files_removed.append(name)

    # ── Public API ───────────────────────────────────────────
    async def delete_video(self, video_id: uuid.UUID, requesting_user_id: str) -> DeletionReport:
        """Delete the video and its dependents atomically, then clean up blobs."""
        async with self.session_factory.begin() as session:
            video = await VideoService.load(session, video_id, for_update=True)
            require_owner(video, requesting_user_id)
            names = self._stored_names(video)

            dependents = await self._delete_dependents(session, video_id)
            await self._delete_video_row(session, video_id)

        report = DeletionReport(video_id=video_id, dependents=dependents)
        logger.info("Video %s deleted by %s (dependents=%s)", video_id, requesting_user_id, dependents)

        await self._remove_files(report, names)
        return report


__all__ = ["VideoDeletionCoordinator", "DeletionReport"]
