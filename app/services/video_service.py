# app/services/video_service.py
from __future__ import annotations

"""
ReelVault — Video records (upload, read, edit, list, thumbnail, stats)
======================================================================

Single-row operations on `videos` plus the blob handling around them.
Nothing here spans more than one table; cross-table work lives in the
favorite ledger and the deletion coordinator.

Conventions
-----------
- One transaction per operation via `session_factory.begin()`.
- Blobs are written *before* the row is inserted/updated; if the database
  write fails the freshly written blobs are removed again.
- Blocking file I/O runs in the threadpool (`run_in_threadpool`).
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import uuid

from fastapi import UploadFile
from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import (
    ImageNotFoundException,
    InvalidInputException,
    VideoForbiddenException,
    VideoNotFoundException,
)
from app.core.storage import LocalFileStorage
from app.db.base_class import utcnow
from app.db.models.video import Video
from app.schemas.enums import SortOrder, VideoSortField, VideoStatus
from app.schemas.video import VideoCreate, VideoUpdate

logger = logging.getLogger(__name__)

STAT_FIELDS = ("views", "likes", "comments", "shares")

_SORT_COLUMNS = {
    VideoSortField.CREATED_AT: Video.created_at,
    VideoSortField.VIEWS: Video.views,
    VideoSortField.LIKES: Video.likes,
    VideoSortField.FILE_SIZE: Video.file_size,
}


# ─────────────────────────────────────────────────────────────
# 🧩 Helpers
# ─────────────────────────────────────────────────────────────
def parse_video_id(raw: Any) -> uuid.UUID:
    """Parse an opaque video identifier; malformed ids are `InvalidInput` (400)."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw).strip())
    except (TypeError, ValueError):
        raise InvalidInputException("Invalid video id", details={"video_id": str(raw)})


def parse_status(raw: Optional[str], *, default: Optional[VideoStatus] = None) -> Optional[VideoStatus]:
    """Validate a status against the closed set `{draft, private, public}`."""
    if raw is None or not str(raw).strip():
        return default
    parsed = VideoStatus.parse(raw)
    if parsed is None:
        raise InvalidInputException(
            "Invalid video status",
            details={"status": raw, "allowed": [s.value for s in VideoStatus]},
        )
    return parsed


def require_owner(video: Video, user_id: str) -> None:
    if video.owner_id != user_id:
        raise VideoForbiddenException(video.id, user_id=user_id)


def can_view(video: Video, viewer_id: Optional[str]) -> bool:
    """Public videos are visible to anyone; others only to their owner."""
    return video.status == VideoStatus.PUBLIC or (viewer_id is not None and viewer_id == video.owner_id)


def _extension(filename: Optional[str]) -> str:
    return os.path.splitext(filename or "")[1].lower()


def page_window(page: int = 1, page_size: Optional[int] = None) -> Tuple[int, int]:
    """Return `(limit, offset)` with the page size clamped to `MAX_PAGE_SIZE`."""
    limit = max(1, min(page_size or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE))
    return limit, (max(page, 1) - 1) * limit


@dataclass
class VideoListQuery:
    """Filters/sort/paging for list endpoints."""

    owner_id: Optional[str] = None
    public_only: bool = False
    status: Optional[VideoStatus] = None
    keyword: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort_by: VideoSortField = VideoSortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    page: int = 1
    page_size: Optional[int] = None

    @property
    def window(self) -> Tuple[int, int]:
        return page_window(self.page, self.page_size)


# ─────────────────────────────────────────────────────────────
# 🎬 Service
# ─────────────────────────────────────────────────────────────
class VideoService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], storage: LocalFileStorage) -> None:
        self.session_factory = session_factory
        self.storage = storage

    # ── Reads ────────────────────────────────────────────────
    @staticmethod
    async def load(session: AsyncSession, video_id: uuid.UUID, *, for_update: bool = False) -> Video:
        stmt = select(Video).where(Video.id == video_id)
        if for_update:
            stmt = stmt.with_for_update()
        video = (await session.execute(stmt)).scalar_one_or_none()
        if video is None:
            raise VideoNotFoundException(video_id)
        return video

    async def get_video(self, video_id: uuid.UUID) -> Video:
        async with self.session_factory() as session:
            return await self.load(session, video_id)

    async def get_visible_video(self, video_id: uuid.UUID, viewer_id: Optional[str]) -> Video:
        """Fetch a video the viewer is allowed to see (403 for someone else's private video)."""
        video = await self.get_video(video_id)
        if not can_view(video, viewer_id):
            raise VideoForbiddenException(video_id, user_id=viewer_id)
        return video

    async def get_image(self, name: str, viewer_id: Optional[str]) -> Tuple[Video, Path]:
        """Resolve a published cover/thumbnail name under its video's visibility.

        Only names a video currently references as `cover_url` or
        `thumbnail_url` resolve; payloads and replaced thumbnails are 404.
        """
        try:
            path = self.storage.path_for(name)
        except ValueError:
            raise ImageNotFoundException(name)

        url = self.storage.url_for(name)
        async with self.session_factory() as session:
            video = await session.scalar(
                select(Video).where(or_(Video.cover_url == url, Video.thumbnail_url == url)).limit(1)
            )
        if video is None:
            raise ImageNotFoundException(name)
        if not can_view(video, viewer_id):
            raise VideoForbiddenException(video.id, user_id=viewer_id)
        if not await run_in_threadpool(path.is_file):
            logger.warning("Image %s of video %s is missing on disk", name, video.id)
            raise ImageNotFoundException(name)
        return video, path

    async def get_stats(self, video_id: uuid.UUID, viewer_id: Optional[str] = None) -> Dict[str, int]:
        video = await self.get_visible_video(video_id, viewer_id)
        return video.stats

    async def list_videos(self, query: VideoListQuery) -> Tuple[List[Video], int]:
        stmt: Select = select(Video)
        if query.owner_id is not None:
            stmt = stmt.where(Video.owner_id == query.owner_id)
        if query.public_only:
            stmt = stmt.where(Video.status == VideoStatus.PUBLIC)
        elif query.status is not None:
            stmt = stmt.where(Video.status == query.status)
        if query.keyword:
            kw = query.keyword.strip()
            stmt = stmt.where(
                or_(
                    Video.title.icontains(kw, autoescape=True),
                    Video.description.icontains(kw, autoescape=True),
                )
            )
        if query.start_date is not None:
            stmt = stmt.where(Video.created_at >= datetime.combine(query.start_date, time.min, tzinfo=timezone.utc))
        if query.end_date is not None:
            end = datetime.combine(query.end_date, time.min, tzinfo=timezone.utc) + timedelta(days=1)
            stmt = stmt.where(Video.created_at < end)

        column = _SORT_COLUMNS[VideoSortField(query.sort_by)]
        ordering = column.asc() if SortOrder(query.sort_order) == SortOrder.ASC else column.desc()

        limit, offset = query.window
        async with self.session_factory() as session:
            total = (await session.execute(select(func.count()).select_from(stmt.subquery()))).scalar_one()
            rows = (
                await session.execute(stmt.order_by(ordering, Video.id).offset(offset).limit(limit))
            ).scalars().all()
        return list(rows), int(total)

    # ── Blob helpers ─────────────────────────────────────────
    @staticmethod
    def _too_large(upload: UploadFile, max_bytes: int) -> InvalidInputException:
        return InvalidInputException(
            "File too large",
            details={"file": upload.filename, "max_bytes": max_bytes},
        )

    def _check_declared_size(self, upload: UploadFile, max_bytes: int) -> None:
        """Reject on the parsed upload size, before anything is written."""
        if upload.size is not None and upload.size > max_bytes:
            raise self._too_large(upload, max_bytes)

    async def _store(self, name: str, upload: UploadFile, *, max_bytes: int) -> int:
        self._check_declared_size(upload, max_bytes)
        written = await run_in_threadpool(self.storage.save, name, upload.file)
        if written > max_bytes:
            await self._discard(name)
            raise self._too_large(upload, max_bytes)
        return written

    async def _discard(self, *names: Optional[str]) -> None:
        for name in names:
            if not name:
                continue
            try:
                await run_in_threadpool(self.storage.delete, name)
            except OSError as exc:
                logger.warning("Could not remove stored file %s: %s", name, exc)

    def _check_image(self, upload: UploadFile) -> str:
        ext = _extension(upload.filename)
        if ext not in settings.ALLOWED_IMAGE_EXTENSIONS:
            raise InvalidInputException(
                "Unsupported image format",
                details={"allowed": settings.ALLOWED_IMAGE_EXTENSIONS},
            )
        if upload.size is not None and upload.size > settings.MAX_IMAGE_SIZE:
            raise InvalidInputException("Image must not exceed 2MB", details={"max_bytes": settings.MAX_IMAGE_SIZE})
        return ext

    # ── Writes ───────────────────────────────────────────────
    async def upload(
        self,
        owner_id: str,
        payload: VideoCreate,
        file: UploadFile,
        cover: Optional[UploadFile] = None,
    ) -> Video:
        """Store the payload (and optional cover) and insert the video row."""
        ext = _extension(file.filename)
        if ext not in settings.ALLOWED_VIDEO_EXTENSIONS:
            raise InvalidInputException(
                "Unsupported video format",
                details={"allowed": settings.ALLOWED_VIDEO_EXTENSIONS},
            )
        self._check_declared_size(file, settings.MAX_VIDEO_SIZE)
        status = parse_status(payload.status, default=VideoStatus.PRIVATE)
        cover_ext = self._check_image(cover) if cover is not None else None

        video_id = uuid.uuid4()
        file_name = f"{video_id.hex}{ext}"
        cover_name = f"cover_{video_id.hex}{cover_ext}" if cover_ext else None

        if cover_name:
            await self._store(cover_name, cover, max_bytes=settings.MAX_IMAGE_SIZE)
        try:
            size = await self._store(file_name, file, max_bytes=settings.MAX_VIDEO_SIZE)
        except Exception:
            await self._discard(cover_name)
            raise

        video = Video(
            id=video_id,
            owner_id=owner_id,
            title=payload.title,
            description=payload.description,
            tags=list(payload.tags),
            status=status,
            file_name=file_name,
            file_size=size,
            duration=payload.duration,
            format=ext.lstrip("."),
            cover_url=self.storage.url_for(cover_name) if cover_name else None,
        )
        try:
            async with self.session_factory.begin() as session:
                session.add(video)
        except Exception:
            await self._discard(file_name, cover_name)
            raise

        logger.info("Video %s uploaded by %s (%d bytes)", video_id, owner_id, size)
        return video

    async def update(self, video_id: uuid.UUID, user_id: str, payload: VideoUpdate) -> Video:
        """Apply non-empty fields; owner only."""
        status = parse_status(payload.status)
        async with self.session_factory.begin() as session:
            video = await self.load(session, video_id)
            require_owner(video, user_id)
            if payload.title:
                video.title = payload.title
            if payload.description:
                video.description = payload.description
            if status is not None:
                video.status = status
            if payload.tags:
                video.tags = list(payload.tags)
            video.updated_at = utcnow()
        return video

    async def set_status(self, session: AsyncSession, video_id: uuid.UUID, status: VideoStatus) -> None:
        """Single-row status update inside the caller's transaction."""
        result = await session.execute(
            update(Video).where(Video.id == video_id).values(status=status, updated_at=utcnow())
        )
        if result.rowcount == 0:
            raise VideoNotFoundException(video_id)

    async def update_thumbnail(self, video_id: uuid.UUID, user_id: str, image: UploadFile) -> str:
        ext = self._check_image(image)
        video = await self.get_video(video_id)
        require_owner(video, user_id)

        name = f"thumb_{uuid.uuid4().hex}{ext}"
        await self._store(name, image, max_bytes=settings.MAX_IMAGE_SIZE)
        url = self.storage.url_for(name)
        try:
            async with self.session_factory.begin() as session:
                result = await session.execute(
                    update(Video).where(Video.id == video_id).values(thumbnail_url=url, updated_at=utcnow())
                )
                if result.rowcount == 0:
                    raise VideoNotFoundException(video_id)
        except Exception:
            await self._discard(name)
            raise

        previous = self.storage.name_from_url(video.thumbnail_url)
        if previous and previous != name:
            await self._discard(previous)
        return url

    async def increment_stat(self, video_id: uuid.UUID, stat: str = "views", amount: int = 1) -> None:
        """`$inc`-style counter bump (used by the background dispatcher for views)."""
        if stat not in STAT_FIELDS:
            raise ValueError(f"unknown stat field: {stat}")
        column = getattr(Video, stat)
        async with self.session_factory.begin() as session:
            await session.execute(update(Video).where(Video.id == video_id).values({column: column + amount}))


__all__ = [
    "VideoService",
    "VideoListQuery",
    "parse_video_id",
    "parse_status",
    "require_owner",
    "can_view",
    "STAT_FIELDS",
    "page_window",
]
