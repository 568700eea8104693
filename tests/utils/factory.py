# tests/utils/factory.py

import io
import uuid
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.storage import LocalFileStorage
from app.db.models import Annotation, Comment, Favorite, Mark, Note, Video, WatchHistory
from app.schemas.enums import VideoStatus

PAYLOAD = bytes(range(256)) * 4  # 1024 deterministic bytes


async def create_video(
    session_factory: async_sessionmaker[AsyncSession],
    storage: LocalFileStorage,
    *,
    owner_id: str = "owner-1",
    status: VideoStatus = VideoStatus.PUBLIC,
    title: str = "Sample clip",
    payload: Optional[bytes] = PAYLOAD,
    fmt: str = "mp4",
    likes: int = 0,
    duration: float = 42.0,
    cover: Optional[bytes] = None,
    **kwargs,
) -> Video:
    """
    ✅ Insert a video row and (unless `payload is None`) its backing file.

    Args:
        payload: bytes written to storage; `None` leaves the row without a file.
        cover: optional cover bytes, stored as `cover_<hex>.jpg`.

    Returns:
        Video: the committed row (detached, attributes loaded).
    """
    video_id = uuid.uuid4()
    file_name = f"{video_id.hex}.{fmt}"
    if payload is not None:
        storage.save(file_name, io.BytesIO(payload))

    cover_url = None
    if cover is not None:
        cover_name = f"cover_{video_id.hex}.jpg"
        storage.save(cover_name, io.BytesIO(cover))
        cover_url = storage.url_for(cover_name)

    video = Video(
        id=video_id,
        owner_id=owner_id,
        title=title,
        description=kwargs.pop("description", "A test video"),
        tags=kwargs.pop("tags", ["test"]),
        status=status,
        file_name=file_name,
        file_size=len(payload or b""),
        duration=duration,
        format=fmt,
        cover_url=cover_url,
        likes=likes,
        **kwargs,
    )
    async with session_factory.begin() as session:
        session.add(video)
    return video


async def add_dependents(
    session_factory: async_sessionmaker[AsyncSession],
    video_id: uuid.UUID,
    *,
    user_id: str = "viewer-1",
) -> None:
    """Attach one row of every dependent kind to a video."""
    async with session_factory.begin() as session:
        session.add(Favorite(user_id=user_id, video_id=video_id, title="Sample clip"))
        session.add(WatchHistory(user_id=user_id, video_id=video_id, title="Sample clip", progress=3.0))
        session.add(Comment(user_id=user_id, video_id=video_id, content="nice"))
        mark = Mark(id=uuid.uuid4(), user_id=user_id, video_id=video_id, timestamp=1.5, content="here")
        session.add(mark)
        await session.flush()
        session.add(Annotation(user_id=user_id, mark_id=mark.id, video_id=video_id, content="look"))
        session.add(Note(user_id=user_id, video_id=video_id, timestamp=2.0, content="remember"))


async def fetch_video(session_factory: async_sessionmaker[AsyncSession], video_id: uuid.UUID) -> Optional[Video]:
    """Read a fresh copy of a video row (new session, no identity-map reuse)."""
    async with session_factory() as session:
        return await session.get(Video, video_id)


async def dependent_counts(session_factory: async_sessionmaker[AsyncSession], video_id: uuid.UUID) -> Dict[str, int]:
    models = {
        "favorites": Favorite,
        "watch_history": WatchHistory,
        "comments": Comment,
        "marks": Mark,
        "annotations": Annotation,
        "notes": Note,
    }
    counts: Dict[str, int] = {}
    async with session_factory() as session:
        for key, model in models.items():
            counts[key] = await session.scalar(
                select(func.count()).select_from(model).where(model.video_id == video_id)
            )
    return counts
