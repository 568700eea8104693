# app/services/content_streamer.py
from __future__ import annotations

"""
ReelVault — Content streamer
============================

Turns a video row plus an optional `Range` header into a streaming response.

Flow
----
1. Open the backing file and read its size. Failure here means the record
   exists but its payload does not: `PayloadMissingException` (404, distinct
   from "video not found").
2. Resolve the range (`range_resolver`). Rejections surface as 416 before a
   single byte is sent; the file handle is closed.
3. Build the response:
   - no range → 200, `Content-Length: N`, whole body
   - range    → 206, `Content-Range: bytes s-e/N`, `Content-Length: e-s+1`,
                 exactly that many bytes starting at `s`
   - always `Accept-Ranges: bytes` and `Content-Type: video/<format>`
4. Dispatch a fire-and-forget `views += 1`. It is not awaited; its failure is
   logged by the dispatcher and never affects the stream.

Reads happen in `STREAM_CHUNK_SIZE` pieces from a sync generator, which
Starlette iterates in its threadpool.
"""

from dataclasses import dataclass
import logging
import os
from typing import BinaryIO, Dict, Iterator, Optional

from fastapi import status
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import PayloadMissingException
from app.core.storage import LocalFileStorage
from app.db.models.video import Video
from app.services.background import TaskDispatcher
from app.services.range_resolver import ByteRange, resolve_range
from app.services.video_service import VideoService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamPlan:
    """Everything decided before the first byte goes out."""

    size: int
    byte_range: Optional[ByteRange]
    media_type: str

    @property
    def status_code(self) -> int:
        return status.HTTP_206_PARTIAL_CONTENT if self.byte_range else status.HTTP_200_OK

    @property
    def offset(self) -> int:
        return self.byte_range.start if self.byte_range else 0

    @property
    def length(self) -> int:
        return self.byte_range.length if self.byte_range else self.size

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Accept-Ranges": "bytes", "Content-Length": str(self.length)}
        if self.byte_range:
            headers["Content-Range"] = self.byte_range.content_range(self.size)
        return headers


def iter_file_range(fh: BinaryIO, offset: int, length: int, chunk_size: int) -> Iterator[bytes]:
    """Yield exactly `length` bytes from `offset`, then close the file."""
    try:
        fh.seek(offset)
        remaining = length
        while remaining > 0:
            chunk = fh.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk
    finally:
        fh.close()


class ContentStreamer:
    def __init__(
        self,
        storage: LocalFileStorage,
        videos: VideoService,
        dispatcher: TaskDispatcher,
        *,
        chunk_size: Optional[int] = None,
    ) -> None:
        self.storage = storage
        self.videos = videos
        self.dispatcher = dispatcher
        self.chunk_size = chunk_size or settings.STREAM_CHUNK_SIZE

    def _open(self, video: Video):
        fh = self.storage.open_for_read(video.file_name)
        try:
            size = os.fstat(fh.fileno()).st_size
        except OSError:
            fh.close()
            raise
        return fh, size

    async def stream(self, video: Video, range_header: Optional[str]) -> StreamingResponse:
        try:
            fh, size = await run_in_threadpool(self._open, video)
        except (OSError, ValueError) as exc:
            logger.warning("Payload for video %s unavailable (%s): %s", video.id, video.file_name, exc)
            raise PayloadMissingException(video.id)

        try:
            plan = StreamPlan(
                size=size,
                byte_range=resolve_range(range_header, size),
                media_type=f"video/{video.format}",
            )
        except Exception:
            fh.close()
            raise

        response = StreamingResponse(
            iter_file_range(fh, plan.offset, plan.length, self.chunk_size),
            status_code=plan.status_code,
            headers=plan.headers,
            media_type=plan.media_type,
        )
        self.dispatcher.dispatch(self.videos.increment_stat, video.id, "views")
        return response


__all__ = ["ContentStreamer", "StreamPlan", "iter_file_range"]
