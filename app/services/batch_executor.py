# app/services/batch_executor.py
from __future__ import annotations

"""
ReelVault — Batch executor
==========================

Applies one action to many videos with independent per-item outcomes.

- The action is validated once, up front: an unknown action is a caller bug
  and aborts the whole batch (`UnsupportedBatchActionException`, 400).
- Each id is then handled on its own: malformed id, missing video, foreign
  owner, invalid target status or a store error marks *that* id as failed
  and processing continues.
- `delete` is delegated to the deletion coordinator (its own transaction per
  item); `update_status` is a single-row update. Successful items are never
  rolled back because a later item failed.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import AppException, InvalidInputException, UnsupportedBatchActionException
from app.schemas.batch import BatchResult
from app.schemas.enums import BatchAction
from app.services.consistency import VideoDeletionCoordinator
from app.services.video_service import VideoService, parse_status, parse_video_id, require_owner

logger = logging.getLogger(__name__)


class BatchExecutor:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        videos: VideoService,
        coordinator: VideoDeletionCoordinator,
    ) -> None:
        self.session_factory = session_factory
        self.videos = videos
        self.coordinator = coordinator

    @staticmethod
    def _parse_action(action: str) -> BatchAction:
        try:
            return BatchAction(str(action).strip().lower())
        except ValueError:
            raise UnsupportedBatchActionException(action)

    async def _apply(self, raw_id: str, action: BatchAction, status: Optional[str], user_id: str) -> None:
        video_id = parse_video_id(raw_id)
        video = await self.videos.get_video(video_id)
        require_owner(video, user_id)

        if action is BatchAction.DELETE:
            await self.coordinator.delete_video(video_id, user_id)
        else:
            target = parse_status(status)
            if target is None:
                raise InvalidInputException("A target status is required for update_status")
            async with self.session_factory.begin() as session:
                await self.videos.set_status(session, video_id, target)

    async def execute(
        self,
        video_ids: Iterable[str],
        action: str,
        user_id: str,
        status: Optional[str] = None,
    ) -> BatchResult:
        parsed = self._parse_action(action)
        result = BatchResult()

        for raw_id in video_ids:
            try:
                await self._apply(raw_id, parsed, status, user_id)
            except (AppException, SQLAlchemyError, OSError) as exc:
                result.failed_count += 1
                result.failed_ids.append(str(raw_id))
                logger.warning("Batch %s failed for video %s: %s", parsed.value, raw_id, getattr(exc, "message", exc))
            else:
                result.success_count += 1

        logger.info(
            "Batch %s by %s: %d ok, %d failed",
            parsed.value, user_id, result.success_count, result.failed_count,
        )
        return result


__all__ = ["BatchExecutor"]
