from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, confloat


class WatchEventIn(BaseModel):
    progress: Optional[confloat(ge=0.0)] = Field(
        None, description="Seconds watched; defaults to the video duration."
    )


class WatchHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    video_id: UUID
    title: str
    cover_url: Optional[str] = None
    duration: float = 0.0
    progress: float = 0.0
    watched_at: datetime


class WatchHistoryPage(BaseModel):
    items: List[WatchHistoryOut]
    page: int
    page_size: int
    total: int
