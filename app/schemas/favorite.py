from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class FavoriteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    video_id: UUID
    title: str
    cover_url: Optional[str] = None
    duration: float = 0.0
    created_at: datetime


class FavoritePage(BaseModel):
    items: List[FavoriteOut]
    page: int
    page_size: int
    total: int


class FavoriteStatus(BaseModel):
    video_id: UUID
    is_favorite: bool
