from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, confloat, constr, field_validator


def _clean_tags(v):
    if v is None:
        return v
    if isinstance(v, str):
        v = v.split(",")
    out: List[str] = []
    for tag in v:
        tag = str(tag).strip()
        if tag and tag not in out:
            out.append(tag)
    return out


class VideoStats(BaseModel):
    views: int = 0
    likes: int = 0
    comments: int = 0
    shares: int = 0


class VideoCreate(BaseModel):
    """Metadata accompanying an upload (multipart form fields)."""

    title: constr(strip_whitespace=True, min_length=1, max_length=120)
    description: Optional[constr(strip_whitespace=True, max_length=5000)] = None
    status: Optional[str] = Field(None, description="draft|private|public (default private)")
    duration: confloat(ge=0.0) = 0.0
    tags: List[str] = []

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v):
        return _clean_tags(v) or []


class VideoUpdate(BaseModel):
    """Owner edits; only non-empty fields are applied."""

    title: Optional[constr(strip_whitespace=True, max_length=120)] = None
    description: Optional[constr(strip_whitespace=True, max_length=5000)] = None
    status: Optional[str] = Field(None, description="draft|private|public")
    tags: Optional[List[str]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v):
        return _clean_tags(v)


class VideoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: str
    title: str
    description: Optional[str] = None
    file_name: str
    file_size: int
    duration: float
    format: str
    status: str
    tags: List[str] = []
    cover_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    stats: VideoStats
    created_at: datetime
    updated_at: datetime
    is_favorite: Optional[bool] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_value(cls, v):
        return getattr(v, "value", v)


class VideoPage(BaseModel):
    items: List[VideoOut]
    page: int
    page_size: int
    total: int


class ThumbnailOut(BaseModel):
    video_id: UUID
    thumbnail_url: str
