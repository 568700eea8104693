# app/db/models/video.py
from __future__ import annotations

"""
🎬 ReelVault — Video (uploaded asset + denormalized stats)
==========================================================

One row per uploaded video file. The binary payload lives in local storage
under `file_name`; the row keeps everything needed to stream it back
(`file_size`, `format`) plus owner-facing metadata.

Design highlights
-----------------
• **Opaque UUID id** generated client-side, stable for the asset's lifetime.
• **Owner id** is the verified `sub` claim of the uploading user.
• **Denormalized stats** (`views`, `likes`, `comments`, `shares`) are plain
  integer columns so the ledger can update them with single-statement
  arithmetic; each has a non-negative CHECK.
• **Dependents** (favorites, watch history, comments, marks, annotations,
  notes) reference `videos.id` without DB-level cascades; removal is done by
  the deletion coordinator inside one transaction.
"""

from typing import Dict

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    Column,
    Enum,
    Float,
    Index,
    Integer,
    String,
    Text,
    text,
)

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin
from app.schemas.enums import VideoStatus


class Video(UUIDPKMixin, TimestampMixin, Base):
    """An uploaded video owned by exactly one user."""

    __tablename__ = "videos"

    # ── Ownership ─────────────────────────────────────────────
    owner_id = Column(String(64), nullable=False, index=True, doc="Uploader (JWT `sub`).")

    # ── Descriptive metadata ──────────────────────────────────
    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list, doc="Free-form tag list.")
    status = Column(
        Enum(
            VideoStatus,
            name="video_status",
            values_callable=lambda e: [m.value for m in e],
            validate_strings=True,
        ),
        nullable=False,
        default=VideoStatus.PRIVATE,
        index=True,
    )

    # ── File reference ────────────────────────────────────────
    file_name = Column(String(255), nullable=False, doc="Stored name relative to UPLOAD_DIR.")
    file_size = Column(BigInteger, nullable=False, default=0)
    duration = Column(Float, nullable=False, default=0.0, doc="Seconds, as reported by the uploader.")
    format = Column(String(16), nullable=False, doc="Extension without dot, e.g. 'mp4'.")
    cover_url = Column(String(512), nullable=True)
    thumbnail_url = Column(String(512), nullable=True)

    # ── Denormalized stats ────────────────────────────────────
    views = Column(Integer, nullable=False, default=0, server_default=text("0"))
    likes = Column(Integer, nullable=False, default=0, server_default=text("0"))
    comments = Column(Integer, nullable=False, default=0, server_default=text("0"))
    shares = Column(Integer, nullable=False, default=0, server_default=text("0"))

    __table_args__ = (
        CheckConstraint("views >= 0", name="views_nonneg"),
        CheckConstraint("likes >= 0", name="likes_nonneg"),
        CheckConstraint("comments >= 0", name="comments_nonneg"),
        CheckConstraint("shares >= 0", name="shares_nonneg"),
        CheckConstraint("file_size >= 0", name="file_size_nonneg"),
        Index("ix_videos_owner_created", "owner_id", "created_at"),
        Index("ix_videos_status_created", "status", "created_at"),
    )

    # ── Convenience ───────────────────────────────────────────
    @property
    def stats(self) -> Dict[str, int]:
        return {
            "views": self.views or 0,
            "likes": self.likes or 0,
            "comments": self.comments or 0,
            "shares": self.shares or 0,
        }

    @property
    def is_public(self) -> bool:
        return self.status == VideoStatus.PUBLIC

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Video id={self.id} owner={self.owner_id} status={getattr(self.status, 'value', self.status)}>"
