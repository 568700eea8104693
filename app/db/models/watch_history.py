# app/db/models/watch_history.py
from __future__ import annotations

"""
⏯️ ReelVault — WatchHistory (last watch per user & video)
=========================================================

Upserted on every watch event; duplicates collapse on `(user_id, video_id)`
and the latest write wins for `progress` / `watched_at`.
"""

import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, UniqueConstraint, Uuid, func

from app.db.base_class import Base, utcnow


class WatchHistory(Base):
    __tablename__ = "watch_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=False, index=True)

    title = Column(String(120), nullable=False, default="")
    cover_url = Column(String(512), nullable=True)
    duration = Column(Float, nullable=False, default=0.0)
    progress = Column(Float, nullable=False, default=0.0, doc="Seconds watched at the last event.")

    watched_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),
        Index("ix_watch_history_user_watched", "user_id", "watched_at"),
    )
