# app/db/models/favorite.py
from __future__ import annotations

"""
⭐ ReelVault — Favorite (user ↔ video bookmark)
===============================================

Source of truth for "has this user favorited this video". The like counter
on `videos.likes` is a cached aggregate kept in step by the favorite ledger.

• **Unique per (user_id, video_id)**: the constraint is what makes two racing
  inserts collapse into one winner.
• **Denormalized title/cover/duration** so a user's favorites list renders
  without joining `videos`.
• Never mutated in place: created by add, removed by remove.
"""

import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, UniqueConstraint, Uuid, func

from app.db.base_class import Base, utcnow


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=False, index=True)

    # ── Denormalized listing fields ───────────────────────────
    title = Column(String(120), nullable=False, default="")
    cover_url = Column(String(512), nullable=True)
    duration = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_favorites_user_video"),
        Index("ix_favorites_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Favorite user={self.user_id} video={self.video_id}>"
