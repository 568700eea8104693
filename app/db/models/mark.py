# app/db/models/mark.py
from __future__ import annotations

"""
🔖 ReelVault — Marks, Annotations & Notes
=========================================

User-owned leaf records scoped to a video:

• `Mark`       — a timestamped bookmark inside a video.
• `Annotation` — text attached to a `Mark` (also carries `video_id` so a
                 video's annotations can be swept without a join).
• `Note`       — free-standing timestamped note on a video.

These carry no invariant beyond "references an existing video"; the deletion
coordinator sweeps all three when their video goes away.
"""

import uuid

from sqlalchemy import Column, Float, ForeignKey, Index, String, Text, Uuid

from app.db.base_class import Base, TimestampMixin


class Mark(TimestampMixin, Base):
    __tablename__ = "marks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=False, index=True)
    timestamp = Column(Float, nullable=False, default=0.0, doc="Position in seconds.")
    content = Column(Text, nullable=False, default="")

    __table_args__ = (Index("ix_marks_video_user", "video_id", "user_id"),)


class Annotation(TimestampMixin, Base):
    __tablename__ = "annotations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    mark_id = Column(Uuid, ForeignKey("marks.id"), nullable=False, index=True)
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=False, index=True)
    content = Column(Text, nullable=False, default="")


class Note(TimestampMixin, Base):
    __tablename__ = "notes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=False, index=True)
    timestamp = Column(Float, nullable=False, default=0.0)
    content = Column(Text, nullable=False, default="")
    title = Column(String(120), nullable=True)
