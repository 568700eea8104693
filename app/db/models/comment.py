# app/db/models/comment.py
from __future__ import annotations

"""
💬 ReelVault — Comment

Plain user comment on a video. No API surface of its own here; the table
exists so that deleting a video also removes its comments.
"""

import uuid

from sqlalchemy import Column, ForeignKey, String, Text, Uuid

from app.db.base_class import Base, TimestampMixin


class Comment(TimestampMixin, Base):
    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    video_id = Column(Uuid, ForeignKey("videos.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
