# app/db/models/__init__.py
"""
ReelVault — ORM model package
=============================

Re-exports every model so `from app.db.models import Video` works and all
tables land on `Base.metadata` as soon as the package is imported.
"""

from app.db.base_class import Base

# ───────────────────────────────────────────────────────────────
# Catalog
# ───────────────────────────────────────────────────────────────
from .video import Video

# ───────────────────────────────────────────────────────────────
# Engagement (rows that reference a video)
# ───────────────────────────────────────────────────────────────
from .favorite import Favorite
from .watch_history import WatchHistory
from .comment import Comment
from .mark import Annotation, Mark, Note

__all__ = [
    "Base",
    "Video",
    "Favorite",
    "WatchHistory",
    "Comment",
    "Mark",
    "Annotation",
    "Note",
]
