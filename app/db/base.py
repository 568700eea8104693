# app/db/base.py
"""
ReelVault — SQLAlchemy Base registry
====================================

Import all ORM models so their tables are registered on `Base.metadata`.
Alembic autogeneration and the test schema bootstrap import this module.

Tip: Keep this file import-only; no runtime logic.
"""

from app.db.base_class import Base

# ───────────────────────────────────────────────────────────────
# Catalog
# ───────────────────────────────────────────────────────────────
from app.db.models.video import Video

# ───────────────────────────────────────────────────────────────
# Engagement & user annotations
# ───────────────────────────────────────────────────────────────
from app.db.models.favorite import Favorite
from app.db.models.watch_history import WatchHistory
from app.db.models.comment import Comment
from app.db.models.mark import Annotation, Mark, Note

# ───────────────────────────────────────────────────────────────
# Public exports (helps linters; clarifies registry)
# ───────────────────────────────────────────────────────────────
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
