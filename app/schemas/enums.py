from __future__ import annotations

"""
Central enum definitions used across ReelVault.

Design notes
------------
• All enums subclass `str, PyEnum` for JSON-friendly serialization.
• VALUE STRINGS are **stable** once deployed (DB enums depend on them).
• Keep `__all__` in sync when adding new enums.
"""

from enum import Enum as PyEnum
from typing import Optional


# ──────────────────────────────────────────────────────────────
# Video lifecycle
# ──────────────────────────────────────────────────────────────
class VideoStatus(str, PyEnum):
    """Visibility/lifecycle of an uploaded video (closed set)."""
    DRAFT = "draft"
    PRIVATE = "private"
    PUBLIC = "public"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["VideoStatus"]:
        """Return the member for `value` (case-insensitive) or `None` if unknown."""
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# ──────────────────────────────────────────────────────────────
# Batch operations
# ──────────────────────────────────────────────────────────────
class BatchAction(str, PyEnum):
    DELETE = "delete"
    UPDATE_STATUS = "update_status"


# ──────────────────────────────────────────────────────────────
# Listing
# ──────────────────────────────────────────────────────────────
class VideoSortField(str, PyEnum):
    CREATED_AT = "created_at"
    VIEWS = "views"
    LIKES = "likes"
    FILE_SIZE = "file_size"


class SortOrder(str, PyEnum):
    ASC = "asc"
    DESC = "desc"


__all__ = [
    "VideoStatus",
    "BatchAction",
    "VideoSortField",
    "SortOrder",
]
