# app/core/exceptions.py
from __future__ import annotations

"""
ReelVault — Application Exceptions
==================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
lets us attach structured metadata and integrate cleanly with our JSON error
shape from `app.core.exception_handlers`.

Key ideas
---------
- One base `AppException` that carries `code`, `request_id`, `user_id`, `details`, `extra`.
- Domain exceptions inherit from it and set sane defaults.
- Services raise these directly; routers let them propagate.

Taxonomy
--------
NotFound      → `VideoNotFoundException`, `FavoriteNotFoundException`, `PayloadMissingException`,
                `ImageNotFoundException`
InvalidInput  → `InvalidInputException`, `RangeNotSatisfiableException`, `UnsupportedBatchActionException`
Conflict      → `AlreadyFavoritedException`
Forbidden     → `VideoForbiddenException`, `ForbiddenException`
Unauthorized  → `InvalidTokenException`
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "InvalidTokenException",
    "InvalidInputException",
    "VideoNotFoundException",
    "PayloadMissingException",
    "FavoriteNotFoundException",
    "ImageNotFoundException",
    "AlreadyFavoritedException",
    "VideoForbiddenException",
    "RangeNotSatisfiableException",
    "UnsupportedBatchActionException",
    "ForbiddenException",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code (e.g., 400/401/403/404/409/416/500).
    message : str
        Human-readable error message (serialized as `detail` as well).
    code : int
        Optional internal/typed error code. Defaults to `status_code`.
    request_id : str | None
        Optional request correlation id (middleware adds it to the response body).
    user_id : str | None
        User id for auditing/context.
    details : dict | list | str | None
        Machine-readable details (e.g., constraints, ids).
    extra : dict | None
        Additional non-sensitive metadata to surface to clients.
    headers : dict | None
        Optional headers (e.g., `{"Content-Range": "bytes */1000"}`).
    """

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        code: Optional[int] = None,
        request_id: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code: int = int(code or status_code)
        self.message: str = message
        self.request_id: Optional[str] = request_id
        self.user_id: Optional[str] = user_id
        self.details: Optional[Any] = details
        self.extra: Dict[str, Any] = extra or {}

    # ── [Helper] Canonical body used by handlers ───────────────────────────
    def to_problem(self, *, fallback_request_id: Optional[str] = None) -> Dict[str, Any]:
        """Return a dict matching our problem-like JSON shape."""
        body: Dict[str, Any] = {
            "error": True,
            "message": self.message,
            "code": self.code,
            "request_id": self.request_id or fallback_request_id or "N/A",
        }
        if self.details is not None:
            body["details"] = self.details
        # Avoid leaking obvious secrets if someone passed them in `extra`.
        extra_sanitized = dict(self.extra) if self.extra else {}
        for k in ("token", "authorization", "password", "secret"):
            extra_sanitized.pop(k, None)
        body.update(extra_sanitized)
        return body


# ──────────────────────────────────────────────────────────────
# 🔑 Auth/Token exceptions
# ──────────────────────────────────────────────────────────────
class InvalidTokenException(AppException):
    """Raised for missing, invalid or expired tokens (401 by default)."""

    def __init__(
        self,
        *,
        detail: str = "Invalid or expired token",
        status_code: int = status.HTTP_401_UNAUTHORIZED,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        headers = headers or {"WWW-Authenticate": "Bearer"}
        super().__init__(status_code=status_code, message=detail, code=status_code, headers=headers)


# ──────────────────────────────────────────────────────────────
# 🧾 Input validation
# ──────────────────────────────────────────────────────────────
class InvalidInputException(AppException):
    """Malformed identifiers, invalid status values, rejected uploads."""

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            code=40001,
            details=details,
        )


class RangeNotSatisfiableException(AppException):
    """A `Range` header that cannot be served against the asset length."""

    def __init__(self, *, header: Optional[str], size: int) -> None:
        super().__init__(
            status_code=status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
            message="Requested range not satisfiable",
            code=41601,
            details={"range": header, "size": size},
            headers={"Content-Range": f"bytes */{size}", "Accept-Ranges": "bytes"},
        )


class UnsupportedBatchActionException(AppException):
    """Batch action outside the supported set (caller bug, aborts the batch)."""

    def __init__(self, action: str) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=f"Unsupported batch action '{action}'",
            code=40002,
            details={"action": action},
        )


# ──────────────────────────────────────────────────────────────
# 🎬 Video / favorite domain
# ──────────────────────────────────────────────────────────────
class VideoNotFoundException(AppException):
    def __init__(self, video_id: Any) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message="Video not found",
            code=40401,
            details={"video_id": str(video_id)},
        )


class PayloadMissingException(AppException):
    """The video record exists but its backing file cannot be opened."""

    def __init__(self, video_id: Any) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message="Video file is unavailable",
            code=40402,
            details={"video_id": str(video_id)},
        )


class FavoriteNotFoundException(AppException):
    def __init__(self, video_id: Any) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message="Favorite not found",
            code=40403,
            details={"video_id": str(video_id)},
        )


class ImageNotFoundException(AppException):
    """No cover or thumbnail is published under this name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message="Image not found",
            code=40404,
            details={"name": name},
        )


class AlreadyFavoritedException(AppException):
    def __init__(self, video_id: Any) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            message="Video already in favorites",
            code=40901,
            details={"video_id": str(video_id)},
        )


class VideoForbiddenException(AppException):
    """Ownership mismatch (or private video requested by someone else)."""

    def __init__(self, video_id: Any, *, user_id: Optional[str] = None) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message="Not allowed to access this video",
            code=40301,
            user_id=user_id,
            details={"video_id": str(video_id)},
        )


class ForbiddenException(AppException):
    """Acting on another user's resources (e.g. reading their history)."""

    def __init__(self, message: str = "Not allowed", *, user_id: Optional[str] = None) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=message,
            code=40302,
            user_id=user_id,
        )
