from __future__ import annotations

"""
ReelVault • Local Blob Storage
==============================

Layout (single configured root, flat):

    {UPLOAD_DIR}/
      {uuid}{ext}            video payloads
      cover_{uuid}{ext}      covers supplied at upload time
      thumb_{uuid}{ext}      thumbnails replaced later by the owner

Rules
-----
- Callers pass *names*, never paths. A name containing a path separator, `..`
  or an absolute path is rejected before touching the filesystem.
- Image URLs are `{UPLOAD_URL_PREFIX}/{name}`; `name_from_url` maps back.
  Payload names never get a URL: they are read through the stream endpoint.
- Every method is blocking; async callers go through `run_in_threadpool`.
"""

import os
import shutil
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional, Union

from app.core.config import settings

__all__ = ["LocalFileStorage", "get_storage"]


class LocalFileStorage:
    """Filesystem abstraction rooted at one directory."""

    def __init__(self, root: Union[str, Path], *, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")

    # ── Names & paths ────────────────────────────────────────
    def path_for(self, name: str) -> Path:
        """Join a stored relative name onto the root (no traversal)."""
        if not name or name in {".", ".."}:
            raise ValueError("empty storage name")
        if os.path.isabs(name) or "/" in name or "\\" in name:
            raise ValueError(f"invalid storage name: {name!r}")
        return self.root / name

    def url_for(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    @staticmethod
    def name_from_url(url: Optional[str]) -> Optional[str]:
        """Return the stored name behind a public URL (`/uploads/x.jpg` → `x.jpg`)."""
        if not url:
            return None
        return PurePosixPath(url).name or None

    # ── I/O ──────────────────────────────────────────────────
    def open_for_read(self, name: str) -> BinaryIO:
        return open(self.path_for(name), "rb")

    def size(self, name: str) -> int:
        return self.path_for(name).stat().st_size

    def save(self, name: str, source: BinaryIO) -> int:
        """Copy `source` into `name`; returns bytes written. Partial files are removed."""
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        try:
            with open(path, "wb") as dst:
                shutil.copyfileobj(source, dst)
                written = dst.tell()
        except OSError:
            path.unlink(missing_ok=True)
            raise
        return written

    def delete(self, name: str) -> None:
        self.path_for(name).unlink()


def get_storage() -> LocalFileStorage:
    """FastAPI dependency: storage rooted at the configured upload directory."""
    return LocalFileStorage(settings.UPLOAD_DIR, url_prefix=settings.UPLOAD_URL_PREFIX)
