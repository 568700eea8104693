# app/middleware/compression.py
from __future__ import annotations

"""
# ReelVault — Media-aware GZip

Starlette's `GZipMiddleware` for JSON responses, bypassed for byte-addressed
media: the stream endpoint and the published images under `/uploads`. Compressing
those would drop `Content-Length` and make `Content-Range` offsets refer to
bytes the client never receives.
"""

from typing import Iterable, Tuple

from starlette.middleware.gzip import GZipMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send


class MediaAwareGZipMiddleware(GZipMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        minimum_size: int = 1024,
        compresslevel: int = 9,
        *,
        skip_prefixes: Iterable[str] = (),
        skip_suffixes: Iterable[str] = ("/stream",),
    ) -> None:
        super().__init__(app, minimum_size=minimum_size, compresslevel=compresslevel)
        self.skip_prefixes: Tuple[str, ...] = tuple(skip_prefixes)
        self.skip_suffixes: Tuple[str, ...] = tuple(skip_suffixes)

    def _skip(self, path: str) -> bool:
        return bool(
            (self.skip_prefixes and path.startswith(self.skip_prefixes))
            or (self.skip_suffixes and path.rstrip("/").endswith(self.skip_suffixes))
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self._skip(scope.get("path", "")):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


__all__ = ["MediaAwareGZipMiddleware"]
