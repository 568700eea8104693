from __future__ import annotations

"""
ReelVault · HTTP Utilities
==========================

Shared helpers for API routers:

- Pagination headers (`X-Total-Count` + RFC 5988 `Link`)
- Problem-safe conversion of pydantic validation errors into `InvalidInput`

Helpers are side-effect free apart from mutating the passed `Response`.
"""

import logging
from typing import Any, Callable, List, TypeVar
from urllib.parse import urlencode

from fastapi import Request, Response
from pydantic import ValidationError

from app.core.exceptions import InvalidInputException

logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = ["set_pagination_headers", "build_or_400"]


# ─────────────────────────────────────────────────────────────────────────────
# 📄 Pagination headers
# ─────────────────────────────────────────────────────────────────────────────

def set_pagination_headers(
    request: Request,
    response: Response,
    *,
    page: int,
    page_size: int,
    total: int,
) -> None:
    """Attach `X-Total-Count` and RFC 5988 `Link` headers for paginated endpoints."""
    response.headers["X-Total-Count"] = str(total)
    base_url = str(request.url).split("?")[0]
    links: List[str] = []

    def _q(p: int) -> str:
        qd = dict(request.query_params)
        qd["page"] = str(p)
        qd["page_size"] = str(page_size)
        return urlencode(qd)

    last_page = max(1, (total + page_size - 1) // page_size)
    if page > 1:
        links.append(f'<{base_url}?{_q(1)}>; rel="first"')
        links.append(f'<{base_url}?{_q(page - 1)}>; rel="prev"')
    if page < last_page:
        links.append(f'<{base_url}?{_q(page + 1)}>; rel="next"')
        links.append(f'<{base_url}?{_q(last_page)}>; rel="last"')
    if links:
        response.headers["Link"] = ", ".join(links)


# ─────────────────────────────────────────────────────────────────────────────
# 🧾 Form/model validation → 400
# ─────────────────────────────────────────────────────────────────────────────

def build_or_400(factory: Callable[..., T], message: str, **fields: Any) -> T:
    """Build a pydantic model from loose (form) fields; errors become `InvalidInput`."""
    try:
        return factory(**fields)
    except ValidationError as exc:
        raise InvalidInputException(
            message,
            details=exc.errors(include_url=False, include_context=False),
        )
