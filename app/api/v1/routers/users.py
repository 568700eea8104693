# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ ReelVault · User Collections API                                          ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Endpoints (self only):                                                    ║
# ║  - GET    /users/{user_id}/favorites       → Favorites, newest first      ║
# ║  - GET    /users/{user_id}/watch-history   → History, latest watch first  ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Practices                                                                 ║
# ║  - Auth: caller must be `user_id` (403 otherwise).                        ║
# ║  - Cache control: personal lists return `Cache-Control: no-store`.        ║
# ║  - Pagination: `X-Total-Count` and RFC 5988 `Link`.                       ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Per-user collections backed by the favorite ledger and watch history."""

import logging

from fastapi import APIRouter, Depends, Path, Query, Request, Response

from app.api.http_utils import set_pagination_headers
from app.core.dependencies import get_current_user_id, get_favorite_ledger, get_watch_history_service
from app.core.exceptions import ForbiddenException
from app.schemas.favorite import FavoriteOut, FavoritePage
from app.schemas.watch_history import WatchHistoryOut, WatchHistoryPage
from app.services.favorite_ledger import FavoriteLedger
from app.services.watch_history_service import WatchHistoryService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
    },
)


def _require_self(user_id: str, caller_id: str) -> None:
    if user_id != caller_id:
        raise ForbiddenException("You can only view your own collections", user_id=caller_id)


@router.get("/{user_id}/favorites", response_model=FavoritePage, summary="List a user's favorites")
async def list_favorites(
    request: Request,
    response: Response,
    user_id: str = Path(..., max_length=64),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    caller_id: str = Depends(get_current_user_id),
    ledger: FavoriteLedger = Depends(get_favorite_ledger),
):
    _require_self(user_id, caller_id)
    items, total = await ledger.list_for_user(user_id, page=page, page_size=page_size)
    response.headers["Cache-Control"] = "no-store"
    set_pagination_headers(request, response, page=page, page_size=page_size, total=total)
    return FavoritePage(
        items=[FavoriteOut.model_validate(f) for f in items],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.get("/{user_id}/watch-history", response_model=WatchHistoryPage, summary="List a user's watch history")
async def list_watch_history(
    request: Request,
    response: Response,
    user_id: str = Path(..., max_length=64),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    caller_id: str = Depends(get_current_user_id),
    history: WatchHistoryService = Depends(get_watch_history_service),
):
    _require_self(user_id, caller_id)
    items, total = await history.list_for_user(user_id, page=page, page_size=page_size)
    response.headers["Cache-Control"] = "no-store"
    set_pagination_headers(request, response, page=page, page_size=page_size, total=total)
    return WatchHistoryPage(
        items=[WatchHistoryOut.model_validate(h) for h in items],
        page=page,
        page_size=page_size,
        total=total,
    )
