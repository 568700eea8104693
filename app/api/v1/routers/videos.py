# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ ReelVault · Videos API                                                    ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Endpoints:                                                                ║
# ║  - POST   /videos                       → Upload (multipart)  [auth]      ║
# ║  - GET    /videos                       → List own videos     [auth]      ║
# ║  - GET    /videos/public                → List public videos              ║
# ║  - POST   /videos/batch                 → Batch delete/status [auth]      ║
# ║  - GET    /videos/{id}                  → Video details (+is_favorite)    ║
# ║  - PUT    /videos/{id}                  → Edit metadata       [owner]     ║
# ║  - DELETE /videos/{id}                  → Cascading delete    [owner]     ║
# ║  - GET    /videos/{id}/stream           → 200/206/416 byte stream         ║
# ║  - GET    /videos/{id}/stats            → views/likes/comments/shares     ║
# ║  - POST   /videos/{id}/thumbnail        → Replace thumbnail   [owner]     ║
# ║  - POST   /videos/{id}/favorite         → Favorite            [auth]      ║
# ║  - DELETE /videos/{id}/favorite         → Unfavorite          [auth]      ║
# ║  - POST   /videos/{id}/watch            → Record watch event  [auth]      ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Visibility: non-public videos are visible to their owner only (403).     ║
# ║ Errors: AppException subclasses → problem+json via global handlers.      ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""
Video endpoints: thin adapters between HTTP and the video services.

Identity comes from `get_current_user_id` / `get_optional_user_id`; every
other collaborator is injected so tests can swap the database and storage.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Header,
    Path,
    Query,
    Request,
    Response,
    UploadFile,
    status,
)
from fastapi.responses import StreamingResponse

from app.api.http_utils import build_or_400, set_pagination_headers
from app.core.dependencies import (
    get_batch_executor,
    get_content_streamer,
    get_current_user_id,
    get_deletion_coordinator,
    get_favorite_ledger,
    get_optional_user_id,
    get_video_service,
    get_watch_history_service,
)
from app.schemas.batch import BatchRequest, BatchResult
from app.schemas.enums import SortOrder, VideoSortField
from app.schemas.favorite import FavoriteStatus
from app.schemas.video import ThumbnailOut, VideoCreate, VideoOut, VideoPage, VideoStats, VideoUpdate
from app.schemas.watch_history import WatchEventIn, WatchHistoryOut
from app.services.batch_executor import BatchExecutor
from app.services.consistency import VideoDeletionCoordinator
from app.services.content_streamer import ContentStreamer
from app.services.favorite_ledger import FavoriteLedger
from app.services.video_service import VideoListQuery, VideoService, parse_status, parse_video_id
from app.services.watch_history_service import WatchHistoryService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/videos",
    tags=["Videos"],
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        416: {"description": "Range Not Satisfiable"},
        500: {"description": "Internal Server Error"},
    },
)

VIDEO_ID = Path(..., description="Video identifier (UUID)")


# ╭───────────────────────────────────────────────────────────────────────────╮
# │ Upload & listing                                                          │
# ╰───────────────────────────────────────────────────────────────────────────╯

@router.post("", response_model=VideoOut, status_code=status.HTTP_201_CREATED, summary="Upload a video")
async def upload_video(
    file: UploadFile = File(..., description="Video payload (.mp4 .mov .avi .wmv .flv .mkv)"),
    cover: Optional[UploadFile] = File(None, description="Cover image (≤ 2MB, .jpg .jpeg .png .gif)"),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    video_status: Optional[str] = Form(None, alias="status"),
    duration: float = Form(0.0),
    tags: Optional[str] = Form(None, description="Comma-separated tags"),
    user_id: str = Depends(get_current_user_id),
    videos: VideoService = Depends(get_video_service),
):
    payload = build_or_400(
        VideoCreate,
        "Invalid upload metadata",
        title=title,
        description=description,
        status=video_status,
        duration=duration,
        tags=tags or [],
    )
    video = await videos.upload(user_id, payload, file, cover)
    return VideoOut.model_validate(video)


@router.get("", response_model=VideoPage, summary="List the caller's videos")
async def list_my_videos(
    request: Request,
    response: Response,
    video_status: Optional[str] = Query(None, alias="status"),
    keyword: Optional[str] = Query(None, max_length=100),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    sort_by: VideoSortField = Query(VideoSortField.CREATED_AT),
    sort_order: SortOrder = Query(SortOrder.DESC),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    user_id: str = Depends(get_current_user_id),
    videos: VideoService = Depends(get_video_service),
):
    query = VideoListQuery(
        owner_id=user_id,
        status=parse_status(video_status),
        keyword=keyword,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    items, total = await videos.list_videos(query)
    set_pagination_headers(request, response, page=page, page_size=page_size, total=total)
    return VideoPage(items=[VideoOut.model_validate(v) for v in items], page=page, page_size=page_size, total=total)


@router.get("/public", response_model=VideoPage, summary="List public videos")
async def list_public_videos(
    request: Request,
    response: Response,
    owner: Optional[str] = Query(None, alias="user_id", max_length=64),
    keyword: Optional[str] = Query(None, max_length=100),
    sort_by: VideoSortField = Query(VideoSortField.CREATED_AT),
    sort_order: SortOrder = Query(SortOrder.DESC),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    videos: VideoService = Depends(get_video_service),
):
    query = VideoListQuery(
        owner_id=owner,
        public_only=True,
        keyword=keyword,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    items, total = await videos.list_videos(query)
    set_pagination_headers(request, response, page=page, page_size=page_size, total=total)
    return VideoPage(items=[VideoOut.model_validate(v) for v in items], page=page, page_size=page_size, total=total)


@router.post("/batch", response_model=BatchResult, summary="Apply one action to many videos")
async def batch_operation(
    body: BatchRequest,
    user_id: str = Depends(get_current_user_id),
    executor: BatchExecutor = Depends(get_batch_executor),
):
    return await executor.execute(body.video_ids, body.action, user_id, status=body.status)


# ╭───────────────────────────────────────────────────────────────────────────╮
# │ Single video                                                              │
# ╰───────────────────────────────────────────────────────────────────────────╯

@router.get("/{video_id}", response_model=VideoOut, summary="Get a video")
async def get_video(
    video_id: str = VIDEO_ID,
    viewer_id: Optional[str] = Depends(get_optional_user_id),
    videos: VideoService = Depends(get_video_service),
    ledger: FavoriteLedger = Depends(get_favorite_ledger),
):
    vid = parse_video_id(video_id)
    video = await videos.get_visible_video(vid, viewer_id)
    out = VideoOut.model_validate(video)
    if viewer_id is not None:
        out.is_favorite = await ledger.is_favorite(viewer_id, vid)
    return out


@router.put("/{video_id}", response_model=VideoOut, summary="Edit video metadata")
async def update_video(
    body: VideoUpdate,
    video_id: str = VIDEO_ID,
    user_id: str = Depends(get_current_user_id),
    videos: VideoService = Depends(get_video_service),
):
    video = await videos.update(parse_video_id(video_id), user_id, body)
    return VideoOut.model_validate(video)


@router.delete("/{video_id}", summary="Delete a video and everything that references it")
async def delete_video(
    video_id: str = VIDEO_ID,
    user_id: str = Depends(get_current_user_id),
    coordinator: VideoDeletionCoordinator = Depends(get_deletion_coordinator),
):
    report = await coordinator.delete_video(parse_video_id(video_id), user_id)
    return {"id": str(report.video_id), "deleted": True}


@router.get("/{video_id}/stream", response_class=StreamingResponse, summary="Stream video bytes (Range aware)")
async def stream_video(
    video_id: str = VIDEO_ID,
    range_header: Optional[str] = Header(None, alias="Range"),
    viewer_id: Optional[str] = Depends(get_optional_user_id),
    videos: VideoService = Depends(get_video_service),
    streamer: ContentStreamer = Depends(get_content_streamer),
):
    video = await videos.get_visible_video(parse_video_id(video_id), viewer_id)
    return await streamer.stream(video, range_header)


@router.get("/{video_id}/stats", response_model=VideoStats, summary="Video statistics")
async def video_stats(
    video_id: str = VIDEO_ID,
    viewer_id: Optional[str] = Depends(get_optional_user_id),
    videos: VideoService = Depends(get_video_service),
):
    return VideoStats(**await videos.get_stats(parse_video_id(video_id), viewer_id))


@router.post("/{video_id}/thumbnail", response_model=ThumbnailOut, summary="Replace the thumbnail")
async def update_thumbnail(
    video_id: str = VIDEO_ID,
    file: UploadFile = File(..., description="Image (≤ 2MB, .jpg .jpeg .png .gif)"),
    user_id: str = Depends(get_current_user_id),
    videos: VideoService = Depends(get_video_service),
):
    vid = parse_video_id(video_id)
    url = await videos.update_thumbnail(vid, user_id, file)
    return ThumbnailOut(video_id=vid, thumbnail_url=url)


# ╭───────────────────────────────────────────────────────────────────────────╮
# │ Favorites & watch events                                                  │
# ╰───────────────────────────────────────────────────────────────────────────╯

@router.post(
    "/{video_id}/favorite",
    response_model=FavoriteStatus,
    status_code=status.HTTP_201_CREATED,
    summary="Add to favorites",
)
async def add_favorite(
    video_id: str = VIDEO_ID,
    user_id: str = Depends(get_current_user_id),
    ledger: FavoriteLedger = Depends(get_favorite_ledger),
):
    vid = parse_video_id(video_id)
    await ledger.add(user_id, vid)
    return FavoriteStatus(video_id=vid, is_favorite=True)


@router.delete("/{video_id}/favorite", response_model=FavoriteStatus, summary="Remove from favorites")
async def remove_favorite(
    video_id: str = VIDEO_ID,
    user_id: str = Depends(get_current_user_id),
    ledger: FavoriteLedger = Depends(get_favorite_ledger),
):
    vid = parse_video_id(video_id)
    await ledger.remove(user_id, vid)
    return FavoriteStatus(video_id=vid, is_favorite=False)


@router.post("/{video_id}/watch", response_model=WatchHistoryOut, summary="Record a watch event")
async def record_watch(
    body: Optional[WatchEventIn] = None,
    video_id: str = VIDEO_ID,
    user_id: str = Depends(get_current_user_id),
    history: WatchHistoryService = Depends(get_watch_history_service),
):
    progress = body.progress if body is not None else None
    entry = await history.record(user_id, parse_video_id(video_id), progress)
    return WatchHistoryOut.model_validate(entry)
