# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ ReelVault · Published images                                              ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║  - GET {UPLOAD_URL_PREFIX}/{name}   → cover / thumbnail bytes            ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Only names a video references as cover or thumbnail resolve, under that  ║
# ║ video's visibility. Payloads are served by /videos/{id}/stream only.     ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Image delivery for `cover_url` / `thumbnail_url` links.

Mounted by `app.main` at `settings.UPLOAD_URL_PREFIX` (outside the versioned
API) so the stored URLs stay valid.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path
from fastapi.responses import FileResponse

from app.core.dependencies import get_optional_user_id, get_video_service
from app.schemas.enums import VideoStatus
from app.services.video_service import VideoService

router = APIRouter(
    tags=["Uploads"],
    responses={
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
    },
)


@router.get("/{name}", response_class=FileResponse, summary="Cover or thumbnail image")
async def get_image(
    name: str = Path(..., description="Stored image name, e.g. cover_<hex>.jpg"),
    viewer_id: Optional[str] = Depends(get_optional_user_id),
    videos: VideoService = Depends(get_video_service),
):
    video, path = await videos.get_image(name, viewer_id)
    cache = "public, max-age=3600" if video.status == VideoStatus.PUBLIC else "private, no-store"
    return FileResponse(path, headers={"Cache-Control": cache})


__all__ = ["router"]
