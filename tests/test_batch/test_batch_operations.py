# tests/test_batch/test_batch_operations.py

import pytest

from app.core.exceptions import UnsupportedBatchActionException
from app.schemas.enums import VideoStatus
from app.services.batch_executor import BatchExecutor
from app.services.consistency import VideoDeletionCoordinator
from app.services.video_service import VideoService
from tests.utils.factory import add_dependents, dependent_counts, fetch_video

URL = "/api/v1/videos/batch"
MISSING = "00000000-0000-4000-8000-000000000000"


@pytest.fixture
def executor(session_factory, storage) -> BatchExecutor:
    videos = VideoService(session_factory, storage)
    return BatchExecutor(session_factory, videos, VideoDeletionCoordinator(session_factory, storage))


@pytest.mark.anyio
async def test_batch_delete_with_partial_failures(async_client, video_factory, auth_headers, session_factory, storage):
    mine_1 = await video_factory(owner_id="alice")
    mine_2 = await video_factory(owner_id="alice")
    theirs = await video_factory(owner_id="bob")
    await add_dependents(session_factory, mine_1.id)

    ids = [str(mine_1.id), MISSING, str(theirs.id), "garbage", str(mine_2.id)]
    r = await async_client.post(URL, headers=auth_headers("alice"), json={"video_ids": ids, "action": "delete"})

    assert r.status_code == 200, r.text
    assert r.json() == {
        "success_count": 2,
        "failed_count": 3,
        "failed_ids": [MISSING, str(theirs.id), "garbage"],
    }
    assert await fetch_video(session_factory, mine_1.id) is None
    assert await fetch_video(session_factory, mine_2.id) is None
    assert await fetch_video(session_factory, theirs.id) is not None
    assert sum((await dependent_counts(session_factory, mine_1.id)).values()) == 0
    assert not storage.path_for(mine_1.file_name).exists()


@pytest.mark.anyio
async def test_batch_update_status(async_client, video_factory, auth_headers, session_factory):
    a = await video_factory(owner_id="alice", status=VideoStatus.PRIVATE)
    b = await video_factory(owner_id="alice", status=VideoStatus.DRAFT)

    r = await async_client.post(
        URL,
        headers=auth_headers("alice"),
        json={"video_ids": [str(a.id), str(b.id)], "action": "update_status", "status": "public"},
    )

    assert r.json() == {"success_count": 2, "failed_count": 0, "failed_ids": []}
    assert (await fetch_video(session_factory, a.id)).status == VideoStatus.PUBLIC
    assert (await fetch_video(session_factory, b.id)).status == VideoStatus.PUBLIC


@pytest.mark.anyio
async def test_batch_update_status_without_valid_target_fails_each_item(executor, video_factory, session_factory):
    video = await video_factory(owner_id="alice", status=VideoStatus.PRIVATE)

    result = await executor.execute([str(video.id)], "update_status", "alice", status=None)
    assert result.failed_ids == [str(video.id)]

    result = await executor.execute([str(video.id)], "update_status", "alice", status="archived")
    assert result.failed_count == 1

    assert (await fetch_video(session_factory, video.id)).status == VideoStatus.PRIVATE


@pytest.mark.anyio
async def test_unknown_action_aborts_whole_batch(async_client, video_factory, auth_headers, session_factory):
    video = await video_factory(owner_id="alice")

    r = await async_client.post(
        URL, headers=auth_headers("alice"), json={"video_ids": [str(video.id)], "action": "archive"}
    )

    assert r.status_code == 400
    assert r.json()["code"] == 40002
    assert await fetch_video(session_factory, video.id) is not None


@pytest.mark.anyio
async def test_unknown_action_raises_before_touching_items(executor):
    with pytest.raises(UnsupportedBatchActionException):
        await executor.execute(["garbage"], "publish", "alice")


@pytest.mark.anyio
async def test_counts_always_add_up(executor, video_factory):
    video = await video_factory(owner_id="alice")
    ids = [str(video.id), str(video.id), "x"]

    result = await executor.execute(ids, "DELETE", "alice")

    # The duplicate id fails on its second pass: the video is already gone.
    assert result.success_count == 1
    assert result.failed_count == 2
    assert result.success_count + result.failed_count == len(ids)


@pytest.mark.anyio
async def test_batch_requires_ids(async_client, auth_headers):
    r = await async_client.post(URL, headers=auth_headers("alice"), json={"video_ids": [], "action": "delete"})
    assert r.status_code == 422
