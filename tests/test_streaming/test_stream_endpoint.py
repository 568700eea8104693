# tests/test_streaming/test_stream_endpoint.py

import pytest

from app.schemas.enums import VideoStatus
from tests.utils.factory import PAYLOAD, fetch_video

BASE = "/api/v1/videos"


@pytest.mark.anyio
async def test_full_body_without_range(async_client, video_factory, dispatcher, session_factory):
    video = await video_factory()

    r = await async_client.get(f"{BASE}/{video.id}/stream")

    assert r.status_code == 200
    assert r.content == PAYLOAD
    assert r.headers["content-length"] == str(len(PAYLOAD))
    assert r.headers["accept-ranges"] == "bytes"
    assert r.headers["content-type"] == "video/mp4"
    assert "content-range" not in r.headers
    assert "content-encoding" not in r.headers

    await dispatcher.drain()
    assert (await fetch_video(session_factory, video.id)).views == 1


@pytest.mark.anyio
async def test_partial_content_for_explicit_range(async_client, video_factory):
    video = await video_factory()

    r = await async_client.get(f"{BASE}/{video.id}/stream", headers={"Range": "bytes=0-499"})

    assert r.status_code == 206
    assert r.content == PAYLOAD[0:500]
    assert r.headers["content-range"] == f"bytes 0-499/{len(PAYLOAD)}"
    assert r.headers["content-length"] == "500"


@pytest.mark.anyio
async def test_open_ended_and_suffix_ranges(async_client, video_factory):
    video = await video_factory()
    size = len(PAYLOAD)

    r = await async_client.get(f"{BASE}/{video.id}/stream", headers={"Range": "bytes=1000-"})
    assert r.status_code == 206
    assert r.content == PAYLOAD[1000:]
    assert r.headers["content-range"] == f"bytes 1000-{size - 1}/{size}"

    r = await async_client.get(f"{BASE}/{video.id}/stream", headers={"Range": "bytes=-24"})
    assert r.status_code == 206
    assert r.content == PAYLOAD[-24:]


@pytest.mark.anyio
async def test_range_beyond_end_is_416(async_client, video_factory, dispatcher, session_factory):
    video = await video_factory()

    r = await async_client.get(f"{BASE}/{video.id}/stream", headers={"Range": f"bytes={len(PAYLOAD)}-"})

    assert r.status_code == 416
    assert r.headers["content-range"] == f"bytes */{len(PAYLOAD)}"
    assert r.json()["code"] == 41601

    # Nothing was streamed, so no view was counted
    await dispatcher.drain()
    assert (await fetch_video(session_factory, video.id)).views == 0


@pytest.mark.anyio
async def test_missing_payload_is_distinct_404(async_client, video_factory):
    video = await video_factory(payload=None)

    r = await async_client.get(f"{BASE}/{video.id}/stream")

    assert r.status_code == 404
    assert r.json()["code"] == 40402


@pytest.mark.anyio
async def test_unknown_video_is_404(async_client):
    r = await async_client.get(f"{BASE}/00000000-0000-4000-8000-000000000000/stream")
    assert r.status_code == 404
    assert r.json()["code"] == 40401


@pytest.mark.anyio
async def test_malformed_id_is_400(async_client):
    r = await async_client.get(f"{BASE}/not-a-uuid/stream")
    assert r.status_code == 400


@pytest.mark.anyio
async def test_private_video_streams_only_for_owner(async_client, video_factory, auth_headers):
    video = await video_factory(owner_id="alice", status=VideoStatus.PRIVATE)

    r = await async_client.get(f"{BASE}/{video.id}/stream")
    assert r.status_code == 403

    r = await async_client.get(f"{BASE}/{video.id}/stream", headers=auth_headers("mallory"))
    assert r.status_code == 403

    r = await async_client.get(f"{BASE}/{video.id}/stream", headers=auth_headers("alice"))
    assert r.status_code == 200
    assert r.content == PAYLOAD


@pytest.mark.anyio
async def test_views_accumulate_across_streams(async_client, video_factory, dispatcher, session_factory):
    video = await video_factory()

    for _ in range(3):
        r = await async_client.get(f"{BASE}/{video.id}/stream", headers={"Range": "bytes=0-9"})
        assert r.status_code == 206
        await dispatcher.drain()

    assert (await fetch_video(session_factory, video.id)).views == 3


@pytest.mark.anyio
async def test_mid_file_window_of_thousand_byte_asset(async_client, video_factory):
    payload = bytes(i % 251 for i in range(1000))
    video = await video_factory(payload=payload, fmt="mkv")

    r = await async_client.get(f"{BASE}/{video.id}/stream", headers={"Range": "bytes=200-299"})

    assert r.status_code == 206
    assert r.headers["content-range"] == "bytes 200-299/1000"
    assert r.headers["content-length"] == "100"
    assert r.headers["content-type"] == "video/mkv"
    assert r.content == payload[200:300]
