# tests/test_videos/test_image_delivery.py

import pytest

from app.schemas.enums import VideoStatus
from tests.utils.factory import PAYLOAD

COVER = b"\xff\xd8cover" * 512


@pytest.mark.anyio
async def test_public_cover_is_served_uncompressed(async_client, video_factory):
    video = await video_factory(cover=COVER)

    r = await async_client.get(video.cover_url, headers={"Accept-Encoding": "gzip"})

    assert r.status_code == 200
    assert r.content == COVER
    assert "content-encoding" not in r.headers
    assert r.headers["cache-control"].startswith("public")


@pytest.mark.anyio
async def test_private_payload_is_not_reachable_under_uploads(async_client, video_factory, auth_headers):
    video = await video_factory(owner_id="alice", status=VideoStatus.PRIVATE)

    for headers in ({}, auth_headers("mallory"), auth_headers("alice")):
        r = await async_client.get(f"/uploads/{video.file_name}", headers=headers)
        assert r.status_code == 404
        assert r.json()["code"] == 40404
        assert r.content != PAYLOAD

    r = await async_client.get(f"/api/v1/videos/{video.id}/stream", headers=auth_headers("alice"))
    assert r.status_code == 200
    assert r.content == PAYLOAD


@pytest.mark.anyio
async def test_public_payload_is_only_streamed(async_client, video_factory):
    video = await video_factory()

    assert (await async_client.get(f"/uploads/{video.file_name}")).status_code == 404
    assert (await async_client.get(f"/api/v1/videos/{video.id}/stream")).status_code == 200


@pytest.mark.anyio
async def test_private_cover_follows_video_visibility(async_client, video_factory, auth_headers):
    video = await video_factory(owner_id="alice", status=VideoStatus.DRAFT, cover=COVER)

    r = await async_client.get(video.cover_url)
    assert r.status_code == 403

    r = await async_client.get(video.cover_url, headers=auth_headers("mallory"))
    assert r.status_code == 403

    r = await async_client.get(video.cover_url, headers=auth_headers("alice"))
    assert r.status_code == 200
    assert r.content == COVER
    assert r.headers["cache-control"] == "private, no-store"


@pytest.mark.anyio
async def test_replaced_thumbnail_is_no_longer_served(async_client, video_factory, auth_headers):
    video = await video_factory(owner_id="alice")
    headers = auth_headers("alice")

    first = await async_client.post(
        f"/api/v1/videos/{video.id}/thumbnail", headers=headers, files={"file": ("a.png", b"first", "image/png")}
    )
    second = await async_client.post(
        f"/api/v1/videos/{video.id}/thumbnail", headers=headers, files={"file": ("b.png", b"second", "image/png")}
    )
    assert first.status_code == second.status_code == 200

    assert (await async_client.get(first.json()["thumbnail_url"])).status_code == 404
    r = await async_client.get(second.json()["thumbnail_url"])
    assert r.status_code == 200
    assert r.content == b"second"


@pytest.mark.anyio
async def test_unknown_image_is_404(async_client):
    r = await async_client.get("/uploads/cover_does_not_exist.jpg")
    assert r.status_code == 404
    assert r.json()["code"] == 40404
