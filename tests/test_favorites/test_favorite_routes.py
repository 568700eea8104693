# tests/test_favorites/test_favorite_routes.py

import pytest

from app.schemas.enums import VideoStatus

URL = "/api/v1/videos"


@pytest.mark.anyio
async def test_favorite_lifecycle(async_client, video_factory, auth_headers):
    video = await video_factory()
    headers = auth_headers("bob")

    r = await async_client.post(f"{URL}/{video.id}/favorite", headers=headers)
    assert r.status_code == 201
    assert r.json() == {"video_id": str(video.id), "is_favorite": True}

    r = await async_client.post(f"{URL}/{video.id}/favorite", headers=headers)
    assert r.status_code == 409
    assert r.json()["code"] == 40901

    assert (await async_client.get(f"{URL}/{video.id}/stats")).json()["likes"] == 1

    r = await async_client.delete(f"{URL}/{video.id}/favorite", headers=headers)
    assert r.status_code == 200
    assert r.json()["is_favorite"] is False

    r = await async_client.delete(f"{URL}/{video.id}/favorite", headers=headers)
    assert r.status_code == 404
    assert r.json()["code"] == 40403

    assert (await async_client.get(f"{URL}/{video.id}/stats")).json()["likes"] == 0


@pytest.mark.anyio
async def test_favorite_requires_auth(async_client, video_factory):
    video = await video_factory()
    assert (await async_client.post(f"{URL}/{video.id}/favorite")).status_code == 401


@pytest.mark.anyio
async def test_favorite_unknown_video_is_404(async_client, auth_headers):
    r = await async_client.post(f"{URL}/00000000-0000-4000-8000-000000000000/favorite", headers=auth_headers("bob"))
    assert r.status_code == 404
    assert r.json()["code"] == 40401


@pytest.mark.anyio
async def test_user_favorites_listing_is_self_only(async_client, video_factory, auth_headers):
    a = await video_factory(title="A")
    b = await video_factory(title="B")
    headers = auth_headers("bob")
    await async_client.post(f"{URL}/{a.id}/favorite", headers=headers)
    await async_client.post(f"{URL}/{b.id}/favorite", headers=headers)

    r = await async_client.get("/api/v1/users/bob/favorites", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 2
    assert [f["title"] for f in body["items"]] == ["B", "A"]
    assert r.headers["cache-control"] == "no-store"

    r = await async_client.get("/api/v1/users/bob/favorites", headers=auth_headers("mallory"))
    assert r.status_code == 403


@pytest.mark.anyio
async def test_owner_can_favorite_own_private_video(async_client, video_factory, auth_headers):
    video = await video_factory(owner_id="alice", status=VideoStatus.PRIVATE)
    r = await async_client.post(f"{URL}/{video.id}/favorite", headers=auth_headers("alice"))
    assert r.status_code == 201


@pytest.mark.anyio
async def test_cannot_favorite_someone_elses_private_video(async_client, video_factory, auth_headers):
    video = await video_factory(owner_id="alice", status=VideoStatus.PRIVATE, title="secret title")
    headers = auth_headers("mallory")

    r = await async_client.post(f"{URL}/{video.id}/favorite", headers=headers)
    assert r.status_code == 403
    assert r.json()["code"] == 40301

    r = await async_client.get("/api/v1/users/mallory/favorites", headers=headers)
    assert r.json()["total"] == 0

    r = await async_client.get(f"{URL}/{video.id}/stats", headers=auth_headers("alice"))
    assert r.json()["likes"] == 0
