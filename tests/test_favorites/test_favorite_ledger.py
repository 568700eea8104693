# tests/test_favorites/test_favorite_ledger.py

import uuid

import pytest
from sqlalchemy import delete, update

from app.core.exceptions import (
    AlreadyFavoritedException,
    FavoriteNotFoundException,
    VideoForbiddenException,
    VideoNotFoundException,
)
from app.db.models import Favorite, Video
from app.schemas.enums import VideoStatus
from app.services.favorite_ledger import FavoriteLedger
from app.services.video_service import VideoService
from tests.utils.factory import fetch_video


@pytest.fixture
def ledger(session_factory) -> FavoriteLedger:
    return FavoriteLedger(session_factory)


@pytest.mark.anyio
async def test_add_creates_favorite_and_increments_likes(ledger, video_factory, session_factory):
    video = await video_factory(title="Fav me", duration=30.0)

    favorite = await ledger.add("bob", video.id)

    assert favorite.title == "Fav me"
    assert favorite.duration == 30.0
    assert await ledger.is_favorite("bob", video.id)
    assert (await fetch_video(session_factory, video.id)).likes == 1


@pytest.mark.anyio
async def test_second_add_conflicts_without_double_counting(ledger, video_factory, session_factory):
    video = await video_factory()
    await ledger.add("bob", video.id)

    with pytest.raises(AlreadyFavoritedException):
        await ledger.add("bob", video.id)

    assert await ledger.count_for_video(video.id) == 1
    assert (await fetch_video(session_factory, video.id)).likes == 1


@pytest.mark.anyio
async def test_add_losing_the_unique_race_rolls_back_the_increment(ledger, video_factory, session_factory, monkeypatch):
    """Two adds that both pass the existence check: the unique constraint picks one winner."""
    video = await video_factory()
    await ledger.add("bob", video.id)

    # The look-up no longer sees bob's row, as if it had been inserted concurrently.
    monkeypatch.setattr(
        FavoriteLedger,
        "_pair",
        staticmethod(lambda user_id, video_id: (Favorite.user_id == f"{user_id}-unseen", Favorite.video_id == video_id)),
    )

    with pytest.raises(AlreadyFavoritedException):
        await ledger.add("bob", video.id)

    assert (await fetch_video(session_factory, video.id)).likes == 1


@pytest.mark.anyio
async def test_likes_track_distinct_users(ledger, video_factory, session_factory):
    video = await video_factory()
    for user in ("a", "b", "c"):
        await ledger.add(user, video.id)
    await ledger.remove("b", video.id)

    assert await ledger.count_for_video(video.id) == 2
    assert (await fetch_video(session_factory, video.id)).likes == 2


@pytest.mark.anyio
async def test_add_unknown_video_is_404(ledger):
    with pytest.raises(VideoNotFoundException):
        await ledger.add("bob", uuid.uuid4())


@pytest.mark.anyio
async def test_remove_without_favorite_is_404(ledger, video_factory, session_factory):
    video = await video_factory(likes=4)

    with pytest.raises(FavoriteNotFoundException):
        await ledger.remove("bob", video.id)

    assert (await fetch_video(session_factory, video.id)).likes == 4


@pytest.mark.anyio
async def test_remove_never_drives_likes_negative(ledger, video_factory, session_factory):
    video = await video_factory()
    await ledger.add("bob", video.id)

    # Counter drifted to zero out of band
    async with session_factory.begin() as session:
        await session.execute(update(Video).where(Video.id == video.id).values(likes=0))

    await ledger.remove("bob", video.id)

    assert not await ledger.is_favorite("bob", video.id)
    assert (await fetch_video(session_factory, video.id)).likes == 0


@pytest.mark.anyio
async def test_list_for_user_newest_first(ledger, video_factory):
    first = await video_factory(title="first")
    second = await video_factory(title="second")
    await ledger.add("bob", first.id)
    await ledger.add("bob", second.id)
    await ledger.add("carol", first.id)

    items, total = await ledger.list_for_user("bob")

    assert total == 2
    assert [f.title for f in items] == ["second", "first"]


@pytest.mark.anyio
async def test_is_favorite_for_anonymous_is_false(ledger, video_factory):
    video = await video_factory()
    assert await ledger.is_favorite(None, video.id) is False


@pytest.mark.anyio
async def test_add_private_video_of_someone_else_is_forbidden(ledger, video_factory, session_factory):
    video = await video_factory(owner_id="alice", status=VideoStatus.PRIVATE, title="secret title")

    with pytest.raises(VideoForbiddenException):
        await ledger.add("mallory", video.id)

    items, total = await ledger.list_for_user("mallory")
    assert (items, total) == ([], 0)
    assert (await fetch_video(session_factory, video.id)).likes == 0


@pytest.mark.anyio
async def test_add_racing_a_delete_is_404_not_conflict(ledger, video_factory, session_factory, monkeypatch):
    video = await video_factory()

    # The video row disappears between the ledger's load and its insert.
    async with session_factory.begin() as session:
        await session.execute(delete(Video).where(Video.id == video.id))

    async def _stale_load(session, video_id, **kwargs):
        return video

    monkeypatch.setattr(VideoService, "load", staticmethod(_stale_load))

    with pytest.raises(VideoNotFoundException):
        await ledger.add("bob", video.id)

    assert await ledger.count_for_video(video.id) == 0
