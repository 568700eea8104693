# tests/fixtures/app.py

"""
🧩 App Fixture:
- Builds the real app via `create_app()`
- Swaps the three injection seams: session factory, blob storage, dispatcher
- Returns an HTTP client fixture for integration tests
"""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.storage import LocalFileStorage, get_storage
from app.db.session import get_session_factory
from app.main import create_app
from app.services.background import TaskDispatcher, get_dispatcher


@pytest.fixture()
def storage(tmp_path) -> LocalFileStorage:
    """Blob storage rooted in this test's temporary directory."""
    root = tmp_path / "uploads"
    root.mkdir()
    return LocalFileStorage(root, url_prefix="/uploads")


@pytest.fixture()
async def dispatcher() -> AsyncGenerator[TaskDispatcher, None]:
    """Per-test dispatcher; drained on teardown so no task outlives the DB."""
    d = TaskDispatcher()
    yield d
    await d.drain()


@pytest.fixture()
def app(session_factory, storage: LocalFileStorage, dispatcher: TaskDispatcher) -> FastAPI:
    """
    🧪 The production app with test-specific collaborators.
    """
    application = create_app()
    application.dependency_overrides[get_session_factory] = lambda: session_factory
    application.dependency_overrides[get_storage] = lambda: storage
    application.dependency_overrides[get_dispatcher] = lambda: dispatcher
    return application


@pytest.fixture()
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    🌐 Provides an HTTP client for sending requests to the test app.
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
