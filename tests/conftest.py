"""Test fixtures — every app gets its own tmp directories.

Learn: Two ways of talking to an app:

1. `client` / `upload_client` — httpx AsyncClient over ASGITransport.
   Fast, no lifespan (history is not loaded, upload dir not created
   unless the fixture does it), good for plain HTTP routes.
2. `chat_tc` / `upload_tc` — Starlette TestClient used as a context
   manager. Runs the lifespan and speaks WebSocket, so it is what the
   broadcast scenarios use.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from chatdrop.config import Settings
from chatdrop.main import create_chat_app, create_upload_app


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        messages_file=tmp_path / "messages.json",
        upload_dir=tmp_path / "uploads",
        public_dir=tmp_path / "public",
    )


@pytest.fixture()
def chat_app(settings):
    return create_chat_app(settings)


@pytest.fixture()
def upload_app(settings):
    app = create_upload_app(settings)
    app.state.uploads.store.ensure_directory()
    return app


@pytest_asyncio.fixture()
async def client(chat_app):
    transport = ASGITransport(app=chat_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def upload_client(upload_app):
    transport = ASGITransport(app=upload_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def chat_tc(chat_app):
    with TestClient(chat_app) as tc:
        yield tc


@pytest.fixture()
def upload_tc(upload_app):
    with TestClient(upload_app) as tc:
        yield tc
