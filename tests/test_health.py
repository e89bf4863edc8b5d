"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_chat_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["service"] == "chat"
    assert data["clients"] == 0
    assert data["messages"] == 0
    assert "version" in data
    assert "upload_dir" not in data


@pytest.mark.asyncio
async def test_upload_health(upload_client, settings):
    resp = await upload_client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["service"] == "uploads"
    assert data["upload_dir"] == str(settings.upload_dir)
    assert "messages" not in data


@pytest.mark.asyncio
async def test_upload_health_degraded_without_directory(upload_client, settings):
    settings.upload_dir.rmdir()
    resp = await upload_client.get("/health")
    assert resp.json()["status"] == "degraded"


def test_health_counts_connected_clients(chat_tc):
    with chat_tc.websocket_connect("/ws"), chat_tc.websocket_connect("/ws"):
        assert chat_tc.get("/health").json()["clients"] == 2
