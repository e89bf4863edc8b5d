"""MessageHistory — load / save / failure policy."""

import json

import pytest
from structlog.testing import capture_logs

from chatdrop.chat.history import MessageHistory


@pytest.mark.asyncio
async def test_load_missing_file_creates_empty_array(tmp_path):
    path = tmp_path / "messages.json"
    history = MessageHistory(path)

    await history.load()

    assert history.messages == []
    assert json.loads(path.read_text()) == []


@pytest.mark.asyncio
async def test_load_existing_file_keeps_order(tmp_path):
    path = tmp_path / "messages.json"
    path.write_text(json.dumps(["first", {"user": "b", "text": "second"}, 3]))
    history = MessageHistory(path)

    await history.load()

    assert history.messages == ["first", {"user": "b", "text": "second"}, 3]


@pytest.mark.asyncio
async def test_load_corrupt_file_starts_empty_and_logs(tmp_path):
    path = tmp_path / "messages.json"
    path.write_text("[\"half a message")
    history = MessageHistory(path)

    with capture_logs() as logs:
        await history.load()

    assert history.messages == []
    assert any(entry["event"] == "history.load_failed" for entry in logs)


@pytest.mark.asyncio
async def test_load_non_array_counts_as_corrupt(tmp_path):
    path = tmp_path / "messages.json"
    path.write_text(json.dumps({"messages": ["hi"]}))
    history = MessageHistory(path)

    await history.load()

    assert history.messages == []


@pytest.mark.asyncio
async def test_save_is_pretty_printed(tmp_path):
    path = tmp_path / "messages.json"
    history = MessageHistory(path)
    history.append("hello")
    history.append({"text": "world"})

    await history.save()

    assert path.read_text() == json.dumps(["hello", {"text": "world"}], indent=2)


@pytest.mark.asyncio
async def test_save_failure_is_logged_and_memory_kept(tmp_path):
    # Target path is a directory, so replacing it fails.
    target = tmp_path / "messages.json"
    target.mkdir()
    history = MessageHistory(target)
    history.append("kept")

    with capture_logs() as logs:
        await history.save()

    assert history.messages == ["kept"]
    assert any(entry["event"] == "history.save_failed" for entry in logs)
    assert not [p for p in tmp_path.iterdir() if p.name.endswith(".tmp")]


@pytest.mark.asyncio
async def test_overlapping_saves_end_with_latest_state(tmp_path):
    path = tmp_path / "messages.json"
    history = MessageHistory(path)

    for i in range(20):
        history.append(i)
        history.schedule_save()
    await history.flush()

    assert json.loads(path.read_text()) == list(range(20))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["messages.json"]


@pytest.mark.asyncio
async def test_flush_without_pending_saves_is_noop(tmp_path):
    history = MessageHistory(tmp_path / "messages.json")
    await history.flush()
    assert not (tmp_path / "messages.json").exists()


@pytest.mark.asyncio
async def test_load_file_with_nan_counts_as_corrupt(tmp_path):
    path = tmp_path / "messages.json"
    path.write_text("[\n  \"ok\",\n  NaN\n]")
    history = MessageHistory(path)

    await history.load()

    assert history.messages == []


@pytest.mark.asyncio
async def test_save_refuses_nan_and_keeps_last_good_file(tmp_path):
    path = tmp_path / "messages.json"
    history = MessageHistory(path)
    history.append("ok")
    await history.save()

    history.append(float("nan"))
    with capture_logs() as logs:
        await history.save()

    assert json.loads(path.read_text()) == ["ok"]
    assert any(entry["event"] == "history.save_failed" for entry in logs)
