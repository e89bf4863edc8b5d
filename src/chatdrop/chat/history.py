"""Message history — in-memory list with a best-effort JSON file behind it.

Learn: Memory is the source of truth. The file only lags behind it:
every new message schedules a full rewrite of messages.json and the
request path never waits for the disk.

Failure policy:
- Unreadable / corrupt file at startup → start empty (the old content
  is lost on the next save).
- Save fails → log it and carry on. No retry, no rollback of memory.

Overlapping saves are serialized by a lock and each one writes to a temp
file that is os.replace()d over the real one, so the file on disk is
always a complete array and a newer snapshot never loses to an older one.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()


class MessageHistory:
    """Ordered chat history persisted to a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.messages: list[Any] = []
        self._save_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self.messages)

    async def load(self) -> None:
        """Read the history file once at startup."""
        if not self.path.exists():
            logger.info("history.missing", path=str(self.path))
            self.messages = []
            await self.save()
            return

        try:
            data = await asyncio.to_thread(self._read)
        except (OSError, ValueError) as e:
            logger.error("history.load_failed", path=str(self.path), error=str(e))
            self.messages = []
            return

        self.messages = data
        logger.info("history.loaded", path=str(self.path), count=len(data))

    def append(self, payload: Any) -> None:
        self.messages.append(payload)

    async def save(self) -> None:
        """Overwrite the file with the current list. Never raises."""
        async with self._save_lock:
            snapshot = list(self.messages)
            try:
                await asyncio.to_thread(self._write, snapshot)
            except (OSError, TypeError, ValueError) as e:
                logger.error("history.save_failed", path=str(self.path), error=str(e))
                return
        logger.debug("history.saved", path=str(self.path), count=len(snapshot))

    def schedule_save(self) -> asyncio.Task:
        """Start a save in the background and return its task."""
        task = asyncio.create_task(self.save())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def flush(self) -> None:
        """Wait for every scheduled save to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    # ─── Blocking helpers (run in a worker thread) ──────

    def _read(self) -> list[Any]:
        with self.path.open(encoding="utf-8") as fh:
            data = json.load(fh, parse_constant=_reject_constant)
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        return data

    def _write(self, snapshot: list[Any]) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(
                    snapshot, fh, indent=2, ensure_ascii=False, allow_nan=False
                )
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")
