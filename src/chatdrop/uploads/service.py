"""Upload service — store, then announce.

Learn: The broadcast happens only after the bytes are on disk, so a
client reacting to newFileUploaded can fetch the file straight away.
"""

from typing import BinaryIO

import structlog

from chatdrop.events.types import NEW_FILE_UPLOADED
from chatdrop.realtime.hub import Hub
from chatdrop.schemas.upload import FileEntry, UploadedFile
from chatdrop.uploads.storage import UploadStore

logger = structlog.get_logger()


class UploadService:
    def __init__(self, hub: Hub, store: UploadStore):
        self.hub = hub
        self.store = store

    async def accept(self, filename: str, fileobj: BinaryIO) -> UploadedFile:
        async with self.hub.lock:
            record = await self.store.store(filename, fileobj)
            delivered = await self.hub.broadcast(
                NEW_FILE_UPLOADED, record.model_dump(mode="json")
            )
        logger.info("uploads.announced", name=record.name, delivered=delivered)
        return record

    def list_files(self) -> list[FileEntry]:
        return self.store.list_files()
