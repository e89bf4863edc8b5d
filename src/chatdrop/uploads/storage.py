"""Upload storage — files on disk are the only record.

Learn: Each accepted upload is written as `<ms-since-epoch>-<original name>`
inside the upload directory. The millisecond prefix keeps names from
colliding (two uploads of the same name in the same millisecond still
would) and lets the listing recover the original name by cutting at the
first "-".

Only the final path component of the client-supplied name is used, so a
name like "../../etc/passwd" lands inside the upload directory as "passwd".
"""

import asyncio
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import BinaryIO, Optional

import structlog

from chatdrop.schemas.upload import FileEntry, UploadedFile

logger = structlog.get_logger()

PREFIX_SEPARATOR = "-"


class UploadStore:
    def __init__(self, directory: Path, public_prefix: str = "/uploads"):
        self.directory = Path(directory)
        self.public_prefix = public_prefix.rstrip("/")

    def ensure_directory(self) -> None:
        if not self.directory.exists():
            self.directory.mkdir(parents=True, exist_ok=True)
            logger.info("uploads.directory_created", path=str(self.directory))

    @staticmethod
    def storage_name(original: str, when: datetime) -> str:
        """`<acceptance ms>-<basename>`."""
        marker = int(when.timestamp() * 1000)
        return f"{marker}{PREFIX_SEPARATOR}{safe_basename(original)}"

    @staticmethod
    def original_name(stored: str) -> str:
        """Strip the acceptance-time marker (everything up to the first "-")."""
        _, sep, rest = stored.partition(PREFIX_SEPARATOR)
        return rest if sep else stored

    def public_path(self, stored: str) -> str:
        return f"{self.public_prefix}/{stored}"

    async def store(
        self,
        original: str,
        fileobj: BinaryIO,
        *,
        now: Optional[datetime] = None,
    ) -> UploadedFile:
        """Write the stream to disk and return the acceptance record."""
        accepted_at = now or datetime.now(timezone.utc)
        name = safe_basename(original)
        stored = self.storage_name(name, accepted_at)
        target = self.directory / stored

        await asyncio.to_thread(self._copy, fileobj, target)
        logger.info("uploads.stored", name=name, stored=stored)

        return UploadedFile(
            name=name,
            path=self.public_path(stored),
            uploadedAt=accepted_at,
        )

    def list_files(self) -> list[FileEntry]:
        """Enumerate the directory now. Order is whatever the OS returns.

        Raises OSError if the directory cannot be read.
        """
        entries = []
        with os.scandir(self.directory) as it:
            for entry in it:
                if not entry.is_file():
                    continue
                entries.append(
                    FileEntry(
                        name=self.original_name(entry.name),
                        path=self.public_path(entry.name),
                    )
                )
        return entries

    def _copy(self, fileobj: BinaryIO, target: Path) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as out:
            shutil.copyfileobj(fileobj, out)


def safe_basename(name: str) -> str:
    """Last path component of a client filename, POSIX or Windows style."""
    base = PurePosixPath(PureWindowsPath(name).name).name
    if base in ("", ".", ".."):
        return "upload"
    return base
