"""Pydantic schemas for uploaded files.

Learn: UploadedFile is what gets broadcast as newFileUploaded right after
an upload is accepted. FileEntry is what GET /files derives from the
directory listing; there is no timestamp because the listing only knows
file names.
"""

from datetime import datetime

from pydantic import BaseModel


class UploadedFile(BaseModel):
    name: str
    path: str
    uploadedAt: datetime


class FileEntry(BaseModel):
    name: str
    path: str
