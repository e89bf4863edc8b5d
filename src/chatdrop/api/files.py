"""Upload and listing routes.

Learn: /upload reads the multipart form itself instead of declaring an
UploadFile parameter. That way a missing (or non-file) `myFile` field is
a plain-text 400 rather than FastAPI's 422 validation body.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from starlette.datastructures import UploadFile

from chatdrop.schemas.upload import FileEntry
from chatdrop.uploads.service import UploadService

logger = structlog.get_logger()
router = APIRouter()

UPLOAD_FIELD = "myFile"


def get_uploads(request: Request) -> UploadService:
    return request.app.state.uploads


@router.post("/upload", response_class=PlainTextResponse)
async def upload_file(
    request: Request,
    uploads: UploadService = Depends(get_uploads),
):
    """Store one file from the `myFile` field and broadcast it."""
    async with request.form() as form:
        upload = form.get(UPLOAD_FIELD)
        if not isinstance(upload, UploadFile) or not upload.filename:
            logger.info("uploads.rejected", reason="missing field")
            return PlainTextResponse("No file uploaded.", status_code=400)

        await uploads.accept(upload.filename, upload.file)

    return PlainTextResponse("File uploaded successfully.")


@router.get("/files", response_model=list[FileEntry])
async def list_files(uploads: UploadService = Depends(get_uploads)):
    """Files currently in the upload directory, original names restored."""
    try:
        return uploads.list_files()
    except OSError as e:
        logger.error("uploads.scan_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Unable to scan files")
