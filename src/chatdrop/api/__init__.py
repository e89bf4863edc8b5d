"""API route aggregation.

Each service gets its own router; main.py mounts the right one. Routes
live at the root (no /api prefix) because browser clients already call
/messages, /files and /upload directly.
"""

from fastapi import APIRouter

from chatdrop.api.files import router as files_router
from chatdrop.api.health import chat_router as chat_health_router
from chatdrop.api.health import upload_router as upload_health_router
from chatdrop.api.messages import router as messages_router

chat_api_router = APIRouter()
chat_api_router.include_router(chat_health_router, tags=["health"])
chat_api_router.include_router(messages_router, tags=["messages"])

upload_api_router = APIRouter()
upload_api_router.include_router(upload_health_router, tags=["health"])
upload_api_router.include_router(files_router, tags=["files"])
