"""Health check endpoints.

Learn: Same shape for both services; each adds the one number that tells
you it is doing its job (history length / where uploads go).
"""

from fastapi import APIRouter, Request

from chatdrop import __version__
from chatdrop.schemas.health import HealthRead

chat_router = APIRouter()
upload_router = APIRouter()


@chat_router.get(
    "/health", response_model=HealthRead, response_model_exclude_none=True
)
async def chat_health(request: Request):
    state = request.app.state
    return HealthRead(
        status="ok",
        service="chat",
        version=__version__,
        clients=len(state.hub),
        messages=len(state.chat.history),
    )


@upload_router.get(
    "/health", response_model=HealthRead, response_model_exclude_none=True
)
async def upload_health(request: Request):
    state = request.app.state
    return HealthRead(
        status="ok" if state.uploads.store.directory.is_dir() else "degraded",
        service="uploads",
        version=__version__,
        clients=len(state.hub),
        upload_dir=str(state.uploads.store.directory),
    )
