"""FastAPI application factories.

Learn: App factory pattern — create_chat_app() / create_upload_app()
return configured FastAPI instances. Lifespan manages startup/shutdown
(history load + flush, upload directory creation). Middleware, CORS,
routers, the /ws channel and static files are all registered here.

Shared state lives on app.state:
- hub            — connected WebSockets for this app
- event_handlers — client event name → async handler(websocket, data)
- chat / uploads — the service object the routes call into
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chatdrop import __version__
from chatdrop.api import chat_api_router, upload_api_router
from chatdrop.chat.history import MessageHistory
from chatdrop.chat.service import ChatService
from chatdrop.config import Settings, settings as default_settings
from chatdrop.events.types import CHAT_MESSAGE
from chatdrop.log import configure_logging
from chatdrop.middleware.request_id import RequestIdMiddleware
from chatdrop.middleware.security import SecurityHeadersMiddleware
from chatdrop.realtime.hub import Hub
from chatdrop.realtime.websocket import router as ws_router
from chatdrop.uploads.service import UploadService
from chatdrop.uploads.storage import UploadStore

logger = structlog.get_logger()


def _base_app(service: str, settings: Settings, lifespan) -> FastAPI:
    configure_logging(settings)

    app = FastAPI(
        title=f"chatdrop {service}",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.hub = Hub(name=service)
    app.state.event_handlers = {}

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


def _mount_public(app: FastAPI, settings: Settings) -> None:
    # Registered last: a mount at "/" would otherwise shadow every route.
    if not settings.public_dir.is_dir():
        logger.info("chatdrop.no_public_dir", path=str(settings.public_dir))
        return
    app.mount(
        "/",
        StaticFiles(directory=settings.public_dir, html=True),
        name="public",
    )


def create_chat_app(settings: Optional[Settings] = None) -> FastAPI:
    """Chat relay: /ws chatMessage fan-out, GET /messages, messages.json."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        history: MessageHistory = app.state.chat.history
        logger.info(
            "chatdrop.starting",
            service="chat",
            version=__version__,
            port=settings.port,
        )
        await history.load()

        yield

        logger.info("chatdrop.shutdown", service="chat")
        await history.flush()

    app = _base_app("chat", settings, lifespan)
    chat = ChatService(app.state.hub, MessageHistory(settings.messages_file))
    app.state.chat = chat
    app.state.event_handlers[CHAT_MESSAGE] = chat.on_message

    app.include_router(chat_api_router)
    app.include_router(ws_router)
    _mount_public(app, settings)
    return app


def create_upload_app(settings: Optional[Settings] = None) -> FastAPI:
    """Upload broadcaster: POST /upload, GET /files, /uploads/* static."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "chatdrop.starting",
            service="uploads",
            version=__version__,
            port=settings.port,
        )
        app.state.uploads.store.ensure_directory()

        yield

        logger.info("chatdrop.shutdown", service="uploads")

    app = _base_app("uploads", settings, lifespan)
    store = UploadStore(settings.upload_dir, public_prefix="/uploads")
    app.state.uploads = UploadService(app.state.hub, store)

    app.include_router(upload_api_router)
    app.include_router(ws_router)
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )
    _mount_public(app, settings)
    return app


# Default app instances (used by uvicorn: chatdrop.main:chat_app)
chat_app = create_chat_app()
upload_app = create_upload_app()
