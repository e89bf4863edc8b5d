"""Broadcast hub — registry of connected WebSockets plus fan-out.

Learn: Broadcasting is fire-and-forget. A client whose send fails is
dropped from the registry and the failure is logged; nobody else notices.
If a client misses an event it can always re-read state over HTTP
(GET /messages, GET /files).

`lock` serializes event processing. Services hold it while they record
an event and broadcast it, so the order events are recorded in is the
order every client receives them.
"""

import asyncio
import json
from typing import Any

import structlog
from fastapi import WebSocket

logger = structlog.get_logger()


class Hub:
    """Process-wide set of connected clients."""

    def __init__(self, name: str = "hub"):
        self.name = name
        self.lock = asyncio.Lock()
        self._clients: set[WebSocket] = set()

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, websocket: WebSocket) -> bool:
        return websocket in self._clients

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the socket and register it."""
        await websocket.accept()
        self._clients.add(websocket)
        logger.info("hub.client_connected", hub=self.name, clients=len(self._clients))

    def disconnect(self, websocket: WebSocket) -> None:
        """Deregister a socket. Unknown sockets are ignored."""
        if websocket in self._clients:
            self._clients.discard(websocket)
            logger.info(
                "hub.client_disconnected", hub=self.name, clients=len(self._clients)
            )

    async def broadcast(self, event_type: str, data: Any) -> int:
        """Send an event to every registered client, sender included.

        Returns the number of clients the event was delivered to.
        """
        message = encode_event(event_type, data)
        clients = list(self._clients)
        results = await asyncio.gather(
            *(ws.send_text(message) for ws in clients),
            return_exceptions=True,
        )

        delivered = 0
        for ws, result in zip(clients, results):
            if isinstance(result, Exception):
                logger.warning(
                    "hub.send_failed",
                    hub=self.name,
                    event=event_type,
                    error=str(result),
                )
                self._clients.discard(ws)
            else:
                delivered += 1
        return delivered


def encode_event(event_type: str, data: Any) -> str:
    """Wire format for every server → client event."""
    return json.dumps({"type": event_type, "data": data})
