"""WebSocket endpoint — the bidirectional event channel.

Learn: Each client connects to /ws and exchanges JSON text frames shaped
like {"type": "<event>", "data": <payload>}. The handler:
1. Registers the socket in the app's Hub
2. Dispatches each incoming event to the app's handler table
   (app.state.event_handlers: event name → async handler(websocket, data))
3. Deregisters the socket when the client goes away

Binary frames, malformed JSON (including NaN / Infinity, which browsers
cannot parse back) and unknown events are logged and dropped. The client
never gets an error back, same as for failed broadcasts.
"""

import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from chatdrop.events.types import PING, PONG
from chatdrop.realtime.hub import Hub

logger = structlog.get_logger()
router = APIRouter()


@router.websocket("/ws")
async def event_websocket(websocket: WebSocket):
    """Long-lived connection, one per browser tab."""
    hub: Hub = websocket.app.state.hub
    handlers = websocket.app.state.event_handlers

    await hub.connect(websocket)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                logger.warning("ws.invalid_frame", hub=hub.name)
                continue
            try:
                msg = decode_frame(raw)
            except ValueError:
                logger.warning("ws.invalid_json", hub=hub.name)
                continue
            if not isinstance(msg, dict) or not isinstance(msg.get("type"), str):
                logger.warning("ws.invalid_envelope", hub=hub.name)
                continue

            event_type = msg["type"]
            if event_type == PING:
                await websocket.send_text(json.dumps({"type": PONG}))
                continue

            handler = handlers.get(event_type)
            if handler is None:
                logger.info("ws.unknown_event", hub=hub.name, event=event_type)
                continue
            await handler(websocket, msg.get("data"))
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def decode_frame(raw: str):
    """Parse a client frame as strict JSON (no NaN / Infinity)."""
    return json.loads(raw, parse_constant=_reject_constant)
