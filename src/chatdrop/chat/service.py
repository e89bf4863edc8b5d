"""Chat service — what happens when a client sends a chatMessage.

Learn: Record first, then fan out. The payload is opaque: whatever JSON
value the client put in "data" is stored and relayed untouched.
"""

from typing import Any

import structlog
from fastapi import WebSocket

from chatdrop.chat.history import MessageHistory
from chatdrop.events.types import CHAT_MESSAGE
from chatdrop.realtime.hub import Hub

logger = structlog.get_logger()


class ChatService:
    def __init__(self, hub: Hub, history: MessageHistory):
        self.hub = hub
        self.history = history

    def messages(self) -> list[Any]:
        """Full history in arrival order."""
        return self.history.messages

    async def on_message(self, websocket: WebSocket | None, payload: Any) -> int:
        """Append, schedule a save, broadcast to every client (sender too)."""
        async with self.hub.lock:
            self.history.append(payload)
            self.history.schedule_save()
            delivered = await self.hub.broadcast(CHAT_MESSAGE, payload)
        logger.info(
            "chat.message_relayed",
            position=len(self.history),
            delivered=delivered,
        )
        return delivered
