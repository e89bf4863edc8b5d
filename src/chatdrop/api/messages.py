"""Chat history route.

Learn: No pagination. Clients call this once on page load to replay the
history, then follow the WebSocket for new messages.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from chatdrop.chat.service import ChatService

router = APIRouter()


def get_chat(request: Request) -> ChatService:
    return request.app.state.chat


@router.get("/messages")
async def list_messages(chat: ChatService = Depends(get_chat)) -> list[Any]:
    """Every message ever relayed, in arrival order."""
    return chat.messages()
