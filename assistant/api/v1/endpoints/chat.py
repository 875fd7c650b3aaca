"""Chat API: message with canned reply, history, clear."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from assistant.api.v1.dependencies import get_chat_service, get_user_id
from assistant.application.services import ChatService
from assistant.schemas.chat import ChatMessageRequest

router = APIRouter()


@router.post("/message")
async def post_message(
    body: ChatMessageRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> dict[str, Any]:
    data = await service.post_message(user_id, body.message, body.message_type)
    return {"success": True, "message": "Chat message processed successfully", "data": data}


@router.get("/history")
async def get_history(
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[ChatService, Depends(get_chat_service)],
    limit: int = Query(50, ge=1, le=100),
) -> dict[str, Any]:
    messages = await service.history(user_id, limit)
    return {"success": True, "data": {"messages": messages, "count": len(messages)}}


@router.delete("/clear")
async def clear_history(
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> dict[str, Any]:
    await service.clear_history(user_id)
    return {"success": True, "message": "Chat history cleared successfully"}
