"""Realtime chat socket: each message is echoed back with a canned AI reply.

Connect with ?user_id=...; send {"message": "..."} frames. Replies are
"new_message" frames (user echo, then AI reply) delivered to every socket
of the same user; failures produce an "error" frame and keep the socket open.
{"type": "typing_start"} / {"type": "typing_stop"} frames are relayed to the
user's other sockets as "user_typing" / "user_stopped_typing".
"""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from assistant.api.v1.dependencies import is_valid_user_id
from assistant.domain.exceptions import AssistantException

logger = logging.getLogger(__name__)

router = APIRouter()

TYPING_EVENTS = {
    "typing_start": "user_typing",
    "typing_stop": "user_stopped_typing",
}


async def _reject_websocket(websocket: WebSocket, reason: str, code: int = 1008) -> None:
    """Accept then immediately close with code/reason so client gets a proper close frame."""
    await websocket.accept()
    await websocket.close(code=code, reason=reason)


@router.websocket("")
async def chat_socket(websocket: WebSocket) -> None:
    manager = websocket.app.state.ws_manager
    chat = websocket.app.state.chat_service
    user_id = websocket.query_params.get("user_id")
    if not is_valid_user_id(user_id):
        await _reject_websocket(websocket, "User ID required")
        return
    await manager.connect(websocket, user_id)
    await websocket.send_json({"type": "connection_confirmed", "user_id": user_id})
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except ValueError:
                data = None
            if not isinstance(data, dict):
                data = {}
            # Typing notices skip the rate limiter and the chat service
            frame_type = data.get("type")
            relayed = TYPING_EVENTS.get(frame_type) if isinstance(frame_type, str) else None
            if relayed:
                await manager.send_to_user(
                    user_id, {"type": relayed, "user_id": user_id}, exclude=websocket
                )
                continue
            try:
                result = await chat.respond_realtime(user_id, data.get("message"))
            except AssistantException as e:
                await websocket.send_json(
                    {"type": "error", "error": e.error_code, "message": e.message}
                )
                continue
            await manager.send_to_user(user_id, {**result["user_message"], "type": "new_message"})
            await manager.send_to_user(user_id, {**result["ai_message"], "type": "new_message"})
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(websocket)
