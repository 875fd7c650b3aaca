"""WebSocket connection manager.

Holds active connections per user (a user may have several tabs open) and
delivers messages to all of a user's connections. Use via
app.state.ws_manager (set in lifespan).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks WebSocket connections per user; lock-protected for concurrent access."""

    def __init__(self) -> None:
        self._connections_by_user: dict[str, set[WebSocket]] = {}
        self._websocket_to_user: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: str) -> None:
        """Accept and register a connection for user_id."""
        await websocket.accept()
        async with self._lock:
            self._connections_by_user.setdefault(user_id, set()).add(websocket)
            self._websocket_to_user[websocket] = user_id
        logger.info("WebSocket connected for user: %s", user_id)

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a connection (call on disconnect)."""
        async with self._lock:
            user_id = self._websocket_to_user.pop(websocket, None)
            if user_id and user_id in self._connections_by_user:
                conns = self._connections_by_user[user_id]
                conns.discard(websocket)
                if not conns:
                    del self._connections_by_user[user_id]
        logger.info("WebSocket disconnected for user: %s", user_id)

    async def send_to_user(
        self,
        user_id: str,
        message: dict[str, Any],
        exclude: WebSocket | None = None,
    ) -> None:
        """Send a JSON message to every connection of user_id except `exclude`.

        Connections that fail to receive are dropped.
        """
        async with self._lock:
            snapshot = [
                ws for ws in self._connections_by_user.get(user_id, set()) if ws is not exclude
            ]
        dead: list[WebSocket] = []
        for websocket in snapshot:
            try:
                await websocket.send_json(message)
            except (RuntimeError, OSError, WebSocketDisconnect):
                dead.append(websocket)
        for websocket in dead:
            await self.disconnect(websocket)

    async def connection_count(self) -> int:
        async with self._lock:
            return len(self._websocket_to_user)
