"""WebSocket connection management."""

from assistant.api.websocket.manager import ConnectionManager

__all__ = ["ConnectionManager"]
