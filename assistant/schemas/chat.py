"""Chat request schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessageRequest(BaseModel):
    """Body for POST /chat/message."""

    message: str = Field(..., min_length=1, max_length=1000)
    message_type: Literal["text", "voice", "command"] = "text"
