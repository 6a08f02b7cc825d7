"""
Chat history models

StoredMessage mirrors a row of the chat_messages table; ChatMessage is
the view returned to the client.
"""

from datetime import datetime, timezone
from pydantic import BaseModel
from typing import Optional

USER_SENDER = "You"
AI_SENDER = "Gemini AI"


class StoredMessage(BaseModel):
    """Row of the chat_messages table"""
    id: str
    content: Optional[str] = None
    image_url: Optional[str] = None
    user_id: str
    is_user: bool
    created_at: Optional[datetime] = None


class ChatMessage(BaseModel):
    """Message as rendered in the chat thread"""
    id: str
    content: str
    image_url: Optional[str] = None
    public_image_url: Optional[str] = None
    sender: str
    timestamp: int
    is_current_user: bool

    @classmethod
    def from_stored(cls, stored: StoredMessage) -> "ChatMessage":
        created_at = stored.created_at or datetime.now(timezone.utc)
        return cls(
            id=stored.id,
            content=stored.content or "",
            image_url=stored.image_url,
            sender=USER_SENDER if stored.is_user else AI_SENDER,
            timestamp=int(created_at.timestamp() * 1000),
            is_current_user=stored.is_user
        )
