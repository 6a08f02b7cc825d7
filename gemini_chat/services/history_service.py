"""
Chat History Service

Server-side version of the chat screen's send flow: uploads an optional
image, persists the user's message, asks the proxy for a reply and
persists that reply. Also lists a user's stored conversation.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import Settings
from ..errors import ChatHistoryError, ValidationError
from ..models.chat import ChatRequest, ProxyFailure
from ..models.messages import ChatMessage, StoredMessage
from ..supabase_client import SupabaseClient, strip_bucket_prefix
from ..utils.debug_logger import debug_logger
from .chat_service import ChatProxyService

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    """An image attached to an outgoing message"""
    data: bytes
    content_type: str
    filename: Optional[str] = None


class ChatHistoryService:
    """Service for the persisted chat thread of a signed-in user"""

    def __init__(self, settings: Settings, supabase: Optional[SupabaseClient] = None, proxy: Optional[ChatProxyService] = None):
        self.settings = settings
        self.bucket = settings.image_bucket
        self.max_image_bytes = settings.max_image_bytes
        self.supabase = supabase or SupabaseClient(settings)
        self.proxy = proxy or ChatProxyService(settings, storage=self.supabase)

    async def resolve_user_id(self, token: str) -> str:
        user = await self.supabase.get_user(token)
        user_id = user.get("id")
        if not user_id:
            raise ChatHistoryError("Could not resolve the signed-in user")
        return user_id

    async def list_messages(self, token: str, request_id: Optional[str] = None) -> List[ChatMessage]:
        """Return the user's messages, oldest first"""
        user_id = await self.resolve_user_id(token)
        rows = await self.supabase.select_messages(user_id, token)
        debug_logger.log_history(request_id, f"Loaded {len(rows)} messages for user {user_id}")
        return [self._to_view(row) for row in rows]

    def validate_image(self, image: ImageUpload) -> None:
        if not image.content_type or not image.content_type.startswith("image/"):
            raise ValidationError("Please select an image file")
        if len(image.data) > self.max_image_bytes:
            raise ValidationError(f"Image size should be less than {self.max_image_bytes // (1024 * 1024)}MB")

    async def upload_image(self, user_id: str, image: ImageUpload, token: str) -> str:
        """Store the image under <user_id>/<uuid> and return its bucket-prefixed reference"""
        path = f"{user_id}/{uuid.uuid4()}"
        await self.supabase.upload(self.bucket, path, image.data, image.content_type, token)
        return f"{self.bucket}/{path}"

    def public_image_url(self, image_reference: str) -> str:
        return self.supabase.public_url(self.bucket, strip_bucket_prefix(image_reference, self.bucket))

    def _to_view(self, row: dict) -> ChatMessage:
        view = ChatMessage.from_stored(StoredMessage.model_validate(row))
        if view.image_url:
            view.public_image_url = self.public_image_url(view.image_url)
        return view

    async def send_message(self, token: str, message: str, image: Optional[ImageUpload] = None, request_id: Optional[str] = None) -> Tuple[ChatMessage, ChatMessage]:
        """
        Send a message through the full chat flow

        Args:
            token: Bearer token of the signed-in user
            message: Message text (may be empty when an image is attached)
            image: Optional image attachment
            request_id: Optional request ID for tracing

        Returns:
            Tuple of (user_message, ai_message)

        Raises:
            ValidationError: empty message without image, or a bad image
            SupabaseError: a storage, auth or database call failed
            ChatHistoryError: the proxy could not produce a reply
        """
        message = message or ""
        if not message.strip() and image is None:
            raise ValidationError("Message or image is required")
        if image is not None:
            self.validate_image(image)

        user_id = await self.resolve_user_id(token)

        image_reference = None
        if image is not None:
            image_reference = await self.upload_image(user_id, image, token)
            debug_logger.log_history(request_id, f"Uploaded image to {image_reference}")

        user_row = await self.supabase.insert_message({
            "id": str(uuid.uuid4()),
            "content": message,
            "image_url": image_reference,
            "user_id": user_id,
            "is_user": True,
        }, token)

        result = await self.proxy.process_request(
            ChatRequest(message=message, image_url=image_reference),
            token,
            request_id
        )
        if isinstance(result, ProxyFailure):
            raise ChatHistoryError(result.error_message)

        ai_row = await self.supabase.insert_message({
            "id": str(uuid.uuid4()),
            "content": result.response_text,
            "user_id": user_id,
            "is_user": False,
        }, token)

        logger.info(f"Stored exchange for user {user_id}")
        return self._to_view(user_row), self._to_view(ai_row)
