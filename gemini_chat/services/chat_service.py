"""
Chat Proxy Service

This service implements the gemini-chat proxy: it parses the request,
optionally resolves an image from object storage, composes the Gemini
payload, calls the provider and extracts the reply text. Every failure is
caught once in process() and returned as a ProxyFailure; mapping results
to status codes is left to the transport layer.
"""

import base64
import json
import logging
from typing import Optional

import httpx

from ..config import Settings
from ..errors import AuthorizationError, StorageError, SupabaseError
from ..models.chat import ChatRequest, ProxyFailure, ProxyResult, ProxySuccess
from ..models.gemini import GenerateContentRequest
from ..supabase_client import SupabaseClient, strip_bucket_prefix
from ..utils.debug_logger import debug_logger
from .ai_service import GeminiService

logger = logging.getLogger(__name__)

# Not sniffed from the downloaded bytes
IMAGE_MIME_TYPE = "image/jpeg"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token part of an 'Authorization: Bearer <token>' header, or None"""
    if not authorization or "Bearer " not in authorization:
        return None
    token = authorization.split("Bearer ", 1)[1].strip()
    return token or None


def parse_chat_request(body: bytes) -> ChatRequest:
    """Parse a raw JSON body into a ChatRequest"""
    data = json.loads(body)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return ChatRequest.model_validate(data)


def build_payload(message: str) -> GenerateContentRequest:
    """Single user turn holding one text part"""
    return GenerateContentRequest.from_text(message)


class ChatProxyService:
    """Service that relays chat messages (and optional images) to Gemini"""

    def __init__(self, settings: Settings, storage: Optional[SupabaseClient] = None, gemini: Optional[GeminiService] = None):
        """Initialize the proxy with injected settings and adapters"""
        self.settings = settings
        self.bucket = settings.image_bucket
        self.storage = storage or SupabaseClient(settings)
        self.gemini = gemini or GeminiService(settings)

    async def process(self, body: bytes, authorization: Optional[str] = None, request_id: Optional[str] = None) -> ProxyResult:
        """
        Handle one gemini-chat request end-to-end

        Args:
            body: Raw JSON request body
            authorization: Value of the Authorization header, if any
            request_id: Optional request ID for tracing

        Returns:
            ProxySuccess with the reply text, or ProxyFailure with the error message
        """
        try:
            chat_request = parse_chat_request(body)
            reply = await self.generate_reply(chat_request, extract_bearer_token(authorization), request_id)
        except Exception as e:
            return self._failure(e, request_id)
        return ProxySuccess(response_text=reply)

    async def process_request(self, chat_request: ChatRequest, token: Optional[str] = None, request_id: Optional[str] = None) -> ProxyResult:
        """Same boundary as process() for callers that already hold a parsed request"""
        try:
            reply = await self.generate_reply(chat_request, token, request_id)
        except Exception as e:
            return self._failure(e, request_id)
        return ProxySuccess(response_text=reply)

    async def generate_reply(self, chat_request: ChatRequest, token: Optional[str], request_id: Optional[str] = None) -> str:
        """Compose the payload, call Gemini and return the joined reply text"""
        payload = await self.compose_payload(chat_request, token, request_id)
        response = await self.gemini.generate_content(payload, request_id)
        reply = response.reply_text()
        debug_logger.log_proxy(request_id, f"Reply length: {len(reply)} characters")
        return reply

    async def compose_payload(self, chat_request: ChatRequest, token: Optional[str], request_id: Optional[str] = None) -> GenerateContentRequest:
        """
        Build the provider payload for a request

        The API key is checked first so a misconfigured deployment fails
        before any storage traffic.
        """
        self.gemini.require_api_key()

        message = chat_request.effective_message
        debug_logger.log_proxy(
            request_id,
            f"Composing payload for message: '{message[:50]}{'...' if len(message) > 50 else ''}'",
            has_image=bool(chat_request.image_url)
        )
        payload = build_payload(message)

        if chat_request.image_url:
            if not token:
                raise AuthorizationError("Missing Authorization header")
            image_bytes = await self.fetch_image(chat_request.image_url, token, request_id)
            payload.add_inline_image(base64.b64encode(image_bytes).decode("ascii"), IMAGE_MIME_TYPE)

        return payload

    async def fetch_image(self, image_url: str, token: str, request_id: Optional[str] = None) -> bytes:
        """Download a bucket-prefixed image reference from object storage"""
        path = strip_bucket_prefix(image_url, self.bucket)
        debug_logger.log_storage(request_id, f"Downloading {self.bucket}/{path}")
        try:
            return await self.storage.download(self.bucket, path, token)
        except (SupabaseError, httpx.HTTPError) as e:
            raise StorageError(f"Error fetching image: {e}") from e

    def _failure(self, error: Exception, request_id: Optional[str]) -> ProxyFailure:
        logger.error(f"Error: {error}")
        debug_logger.log_proxy(request_id, f"Request failed: {type(error).__name__}: {error}")
        return ProxyFailure(error_message=str(error))
