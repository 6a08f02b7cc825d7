"""
AI Service for Gemini Chat

This service owns the call to the Gemini generateContent endpoint:
URL construction, the API key credential and upstream error mapping.
"""

import logging
from typing import Optional

import httpx

from ..config import Settings
from ..errors import ConfigurationError, ProviderError
from ..models.gemini import GenerateContentRequest, GenerateContentResponse
from ..utils.debug_logger import debug_logger

logger = logging.getLogger(__name__)


class GeminiService:
    """Service for the hosted Gemini generative-language API"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the Gemini service from injected settings"""
        self.api_key = settings.gemini_api_key
        self.model = settings.gemini_model
        self.base_url = settings.gemini_base_url.rstrip("/")
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("Missing Gemini API key")
        return self.api_key

    async def generate_content(self, payload: GenerateContentRequest, request_id: Optional[str] = None) -> GenerateContentResponse:
        """
        Send a payload to Gemini and parse the candidates structure

        Args:
            payload: Composed provider payload
            request_id: Optional request ID for logging consistency

        Returns:
            Parsed GenerateContentResponse

        Raises:
            ConfigurationError: if no API key is configured
            ProviderError: if Gemini answers with a non-2xx status
        """
        api_key = self.require_api_key()

        debug_logger.log_gemini(request_id, f"Calling Gemini with model: {self.model}, parts: {len(payload.parts)}")
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                self.endpoint,
                params={"key": api_key},
                json=payload.to_payload(),
                headers={"Content-Type": "application/json"}
            )
        debug_logger.log_gemini(request_id, f"Gemini API call completed with status {response.status_code}")

        if not response.is_success:
            logger.warning(f"Gemini returned {response.status_code}")
            raise ProviderError(response.status_code, response.text)

        return GenerateContentResponse.model_validate(response.json())
