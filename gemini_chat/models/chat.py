"""
Chat-related data models

These models define the wire format of the gemini-chat endpoint and
the typed result the proxy service hands back to the transport layer.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union

DEFAULT_MESSAGE = "Hello"


class ChatRequest(BaseModel):
    """Request body for the gemini-chat endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @property
    def effective_message(self) -> str:
        """Message text with the empty/missing case replaced by the default greeting"""
        return self.message or DEFAULT_MESSAGE


class ChatResponse(BaseModel):
    """Successful proxy response"""
    response: str


class ChatErrorResponse(BaseModel):
    """Failed proxy response"""
    error: str


class ProxySuccess(BaseModel):
    response_text: str


class ProxyFailure(BaseModel):
    error_message: str


ProxyResult = Union[ProxySuccess, ProxyFailure]
