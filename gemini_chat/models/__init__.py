"""
Data models for Gemini Chat

This module contains all Pydantic models for data validation and serialization.
"""

from .chat import ChatRequest, ChatResponse, ChatErrorResponse, ProxySuccess, ProxyFailure, ProxyResult
from .gemini import GenerateContentRequest, GenerateContentResponse, TextPart, InlineDataPart, InlineData
from .messages import StoredMessage, ChatMessage

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ChatErrorResponse",
    "ProxySuccess",
    "ProxyFailure",
    "ProxyResult",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "TextPart",
    "InlineDataPart",
    "InlineData",
    "StoredMessage",
    "ChatMessage"
]
