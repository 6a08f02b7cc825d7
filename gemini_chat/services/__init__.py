"""
Services layer for Gemini Chat

This module contains all business logic services that handle
the core functionality of the application.
"""

from .chat_service import ChatProxyService
from .ai_service import GeminiService
from .history_service import ChatHistoryService, ImageUpload

__all__ = [
    "ChatProxyService",
    "GeminiService",
    "ChatHistoryService",
    "ImageUpload"
]
