"""
Pytest configuration and shared fixtures for Gemini Chat API tests.
"""

import json

import httpx
import pytest

from gemini_chat.config import Settings
from gemini_chat.services.ai_service import GeminiService
from gemini_chat.services.chat_service import ChatProxyService
from gemini_chat.supabase_client import SupabaseClient


class FakeUpstream:
    """Records outbound requests and answers them from a handler function."""

    def __init__(self, handler):
        self.requests = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def called(self) -> bool:
        return bool(self.requests)

    def last_json(self):
        return json.loads(self.requests[-1].content)


def gemini_reply(*texts):
    """Build a Gemini generateContent body with one candidate holding the given texts."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [{"text": text} for text in texts],
                    "role": "model"
                },
                "finishReason": "STOP"
            }
        ],
        "usageMetadata": {"promptTokenCount": 3, "candidatesTokenCount": 2}
    }


@pytest.fixture
def fake_upstream():
    """Factory for FakeUpstream instances."""
    return FakeUpstream


@pytest.fixture
def test_settings():
    """Settings with every upstream configured and no environment access."""
    return Settings(
        gemini_api_key="test-gemini-key",
        gemini_model="gemini-2.0-flash",
        gemini_base_url="https://generativelanguage.googleapis.com/v1beta",
        supabase_url="https://project.supabase.co",
        supabase_service_role_key="service-role-key",
        supabase_anon_key=None,
        image_bucket="chat_images",
        max_image_bytes=5 * 1024 * 1024,
        http_timeout_seconds=None,
        debug=False
    )


@pytest.fixture
def gemini_upstream():
    """Gemini endpoint answering 'Hi there' in two parts."""
    return FakeUpstream(lambda request: httpx.Response(200, json=gemini_reply("Hi", "there")))


@pytest.fixture
def storage_upstream():
    """Supabase Storage answering every download with fake JPEG bytes."""
    return FakeUpstream(lambda request: httpx.Response(200, content=b"\xff\xd8\xff\xe0fake-jpeg"))


@pytest.fixture
def proxy_service(test_settings, gemini_upstream, storage_upstream):
    """ChatProxyService wired to the fake upstreams."""
    return ChatProxyService(
        test_settings,
        storage=SupabaseClient(test_settings, transport=storage_upstream.transport),
        gemini=GeminiService(test_settings, transport=gemini_upstream.transport)
    )
