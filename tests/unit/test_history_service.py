"""
Unit tests for ChatHistoryService.

Supabase is faked with a single routing handler; the proxy is a mock so
these tests only cover the history flow around it.
"""

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from gemini_chat.errors import ChatHistoryError, SupabaseError, ValidationError
from gemini_chat.models.chat import ProxyFailure, ProxySuccess
from gemini_chat.services.history_service import ChatHistoryService, ImageUpload
from gemini_chat.supabase_client import SupabaseClient

pytestmark = pytest.mark.unit


def supabase_handler(request: httpx.Request) -> httpx.Response:
    """Minimal Supabase: auth, storage upload and chat_messages."""
    path = request.url.path
    if path == "/auth/v1/user":
        return httpx.Response(200, json={"id": "user-1"})
    if path.startswith("/storage/v1/object/chat_images/"):
        return httpx.Response(200, json={"Key": path})
    if path == "/rest/v1/chat_messages" and request.method == "GET":
        return httpx.Response(200, json=[
            {"id": "m1", "content": "hi", "image_url": None, "user_id": "user-1",
             "is_user": True, "created_at": "2024-01-01T00:00:00+00:00"},
            {"id": "m2", "content": "Hello!", "image_url": None, "user_id": "user-1",
             "is_user": False, "created_at": "2024-01-01T00:00:01+00:00"},
        ])
    if path == "/rest/v1/chat_messages" and request.method == "POST":
        row = json.loads(request.content)
        row["created_at"] = "2024-01-01T00:00:00+00:00"
        return httpx.Response(201, json=[row])
    return httpx.Response(404, json={"message": f"unexpected {request.method} {path}"})


class TestChatHistoryService:
    """Test class for the chat history flow."""

    @pytest.fixture
    def supabase_upstream(self, fake_upstream):
        return fake_upstream(supabase_handler)

    @pytest.fixture
    def mock_proxy(self):
        proxy = Mock()
        proxy.process_request = AsyncMock(return_value=ProxySuccess(response_text="Nice picture"))
        return proxy

    @pytest.fixture
    def history(self, test_settings, supabase_upstream, mock_proxy):
        return ChatHistoryService(
            test_settings,
            supabase=SupabaseClient(test_settings, transport=supabase_upstream.transport),
            proxy=mock_proxy
        )

    def inserted_rows(self, upstream):
        return [
            json.loads(r.content) for r in upstream.requests
            if r.url.path == "/rest/v1/chat_messages" and r.method == "POST"
        ]

    @pytest.mark.asyncio
    async def test_list_messages_maps_senders(self, history):
        messages = await history.list_messages("user-token")

        assert [m.sender for m in messages] == ["You", "Gemini AI"]
        assert [m.content for m in messages] == ["hi", "Hello!"]
        assert messages[0].timestamp < messages[1].timestamp

    @pytest.mark.asyncio
    async def test_send_text_message(self, history, supabase_upstream, mock_proxy):
        user_message, ai_message = await history.send_message("user-token", "hello there")

        rows = self.inserted_rows(supabase_upstream)
        assert [row["is_user"] for row in rows] == [True, False]
        assert rows[0]["content"] == "hello there"
        assert rows[0]["image_url"] is None
        assert rows[1]["content"] == "Nice picture"
        assert all(row["user_id"] == "user-1" for row in rows)

        chat_request = mock_proxy.process_request.await_args.args[0]
        assert chat_request.message == "hello there"
        assert chat_request.image_url is None

        assert user_message.sender == "You"
        assert ai_message.sender == "Gemini AI"
        assert ai_message.content == "Nice picture"

    @pytest.mark.asyncio
    async def test_send_with_image_uploads_under_user_folder(self, history, supabase_upstream, mock_proxy):
        image = ImageUpload(data=b"\xff\xd8jpeg", content_type="image/jpeg", filename="cat.jpg")

        user_message, _ = await history.send_message("user-token", "", image)

        upload = next(r for r in supabase_upstream.requests if r.url.path.startswith("/storage/"))
        assert upload.url.path.startswith("/storage/v1/object/chat_images/user-1/")
        assert upload.content == b"\xff\xd8jpeg"

        reference = self.inserted_rows(supabase_upstream)[0]["image_url"]
        assert reference.startswith("chat_images/user-1/")
        assert mock_proxy.process_request.await_args.args[0].image_url == reference
        assert mock_proxy.process_request.await_args.args[1] == "user-token"
        assert user_message.public_image_url == (
            "https://project.supabase.co/storage/v1/object/public/" + reference
        )

    @pytest.mark.asyncio
    async def test_empty_message_without_image_rejected(self, history, supabase_upstream):
        with pytest.raises(ValidationError):
            await history.send_message("user-token", "   ")
        assert not supabase_upstream.called

    @pytest.mark.asyncio
    async def test_non_image_rejected(self, history, supabase_upstream):
        with pytest.raises(ValidationError, match="image file"):
            await history.send_message("user-token", "see", ImageUpload(data=b"%PDF", content_type="application/pdf"))
        assert not supabase_upstream.called

    @pytest.mark.asyncio
    async def test_large_image_rejected(self, history, test_settings):
        image = ImageUpload(data=b"x" * (test_settings.max_image_bytes + 1), content_type="image/png")

        with pytest.raises(ValidationError, match="5MB"):
            await history.send_message("user-token", "big", image)

    @pytest.mark.asyncio
    async def test_proxy_failure_stops_before_ai_row(self, history, supabase_upstream, mock_proxy):
        mock_proxy.process_request.return_value = ProxyFailure(error_message="Gemini API error: 500 - boom")

        with pytest.raises(ChatHistoryError, match="Gemini API error: 500 - boom"):
            await history.send_message("user-token", "hello")

        rows = self.inserted_rows(supabase_upstream)
        assert [row["is_user"] for row in rows] == [True]

    @pytest.mark.asyncio
    async def test_rejected_token_surfaces_supabase_error(self, test_settings, mock_proxy, fake_upstream):
        upstream = fake_upstream(lambda request: httpx.Response(401, json={"message": "invalid JWT"}))
        history = ChatHistoryService(
            test_settings,
            supabase=SupabaseClient(test_settings, transport=upstream.transport),
            proxy=mock_proxy
        )

        with pytest.raises(SupabaseError, match="invalid JWT"):
            await history.list_messages("bad-token")
        mock_proxy.process_request.assert_not_called()
