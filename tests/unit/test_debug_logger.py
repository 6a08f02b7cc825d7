"""
Unit tests for the debug logger.
"""

import pytest

from gemini_chat.utils.debug_logger import DebugLogger

pytestmark = pytest.mark.unit


class TestDebugLogger:
    """Tests for debug line formatting and the enable switches."""

    def test_format_with_context(self):
        line = DebugLogger().format("abc12345", "PROXY", "Composing payload", has_image=True)

        assert line == "[DEBUG] [PROXY] [abc12345] Composing payload has_image=True"

    def test_format_without_request_id(self):
        assert DebugLogger().format(None, "GEMINI", "done") == "[DEBUG] [GEMINI] done"

    def test_disabled_by_default(self, monkeypatch, capsys):
        monkeypatch.delenv("AWS_LAMBDA_FUNCTION_NAME", raising=False)
        monkeypatch.delenv("DEBUG_LOGGING_DEV", raising=False)

        DebugLogger().log_proxy("id", "hidden")

        assert capsys.readouterr().out == ""

    def test_dev_switch(self, monkeypatch, capsys):
        monkeypatch.delenv("AWS_LAMBDA_FUNCTION_NAME", raising=False)
        monkeypatch.setenv("DEBUG_LOGGING_DEV", "true")

        DebugLogger().log_storage("id", "Downloading chat_images/u/1")

        assert "[DEBUG] [STORAGE] [id] Downloading chat_images/u/1" in capsys.readouterr().out

    def test_prod_switch_used_in_lambda(self, monkeypatch, capsys):
        monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", "gemini-chat")
        monkeypatch.setenv("DEBUG_LOGGING_DEV", "true")
        monkeypatch.setenv("DEBUG_LOGGING_PROD", "false")

        DebugLogger().log_route("id", "hidden")

        assert capsys.readouterr().out == ""

    def test_log_timing(self, monkeypatch, capsys):
        monkeypatch.delenv("AWS_LAMBDA_FUNCTION_NAME", raising=False)
        monkeypatch.setenv("DEBUG_LOGGING_DEV", "true")

        DebugLogger().log_timing("id", "Request POST /gemini-chat -> 200", 12.3456)

        assert "[DEBUG] [TIMING] [id] Request POST /gemini-chat -> 200 completed in 12.346ms" in capsys.readouterr().out
