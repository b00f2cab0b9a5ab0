"""
Tests for the Logfire setup and the no-op fallback.
"""

from unittest.mock import patch

from adlauncher.core import observability


class TestLogfire:

    def test_setup_without_token_is_disabled(self, monkeypatch):
        monkeypatch.delenv("LOGFIRE_TOKEN", raising=False)

        with patch.object(observability, "_logfire_configured", False):
            assert observability.setup_logfire() is False

    def test_stub_span_is_a_context_manager(self):
        with patch.object(observability, "_logfire_configured", False):
            logfire = observability.get_logfire()

        with logfire.span("process_group", group_index=0):
            logfire.info("inside span")
