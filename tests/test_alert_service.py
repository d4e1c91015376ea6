from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest

from conftest import run
from relay.config import settings
from relay.services.alert_service import (
    alert_critical,
    alert_error,
    alert_warning,
    send_alert,
)


@pytest.fixture
def alerts_configured(monkeypatch):
    monkeypatch.setattr(settings, "alert_bot_token", "test-token")
    monkeypatch.setattr(settings, "alert_chat_id", "test-chat")
    monkeypatch.setattr(settings, "alert_timeout_seconds", 3.0)


def _install_client(mock_client_class, status_code=200):
    mock_client = MagicMock()
    mock_response = Mock()
    mock_response.status_code = status_code
    mock_client.post = AsyncMock(return_value=mock_response)
    mock_client_class.return_value.__aenter__.return_value = mock_client
    return mock_client


class TestSendAlert:
    @patch("relay.services.alert_service.httpx.AsyncClient")
    def test_returns_false_when_not_configured(self, mock_client_class):
        result = run(send_alert("ERROR", "Test message"))

        assert result is False
        mock_client_class.assert_not_called()

    @patch("relay.services.alert_service.httpx.AsyncClient")
    def test_sends_alert_to_telegram(self, mock_client_class, alerts_configured):
        mock_client = _install_client(mock_client_class)

        result = run(send_alert("WARNING", "Gemini quota exceeded", {"block_seconds": 60}))

        assert result is True
        call_args = mock_client.post.call_args
        assert "api.telegram.org/bottest-token" in call_args[0][0]
        json_data = call_args[1]["json"]
        assert json_data["chat_id"] == "test-chat"
        assert "⚠️" in json_data["text"]
        assert "block_seconds: 60" in json_data["text"]

    @patch("relay.services.alert_service.httpx.AsyncClient")
    def test_uses_short_configured_timeout(self, mock_client_class, alerts_configured):
        _install_client(mock_client_class)

        run(send_alert("ERROR", "Test message"))

        mock_client_class.assert_called_once_with(timeout=3.0)

    @patch("relay.services.alert_service.httpx.AsyncClient")
    def test_reads_credentials_at_call_time(self, mock_client_class, monkeypatch):
        mock_client = _install_client(mock_client_class)
        assert run(send_alert("ERROR", "before")) is False

        monkeypatch.setattr(settings, "alert_bot_token", "late-token")
        monkeypatch.setattr(settings, "alert_chat_id", "late-chat")

        assert run(send_alert("ERROR", "after")) is True
        assert "botlate-token" in mock_client.post.call_args[0][0]
        assert mock_client.post.call_args[1]["json"]["chat_id"] == "late-chat"

    @patch("relay.services.alert_service.httpx.AsyncClient")
    def test_returns_false_on_telegram_error(self, mock_client_class, alerts_configured):
        _install_client(mock_client_class, status_code=400)

        assert run(send_alert("ERROR", "Test message")) is False

    @patch("relay.services.alert_service.httpx.AsyncClient")
    def test_returns_false_on_exception(self, mock_client_class, alerts_configured):
        mock_client_class.return_value.__aenter__.side_effect = Exception("Network error")

        assert run(send_alert("ERROR", "Test message")) is False


class TestAlertShortcuts:
    @patch("relay.services.alert_service.send_alert", new_callable=AsyncMock)
    def test_levels(self, mock_send):
        mock_send.return_value = True

        assert run(alert_error("e", {"key": "value"})) is True
        assert run(alert_critical("c")) is True
        assert run(alert_warning("w")) is True

        assert [c.args for c in mock_send.await_args_list] == [
            ("ERROR", "e", {"key": "value"}),
            ("CRITICAL", "c", None),
            ("WARNING", "w", None),
        ]
