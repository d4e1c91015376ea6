import json
import logging

from relay.logging_config import JSONFormatter, LoggerAdapter, get_logger


def _record(msg="hello", context=None, exc_info=None):
    record = logging.LogRecord("relay.test", logging.INFO, __file__, 1, msg, None, exc_info)
    if context is not None:
        record.context = context
    return record


class TestJSONFormatter:
    def test_formats_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "relay.test"
        assert data["message"] == "hello"
        assert "context" not in data

    def test_includes_context(self):
        data = json.loads(JSONFormatter().format(_record(context={"sender": "+1555"})))
        assert data["context"] == {"sender": "+1555"}

    def test_keeps_non_ascii(self):
        output = JSONFormatter().format(_record("Olá 🤖"))
        assert "Olá 🤖" in output


class TestLoggerAdapter:
    def test_merges_bound_and_call_context(self):
        adapter = LoggerAdapter(get_logger("test"), {"message_id": "m1"})

        msg, kwargs = adapter.process("x", {"context": {"error_code": "backend_error"}})

        assert kwargs["extra"] == {"context": {"message_id": "m1", "error_code": "backend_error"}}

    def test_logger_namespace(self):
        assert get_logger("webhook").name == "relay.webhook"
