import json
import logging

from app.config.logging import JsonFormatter, RequestContextFilter, request_id_var


def _record(message="hello", **extra):
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonLogging:
    def test_basic_fields(self):
        payload = json.loads(JsonFormatter().format(_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "app.test"
        assert payload["message"] == "hello"
        assert "request_id" not in payload

    def test_principal_id_from_extra(self):
        payload = json.loads(JsonFormatter().format(_record(principal_id="u1")))

        assert payload["principal_id"] == "u1"

    def test_request_id_from_context(self):
        record = _record()
        token = request_id_var.set("req-42")
        try:
            RequestContextFilter().filter(record)
        finally:
            request_id_var.reset(token)

        assert json.loads(JsonFormatter().format(record))["request_id"] == "req-42"

    def test_no_request_context(self):
        record = _record()

        assert RequestContextFilter().filter(record) is True
        assert not hasattr(record, "request_id")
