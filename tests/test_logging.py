import json
import logging

from app.core.logging import JSONFormatter, RequestContextFilter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("app.request", logging.INFO, __file__, 1, "GET %s", ("/user",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_request_fields():
    record = _record(request_id="abc", method="GET", path="/user", status_code=200, duration_ms=1.5)
    entry = json.loads(JSONFormatter().format(record))
    assert entry["msg"] == "GET /user"
    assert entry["level"] == "INFO"
    assert entry["request_id"] == "abc"
    assert entry["status_code"] == 200


def test_json_formatter_skips_placeholder_request_id():
    record = _record()
    RequestContextFilter().filter(record)
    assert record.request_id == "-"
    assert "request_id" not in json.loads(JSONFormatter().format(record))
