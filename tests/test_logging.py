# tests/test_logging.py
import json
import logging

from quote_relay.utils.logging import JsonFormatter


def test_json_formatter_fields():
    record = logging.LogRecord(
        name="api", level=logging.WARNING, pathname=__file__, lineno=7,
        msg="timeout when saving data to database: %s", args=("persist timeout",), exc_info=None,
    )
    payload = json.loads(JsonFormatter("server").format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "api"
    assert payload["component"] == "server"
    assert payload["service"] == "quote-relay"
    assert payload["msg"] == "timeout when saving data to database: persist timeout"
    assert payload["ts"].endswith("Z")
