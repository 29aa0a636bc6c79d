import logging

from disaster_intel.utils.logging.logger import (
    ContextFilter,
    SensitiveFilter,
    get_component_logger,
    log_api_call,
    request_context,
    warn_once,
)


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord("disaster_intel.test", logging.INFO, __file__, 1, msg, None, None)


class TestSensitiveFilter:
    def test_masks_bearer_tokens(self):
        record = _record("Authorization: Bearer abc123secret")

        SensitiveFilter().filter(record)

        assert "abc123secret" not in record.msg
        assert "Bearer *****" in record.msg

    def test_masks_query_string_keys(self):
        record = _record("POST https://example.test/models/m:generateContent?key=s3cr3t&alt=json")

        SensitiveFilter().filter(record)

        assert "s3cr3t" not in record.msg
        assert "?key=*****&alt=json" in record.msg

    def test_masks_named_credentials(self):
        record = _record("GEMINI_API_KEY=abc123 loaded")

        SensitiveFilter().filter(record)

        assert record.msg == "GEMINI_API_KEY=***** loaded"

    def test_leaves_plain_messages_alone(self):
        record = _record("Cache cleanup completed")

        SensitiveFilter().filter(record)

        assert record.msg == "Cache cleanup completed"


def test_context_filter_adds_request_data():
    record = _record("hello")

    with request_context(request_id="req-1", command="locate"):
        ContextFilter().filter(record)

    assert record.request_id == "req-1"
    assert record.command == "locate"


def test_warn_once_only_warns_the_first_time(caplog):
    logger = get_component_logger("test")
    caplog.set_level(logging.WARNING, logger="disaster_intel.test")

    assert warn_once(logger, "GEMINI_API_KEY", "Gemini API key not found.") is True
    assert warn_once(logger, "GEMINI_API_KEY", "Gemini API key not found.") is False

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert warnings[0].setting == "GEMINI_API_KEY"


def test_api_call_event_fields(caplog):
    logger = get_component_logger("test")
    caplog.set_level(logging.INFO, logger="disaster_intel.test")

    log_api_call(logger, "OpenStreetMap", "geocoding", "success")

    record = caplog.records[-1]
    assert record.action == "api_call"
    assert record.service == "OpenStreetMap"
    assert record.endpoint == "geocoding"
    assert record.status == "success"
    assert record.event_time
