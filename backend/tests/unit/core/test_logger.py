import json
import logging

from userhub.core.logger import JSONFormatter, RequestIdFilter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="userhub.services.users.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="user.created",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_known_extras():
    payload = json.loads(
        JSONFormatter().format(_record(user_id="abc", operation="create_user", secret="x"))
    )

    assert payload["message"] == "user.created"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == "abc"
    assert payload["operation"] == "create_user"
    assert "secret" not in payload


def test_configure_logging_sets_level():
    root = logging.getLogger()
    previous_level, previous_handlers = root.level, list(root.handlers)
    try:
        configure_logging("warning")
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)


def test_request_id_filter_keeps_explicit_id():
    record = _record(request_id="req-789")
    assert RequestIdFilter().filter(record) is True
    assert record.request_id == "req-789"


def test_request_id_filter_outside_request():
    record = _record()
    RequestIdFilter().filter(record)
    assert record.request_id is None
