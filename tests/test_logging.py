"""
Structured logging: redaction and the operation lines.
"""

import logging

from util.logging import StructuredLogger, sanitize_payload


def test_sanitize_redacts_sensitive_keys():
    sanitized = sanitize_payload({
        "user_id": "u1",
        "action": {"message": "secret"},
        "X-Auth-Identity": "Bearer abc",
        "nested": {"token": "t"},
    })

    assert sanitized["user_id"] == "u1"
    assert sanitized["action"] == "[REDACTED]"
    assert sanitized["X-Auth-Identity"] == "[REDACTED]"
    assert sanitized["nested"]["token"] == "[REDACTED]"


def test_sanitize_truncates_long_strings():
    sanitized = sanitize_payload(["x" * 150, 7])

    assert sanitized[0] == "x" * 100 + "..."
    assert sanitized[1] == 7


def test_action_operation_line(caplog):
    logger = StructuredLogger()

    with caplog.at_level(logging.INFO, logger="action_history"):
        logger.log_action_operation("list", None, details={"returned": 3})

    assert "Operation: actions.list, Status: success" in caplog.text
    assert "'user_id': '*'" in caplog.text


def test_failed_sweep_logged_as_error(caplog):
    logger = StructuredLogger()

    with caplog.at_level(logging.INFO, logger="action_history"):
        logger.log_sweep("2026-10-16T12:00:00+00:00", 0, status="failed")

    assert caplog.records[-1].levelno == logging.ERROR


def test_error_log_format(caplog):
    logger = StructuredLogger()

    with caplog.at_level(logging.ERROR, logger="action_history"):
        logger.error_log("req-1", "Query failed: locked", "alice")

    assert "History - error - [req-1] Query failed: locked alice" in caplog.text


def test_access_denied_omits_payload(caplog):
    logger = StructuredLogger()

    with caplog.at_level(logging.WARNING, logger="action_history"):
        logger.log_access_denied("UserId did not match", requested_user_id="bob")

    assert "access.denied" in caplog.text
    assert "bob" in caplog.text
