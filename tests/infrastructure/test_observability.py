"""Structured Logging — JSON formatter fields and setup idempotence.

Tests cover:
    - Base fields always present
    - Extra fields (store, operation, error_code, path) surfaced when set
    - Exceptions serialized
    - setup_logging() replaces its own handler instead of stacking
"""

import json
import logging
import sys

from crudserve.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "crudserve.test", logging.INFO, __file__, 1, "bound %s", ("/notes",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "crudserve.test"
    assert log["message"] == "bound /notes"
    assert "timestamp" in log
    assert "store" not in log


def test_extra_fields():
    log = json.loads(JSONFormatter().format(
        _record(store="notes", error_code="STORAGE_ERROR", path="/notes"),
    ))
    assert log["store"] == "notes"
    assert log["error_code"] == "STORAGE_ERROR"
    assert log["path"] == "/notes"


def test_operation_context_fields():
    log = json.loads(JSONFormatter().format(
        _record(operation="/ops/word-count", method="POST"),
    ))
    assert log["operation"] == "/ops/word-count"
    assert log["method"] == "POST"
    assert "store" not in log


def test_exception_serialized():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    log = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in log["exception"]


def test_setup_logging_is_idempotent():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("WARNING", "text")
        added = [h for h in logging.root.handlers if h not in before]
        assert len(added) == 1
        assert logging.root.level == logging.WARNING
    finally:
        logging.root.setLevel(level)
        for handler in logging.root.handlers[:]:
            if handler not in before:
                logging.root.removeHandler(handler)
