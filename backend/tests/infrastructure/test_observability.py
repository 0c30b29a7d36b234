"""Structured Logging — tests for JSONFormatter ledger fields."""

import json
import sys
import logging

from carbon_ledger.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "carbon_ledger.core.ledger_engine", logging.INFO, __file__, 1,
        "Minted %s", (1000,), None,
    )
    record.__dict__.update(extra)
    return record


def test_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "carbon_ledger.core.ledger_engine"
    assert log["message"] == "Minted 1000"
    assert "timestamp" in log


def test_ledger_fields_surfaced():
    log = json.loads(JSONFormatter().format(_record(
        operation="mint", caller="ST1ADMIN", height=4, credit_id=1000, amount=1000,
    )))
    assert log["operation"] == "mint"
    assert log["caller"] == "ST1ADMIN"
    assert log["height"] == 4
    assert log["credit_id"] == 1000


def test_absent_fields_omitted():
    log = json.loads(JSONFormatter().format(_record()))
    assert "operation" not in log
    assert "error_code" not in log


def test_exception_included():
    try:
        raise ValueError("bad height")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    log = json.loads(JSONFormatter().format(record))
    assert "ValueError: bad height" in log["exception"]
