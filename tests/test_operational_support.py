from __future__ import annotations

import json
import logging

from core.exceptions import ValidationError
from infra.logging_config import setup_logging
from infra.operational_support import (
    OperationalSupport,
    TraceIdLogFilter,
    bind_trace_id,
    current_trace_id,
)


def test_operational_support_emits_structured_event(tmp_path):
    events_path = tmp_path / "support-events.jsonl"
    support = OperationalSupport(events_path=events_path)

    with bind_trace_id("run-test-123"):
        trace_id = support.emit_event(
            event_type="support.test",
            message="projection run",
            data={"days": 28},
        )

    assert trace_id == "run-test-123"
    rows = events_path.read_text(encoding="utf-8").splitlines()
    assert len(rows) == 1
    payload = json.loads(rows[0])
    assert payload["trace_id"] == "run-test-123"
    assert payload["event_type"] == "support.test"
    assert payload["data"] == {"days": 28}


def test_capture_exception_records_domain_error_code(tmp_path):
    support = OperationalSupport(events_path=tmp_path / "support-events.jsonl")

    try:
        raise ValidationError("Allocation total mismatch", code="ALLOCATION_SUM_MISMATCH")
    except ValidationError as exc:
        trace_id = support.capture_exception(exc, context="ledger.post")

    events = support.read_events(trace_id=trace_id)
    assert len(events) == 1
    assert events[0]["event_type"] == "app.failure"
    assert events[0]["level"] == "ERROR"
    assert events[0]["data"]["code"] == "ALLOCATION_SUM_MISMATCH"
    assert events[0]["data"]["context"] == "ledger.post"


def test_bind_trace_id_generates_and_resets():
    assert current_trace_id() is None
    with bind_trace_id(None) as trace_id:
        assert trace_id.startswith("run-")
        assert current_trace_id() == trace_id
    assert current_trace_id() is None


def test_trace_filter_stamps_records():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    with bind_trace_id("run-abc"):
        TraceIdLogFilter().filter(record)
    assert record.trace_id == "run-abc"


def test_setup_logging_writes_to_given_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    root = logging.getLogger()
    previous = list(root.handlers)
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("cashflow.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert log_file == tmp_path / "logs" / "cashflow.log"
        assert "hello" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = previous
