"""Tests for settings and the audit trail."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from rentrack.config.logging import AUDIT_LOGGER_NAME, tag_audit_events
from rentrack.config.settings import MovementSettings, StorageSettings


class _Capture(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def audit_capture():
    audit = logging.getLogger(AUDIT_LOGGER_NAME)
    handler = _Capture()
    audit.addHandler(handler)
    audit.setLevel(logging.INFO)
    yield handler
    audit.removeHandler(handler)


class TestMovementSettings:
    def test_blank_return_location_is_unset(self):
        assert MovementSettings(base_return_location_id="  ").base_return_location_id is None

    def test_return_location_stripped(self):
        assert MovementSettings(base_return_location_id=" BASE-RET ").base_return_location_id == "BASE-RET"

    def test_batch_size_positive(self):
        with pytest.raises(ValidationError):
            MovementSettings(max_batch_size=0)


class TestStorageSettings:
    def test_paths(self):
        storage = StorageSettings(data_dir=Path("/tmp/rt"), db_name="x.db")
        assert storage.db_path == Path("/tmp/rt/x.db")
        assert storage.audit_log_path == Path("/tmp/rt/movement_audit.log")

    def test_audit_log_disabled(self):
        assert StorageSettings(audit_log_name="").audit_log_path is None


class TestAuditEvents:
    def test_ledger_event_tagged_and_copied(self, audit_capture):
        event = {"event": "movement_integrity_failure", "batch_ids": ["B1"]}

        result = tag_audit_events(None, "error", event)

        assert result["audit"] is True
        record = audit_capture.records[0]
        assert record.levelno == logging.ERROR
        assert json.loads(record.getMessage())["batch_ids"] == ["B1"]

    def test_other_events_untouched(self, audit_capture):
        result = tag_audit_events(None, "info", {"event": "request_started"})

        assert "audit" not in result
        assert audit_capture.records == []
