"""Tests for the audit logger."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from slackwire.audit.logger import AuditLogger
from slackwire.models import AuditEventType
from tests.conftest import make_audit_event


def test_log_appends_json_line(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    logger.log(make_audit_event(details={"token": "evil"}))

    lines = log_file.read_text().strip().split("\n")
    assert len(lines) == 1
    parsed = json.loads(lines[0])
    assert parsed["event_type"] == "token_rejected"
    assert parsed["risk_level"] == "high"
    assert parsed["details"] == {"token": "evil"}


def test_unset_fields_are_omitted(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(make_audit_event())

    parsed = json.loads(log_file.read_text())
    assert "source_ip" not in parsed
    assert "details" not in parsed
    assert "timestamp" in parsed


def test_log_multiple_events_append(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))

    for event_type in AuditEventType:
        logger.log(make_audit_event(event_type=event_type))

    lines = log_file.read_text().strip().split("\n")
    assert [json.loads(line)["event_type"] for line in lines] == [
        e.value for e in AuditEventType
    ]


def test_log_creates_parent_directory(tmp_path: Path) -> None:
    log_file = tmp_path / "subdir" / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(make_audit_event())
    assert log_file.exists()


def test_rotation_when_max_bytes_exceeded(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=10, backup_count=2)

    logger.log(make_audit_event(action="first"))
    logger.log(make_audit_event(action="second"))
    logger.log(make_audit_event(action="third"))

    assert json.loads(log_file.read_text())["action"] == "third"
    backup_1 = tmp_path / "audit.jsonl.1"
    backup_2 = tmp_path / "audit.jsonl.2"
    assert json.loads(backup_1.read_text())["action"] == "second"
    assert json.loads(backup_2.read_text())["action"] == "first"


def test_rotation_drops_oldest_backup(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=10, backup_count=1)

    for action in ("a", "b", "c"):
        logger.log(make_audit_event(action=action))

    assert json.loads(log_file.read_text())["action"] == "c"
    assert json.loads((tmp_path / "audit.jsonl.1").read_text())["action"] == "b"
    assert not (tmp_path / "audit.jsonl.2").exists()


def test_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUDIT_LOG_MAX_BYTES", "1234")
    monkeypatch.setenv("AUDIT_LOG_BACKUP_COUNT", "3")
    logger = AuditLogger.from_env(str(tmp_path / "audit.jsonl"))
    assert logger._max_bytes == 1234
    assert logger._backup_count == 3
