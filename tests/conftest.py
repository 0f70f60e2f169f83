"""Shared test fixtures for slackwire."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from slackwire.audit.logger import AuditLogger
from slackwire.models import AuditEvent, AuditEventType, IncomingRequest, RiskLevel
from slackwire.request.classifier import classify


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


# --- Factory functions for test data ---


def make_command_fields(**kwargs: str) -> dict[str, str]:
    """Form fields of a slash command with sensible defaults."""
    defaults = {
        "token": "gIkuvaNzQIHg97ATvDxqgjtO",
        "team_id": "T0001",
        "team_domain": "example",
        "channel_id": "C2147483705",
        "channel_name": "test",
        "user_id": "U2147483697",
        "user_name": "Steve",
        "command": "/weather",
        "text": "94070",
        "response_url": "https://hooks.slack.com/commands/1234/5678",
    }
    defaults.update(kwargs)
    return defaults


def make_webhook_fields(**kwargs: str) -> dict[str, str]:
    """Form fields of an outgoing webhook with sensible defaults."""
    defaults = {
        "token": "XXXXXXXXXXXXXXXXXX",
        "team_id": "T0001",
        "team_domain": "example",
        "service_id": "123456789",
        "channel_id": "C2147483705",
        "channel_name": "test",
        "timestamp": "1355517523.000005",
        "user_id": "U2147483697",
        "user_name": "Steve",
        "text": "googlebot: What is the air-speed velocity of an unladen swallow?",
        "trigger_word": "googlebot:",
    }
    defaults.update(kwargs)
    return defaults


def make_command_request(**kwargs: str) -> IncomingRequest:
    return classify(make_command_fields(**kwargs))


def make_webhook_request(**kwargs: str) -> IncomingRequest:
    return classify(make_webhook_fields(**kwargs))


def make_audit_event(**kwargs: object) -> AuditEvent:
    """Factory for AuditEvent with sensible defaults."""
    defaults: dict[str, object] = {
        "event_type": AuditEventType.TOKEN_REJECTED,
        "action": "classify",
        "result": "blocked",
        "risk_level": RiskLevel.HIGH,
    }
    defaults.update(kwargs)
    return AuditEvent(**defaults)  # type: ignore[arg-type]
