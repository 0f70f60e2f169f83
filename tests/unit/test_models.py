"""Tests for shared Pydantic data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from slackwire.models import (
    AttachmentField,
    AuditEvent,
    AuditEventType,
    IncomingRequest,
    RequestType,
    ResponseType,
    RiskLevel,
)


class TestIncomingRequest:
    def test_defaults(self) -> None:
        request = IncomingRequest(token="T", team_id="1")
        assert request.request_type == RequestType.UNKNOWN
        assert request.args == ()
        assert request.private_channel is False
        assert request.is_command is False
        assert request.is_webhook is False

    def test_frozen(self) -> None:
        request = IncomingRequest(token="T", team_id="1")
        with pytest.raises(ValidationError):
            request.token = "other"  # type: ignore[misc]

    def test_request_type_follows_fields(self) -> None:
        assert IncomingRequest(token="T", team_id="1", command="ping").is_command
        assert IncomingRequest(token="T", team_id="1", trigger_word="bot:").is_webhook
        assert IncomingRequest(token="T", team_id="1", text="hi").is_webhook

    def test_command_wins_over_webhook_fields(self) -> None:
        request = IncomingRequest(
            token="T", team_id="1", command="ping", text="hi", trigger_word="bot:",
        )
        assert request.request_type == RequestType.COMMAND

    @pytest.mark.parametrize("derived", [
        {"request_type": RequestType.WEBHOOK},
        {"private_channel": True},
    ])
    def test_derived_fields_cannot_be_passed_in(self, derived: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            IncomingRequest(
                token="T", team_id="1", command="ping", channel_name="general",
                **derived,  # type: ignore[arg-type]
            )

    def test_private_channel_follows_channel_name(self) -> None:
        private = IncomingRequest(token="T", team_id="1", channel_name="privategroup")
        public = IncomingRequest(token="T", team_id="1", channel_name="general")
        assert private.private_channel is True
        assert public.private_channel is False

    def test_derived_fields_are_serialized(self) -> None:
        request = IncomingRequest(
            token="T", team_id="1", command="ping", channel_name="privategroup",
        )
        dumped = request.model_dump(mode="json")
        assert dumped["request_type"] == "command"
        assert dumped["private_channel"] is True

    def test_visible_text_only_for_webhooks(self) -> None:
        webhook = IncomingRequest(token="T", team_id="1", text="hi")
        command = IncomingRequest(token="T", team_id="1", text="hi", command="echo")
        assert webhook.visible_text == "hi"
        assert command.visible_text is None


class TestAttachmentField:
    def test_short_defaults_false(self) -> None:
        assert AttachmentField(title="a", value="b").short is False

    def test_frozen(self) -> None:
        field = AttachmentField(title="a", value="b")
        with pytest.raises(ValidationError):
            field.title = "c"  # type: ignore[misc]


def test_response_type_values() -> None:
    assert ResponseType.EPHEMERAL.value == "ephemeral"
    assert ResponseType.IN_CHANNEL.value == "in_channel"


def test_audit_event_timestamp_is_iso8601() -> None:
    from datetime import datetime

    event = AuditEvent(
        event_type=AuditEventType.REQUEST_ACCEPTED,
        action="classify",
        result="success",
        risk_level=RiskLevel.INFO,
    )
    assert datetime.fromisoformat(event.timestamp).tzinfo is not None


def test_risk_levels_are_the_ones_audit_events_use() -> None:
    assert {level.value for level in RiskLevel} == {"high", "medium", "info"}
