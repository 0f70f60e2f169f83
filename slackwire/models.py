"""Shared Pydantic data models for slackwire."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

# --- Enums ---


class RequestType(str, Enum):
    COMMAND = "command"
    WEBHOOK = "webhook"
    UNKNOWN = "unknown"


class ResponseType(str, Enum):
    EPHEMERAL = "ephemeral"
    IN_CHANNEL = "in_channel"


class AuditEventType(str, Enum):
    REQUEST_ACCEPTED = "request_accepted"
    REQUEST_REJECTED = "request_rejected"
    TOKEN_REJECTED = "token_rejected"
    RESPONSE_DELIVERED = "response_delivered"
    DELIVERY_FAILED = "delivery_failed"


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    INFO = "info"


# --- Inbound Models ---

# Slack reports every private group as channel_name "privategroup"
PRIVATE_GROUP_CHANNEL = "privategroup"


def detect_request_type(
    command: str | None, trigger_word: str | None, text: str | None,
) -> RequestType:
    """Derive the request type. Empty values count as absent."""
    if command:
        return RequestType.COMMAND
    if trigger_word or text:
        return RequestType.WEBHOOK
    return RequestType.UNKNOWN


class IncomingRequest(BaseModel):
    """A classified slash command or outgoing webhook request.

    ``request_type`` and ``private_channel`` are derived from the other
    fields and cannot be passed in.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    token: str
    team_id: str
    team_domain: str | None = None
    service_id: str | None = None
    channel_id: str | None = None
    channel_name: str | None = None
    timestamp: datetime | None = None
    user_id: str | None = None
    user_name: str | None = None
    text: str | None = None
    command: str | None = None
    args: tuple[str, ...] = ()
    trigger_word: str | None = None
    response_url: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def private_channel(self) -> bool:
        return self.channel_name == PRIVATE_GROUP_CHANNEL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def request_type(self) -> RequestType:
        return detect_request_type(self.command, self.trigger_word, self.text)

    @property
    def is_command(self) -> bool:
        return self.request_type is RequestType.COMMAND

    @property
    def is_webhook(self) -> bool:
        return self.request_type is RequestType.WEBHOOK

    @property
    def visible_text(self) -> str | None:
        """Text of an outgoing webhook; commands expose their text as ``args``."""
        return self.text if self.is_webhook else None


# --- Payload Models ---


class AttachmentField(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    value: str
    short: bool = False


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    source_ip: str | None = None
    team_id: str | None = None
    user_id: str | None = None
    action: str
    result: str  # "success" | "failure" | "blocked"
    risk_level: RiskLevel
    details: dict[str, object] | None = None
