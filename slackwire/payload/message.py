"""Incoming-webhook message builder and encoder."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from slackwire.payload.attachment import Attachment, as_text, build_attachment_payload
from slackwire.payload.models import MessagePayload


@dataclass
class OutgoingMessage:
    """Mutable builder for a message posted to a Slack incoming webhook."""

    webhook_url: str | None = None
    text: str | None = None
    icon_url: str | None = None
    icon_emoji: str | None = None
    username: str | None = None
    channel: str | None = None
    attachments: list[Attachment] = field(default_factory=list)

    def set_text(self, text: str | None) -> None:
        self.text = text

    def add_attachment(self, attachment: Attachment) -> None:
        self.attachments.append(attachment)

    def set_icon_url(self, url: str | None) -> None:
        self.icon_url = url

    def set_icon_emoji(self, emoji: str | None) -> None:
        self.icon_emoji = emoji

    def set_username(self, username: str | None) -> None:
        self.username = username

    def set_channel(self, channel: str | None) -> None:
        """Channel name (``#general``) or user (``@alice``) to post to."""
        self.channel = channel


def build_message_payload(message: OutgoingMessage) -> MessagePayload:
    attachments = [build_attachment_payload(a) for a in message.attachments]
    return MessagePayload(
        text=as_text(message.text),
        icon_url=as_text(message.icon_url),
        icon_emoji=as_text(message.icon_emoji),
        username=as_text(message.username),
        channel=as_text(message.channel),
        attachments=attachments or None,
    )


def encode_message(message: OutgoingMessage) -> dict[str, Any]:
    """Encode a message; unset fields and an empty attachment list are omitted."""
    return build_message_payload(message).model_dump(mode="json", exclude_none=True)


def message_json(message: OutgoingMessage) -> str:
    return json.dumps(encode_message(message), ensure_ascii=False)
