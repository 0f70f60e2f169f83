"""Wire documents for outbound Slack payloads.

Field declaration order is the wire key order; optional keys are dropped
with ``model_dump(exclude_none=True)``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from slackwire.models import AttachmentField, ResponseType


class AttachmentPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str | None = None
    pretext: str | None = None
    fallback: str | None = None
    color: str | None = None
    title: str | None = None
    image_url: str | None = None
    thumb_url: str | None = None
    title_link: str | None = None
    author_name: str | None = None
    author_link: str | None = None
    author_icon: str | None = None
    mrkdwn_in: list[str]
    fields: list[AttachmentField] | None = None


class MessagePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str | None = None
    icon_url: str | None = None
    icon_emoji: str | None = None
    username: str | None = None
    channel: str | None = None
    attachments: list[AttachmentPayload] | None = None


class ResponsePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    response_type: ResponseType
    attachments: list[AttachmentPayload] = []
