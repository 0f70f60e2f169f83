"""Slash command / outgoing webhook response builder and encoder.

A response is either written back as the HTTP reply to the original request
(immediate) or POSTed later to the request's ``response_url`` (delayed).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from slackwire.models import IncomingRequest, ResponseType
from slackwire.payload.attachment import Attachment, build_attachment_payload
from slackwire.payload.models import ResponsePayload

IMMEDIATE_CONTENT_TYPE = "application/json; charset=utf-8"
DELAYED_CONTENT_TYPE = "application/json"


class Response:
    """Mutable builder for the reply to one ``IncomingRequest``.

    Commands default to an ephemeral reply; webhooks default to an
    immediate in-channel reply.
    """

    def __init__(self, request: IncomingRequest) -> None:
        self.request = request
        self.text = ""
        self.delayed = False
        self.attachments: list[Attachment] = []
        if request.is_command:
            self.response_type = ResponseType.EPHEMERAL
        else:
            self.response_type = ResponseType.IN_CHANNEL

    def set_delayed(self, delayed: object) -> None:
        self.delayed = bool(delayed)

    def set_ephemeral(self) -> None:
        self.response_type = ResponseType.EPHEMERAL

    def set_in_channel(self) -> None:
        self.response_type = ResponseType.IN_CHANNEL

    def set_text(self, text: object) -> None:
        self.text = "" if text is None else str(text)

    def add_attachment(self, attachment: Attachment) -> None:
        self.attachments.append(attachment)


@dataclass(frozen=True)
class PreparedResponse:
    """An encoded response together with how it must be delivered."""

    delayed: bool
    body: bytes
    url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


def build_response_payload(response: Response) -> ResponsePayload:
    return ResponsePayload(
        text=response.text or "",
        response_type=response.response_type,
        attachments=[build_attachment_payload(a) for a in response.attachments or ()],
    )


def encode_response(response: Response) -> dict[str, Any]:
    """Encode a response. ``text``, ``response_type`` and ``attachments`` are always present."""
    return build_response_payload(response).model_dump(mode="json", exclude_none=True)


def response_json(response: Response) -> str:
    return json.dumps(encode_response(response), ensure_ascii=False)


def prepare_response(response: Response) -> PreparedResponse:
    """Encode a response and decide between the inline reply and the delayed POST."""
    body = response_json(response).encode("utf-8")
    if not response.delayed:
        return PreparedResponse(
            delayed=False,
            body=body,
            headers={"Content-Type": IMMEDIATE_CONTENT_TYPE},
        )
    return PreparedResponse(
        delayed=True,
        body=body,
        url=response.request.response_url,
        headers={
            "Content-Type": DELAYED_CONTENT_TYPE,
            "Content-Length": str(len(body)),
        },
    )
