"""Message attachment builder and encoder."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from slackwire.models import AttachmentField
from slackwire.payload.models import AttachmentPayload

NAMED_COLORS = frozenset({"good", "warning", "danger"})

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


def is_valid_color(color: object) -> bool:
    """Return True for good/warning/danger or a #rgb / #rrggbb hex color."""
    if not isinstance(color, str):
        return False
    return color in NAMED_COLORS or _HEX_COLOR.fullmatch(color) is not None


def as_text(value: object) -> str | None:
    return None if value is None else str(value)


@dataclass
class MarkdownFlags:
    """Which attachment parts Slack renders as mrkdwn."""

    text: bool = True
    pretext: bool = False
    fields: bool = False

    def enabled(self) -> list[str]:
        names = (("text", self.text), ("fields", self.fields), ("pretext", self.pretext))
        return [name for name, on in names if on]


@dataclass
class Attachment:
    """Mutable builder for a single message attachment."""

    fallback: str | None = None
    color: str | None = None
    pretext: str | None = None
    title: str | None = None
    title_link: str | None = None
    text: str | None = None
    image_url: str | None = None
    thumb_url: str | None = None
    author_name: str | None = None
    author_link: str | None = None
    author_icon: str | None = None
    fields: list[AttachmentField] = field(default_factory=list)
    mrkdwn: MarkdownFlags = field(default_factory=MarkdownFlags)

    def __setattr__(self, name: str, value: Any) -> None:
        # invalid colors are dropped on every assignment, the current one stays
        if name == "color" and value is not None and not is_valid_color(value):
            return
        super().__setattr__(name, value)

    def set_fallback(self, fallback: str | None) -> None:
        """Plain-text summary for clients that cannot render attachments."""
        self.fallback = fallback

    def set_color(self, color: str | None) -> None:
        """Set the border color. Invalid values leave the current color as is."""
        self.color = color

    def set_text(self, text: str | None) -> None:
        self.text = text

    def set_pretext(self, pretext: str | None) -> None:
        self.pretext = pretext

    def set_author(
        self,
        name: str | None = None,
        link: str | None = None,
        icon: str | None = None,
    ) -> None:
        """Author link and icon are only sent along with a name."""
        self.author_name = name
        self.author_link = link
        self.author_icon = icon

    def set_title(self, title: str | None, link: str | None = None) -> None:
        self.title = title
        self.title_link = link

    def add_field(self, title: object, value: object, short: object = False) -> None:
        self.fields.append(
            AttachmentField(title=str(title), value=str(value), short=bool(short))
        )

    def set_image(self, url: str | None) -> None:
        self.image_url = url

    def set_thumb(self, url: str | None) -> None:
        self.thumb_url = url

    def markdown(
        self, text: object = True, pretext: object = False, fields: object = False,
    ) -> None:
        self.mrkdwn = MarkdownFlags(
            text=bool(text), pretext=bool(pretext), fields=bool(fields),
        )


def build_attachment_payload(attachment: Attachment) -> AttachmentPayload:
    a = attachment
    return AttachmentPayload(
        text=as_text(a.text),
        pretext=as_text(a.pretext),
        fallback=as_text(a.fallback),
        color=a.color,
        title=as_text(a.title),
        image_url=as_text(a.image_url),
        thumb_url=as_text(a.thumb_url),
        title_link=as_text(a.title_link) if a.title is not None else None,
        author_name=as_text(a.author_name),
        author_link=as_text(a.author_link) if a.author_name is not None else None,
        author_icon=as_text(a.author_icon) if a.author_name is not None else None,
        mrkdwn_in=a.mrkdwn.enabled(),
        fields=list(a.fields) or None,
    )


def encode_attachment(attachment: Attachment) -> dict[str, Any]:
    """Encode an attachment into its wire document, in Slack's key order."""
    return build_attachment_payload(attachment).model_dump(
        mode="json", exclude_none=True,
    )
