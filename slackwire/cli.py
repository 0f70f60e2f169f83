"""Click CLI for sending Slack messages and inspecting inbound requests."""

from __future__ import annotations

import asyncio
import json

import click

from slackwire.delivery.http import DeliveryError, SlackDelivery
from slackwire.payload.attachment import Attachment, is_valid_color
from slackwire.payload.message import OutgoingMessage, message_json
from slackwire.request.classifier import SlackRequestError, classify


def _parse_pairs(pairs: tuple[str, ...], what: str) -> list[tuple[str, str]]:
    parsed: list[tuple[str, str]] = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint=what)
        parsed.append((key, value))
    return parsed


@click.group()
def cli() -> None:
    """Slack webhook message and request tooling."""


@cli.command()
@click.option("--webhook-url", envvar="SLACK_WEBHOOK_URL", help="Incoming webhook URL.")
@click.option("--text", default=None, help="Message text.")
@click.option("--channel", default=None, help="Channel (#name) or user (@name).")
@click.option("--username", default=None, help="Bot username override.")
@click.option("--icon-url", default=None, help="Bot icon URL.")
@click.option("--icon-emoji", default=None, help="Bot icon emoji, e.g. :ghost:.")
@click.option("--title", default=None, help="Attachment title.")
@click.option("--title-link", default=None, help="Attachment title link.")
@click.option("--color", default=None, help="good, warning, danger or a hex color.")
@click.option("--field", "fields", multiple=True, help="Attachment field TITLE=VALUE.")
@click.option("--short", is_flag=True, help="Render attachment fields side by side.")
@click.option("--dry-run", is_flag=True, help="Print the payload instead of sending.")
def send(
    webhook_url: str | None,
    text: str | None,
    channel: str | None,
    username: str | None,
    icon_url: str | None,
    icon_emoji: str | None,
    title: str | None,
    title_link: str | None,
    color: str | None,
    fields: tuple[str, ...],
    short: bool,
    dry_run: bool,
) -> None:
    """Post a message to a Slack incoming webhook."""
    if color is not None and not is_valid_color(color):
        raise click.BadParameter(f"invalid color {color!r}", param_hint="--color")

    message = OutgoingMessage(webhook_url=webhook_url)
    message.set_text(text)
    message.set_channel(channel)
    message.set_username(username)
    message.set_icon_url(icon_url)
    message.set_icon_emoji(icon_emoji)

    if title or color or fields:
        attachment = Attachment()
        attachment.set_title(title, title_link)
        attachment.set_color(color)
        attachment.set_fallback(text or title)
        for field_title, value in _parse_pairs(fields, "--field"):
            attachment.add_field(field_title, value, short)
        message.add_attachment(attachment)

    if dry_run:
        click.echo(message_json(message))
        return

    if not webhook_url:
        raise click.UsageError("--webhook-url (or SLACK_WEBHOOK_URL) is required")

    try:
        resp = asyncio.run(SlackDelivery().send_message(message))
    except DeliveryError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Sent ({resp.status_code})", err=True)


@cli.command("classify")
@click.argument("pairs", nargs=-1)
@click.option("--token", "tokens", multiple=True, help="Allowed token (repeatable).")
def classify_command(pairs: tuple[str, ...], tokens: tuple[str, ...]) -> None:
    """Classify form fields given as KEY=VALUE pairs."""
    fields = dict(_parse_pairs(pairs, "PAIRS"))
    try:
        request = classify(fields, tokens)
    except SlackRequestError as e:
        raise click.ClickException(f"{e.kind.value}: {e}") from e
    output = json.loads(request.model_dump_json())
    click.echo(json.dumps(output, indent=2))
