"""Slash command / outgoing webhook request classification.

Turns the form fields Slack POSTs to an integration into a validated
``IncomingRequest``. Validation order:

1. Allow-list shape check (InvalidArgumentError)
2. Recognized-request check: token, team_id and one of command /
   trigger_word / text (InvalidRequestError)
3. Field extraction
4. Request type derivation (``IncomingRequest.request_type``)
5. Token allow-list check (InvalidTokenError)
"""

from __future__ import annotations

import hmac
import logging
import re
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo

from slackwire.models import IncomingRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = ZoneInfo("Europe/Oslo")

_REQUIRED_KEYS = ("token", "team_id")
_TRIGGER_KEYS = ("command", "trigger_word", "text")

# keys copied as-is
_PLAIN_KEYS = frozenset({
    "token",
    "team_id",
    "team_domain",
    "service_id",
    "channel_id",
    "user_id",
    "user_name",
    "text",
    "trigger_word",
    "response_url",
    "channel_name",
})

_WHITESPACE_RUN = re.compile(r"\s+")


class RejectionKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_REQUEST = "invalid_request"
    INVALID_TOKEN = "invalid_token"


class SlackRequestError(Exception):
    """Base class for classification failures."""

    kind: RejectionKind


class InvalidArgumentError(SlackRequestError, TypeError):
    """Raised when the caller passes a malformed field source or allow-list."""

    kind = RejectionKind.INVALID_ARGUMENT


class InvalidRequestError(SlackRequestError):
    """Raised when the fields do not describe a Slack command or webhook."""

    kind = RejectionKind.INVALID_REQUEST


class InvalidTokenError(SlackRequestError):
    """Raised when a recognized request carries a token outside the allow-list."""

    kind = RejectionKind.INVALID_TOKEN

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__("Invalid token received")


@dataclass(frozen=True)
class Classification:
    """Outcome of ``try_classify``: exactly one of request / error is set."""

    request: IncomingRequest | None = None
    error: SlackRequestError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def classify(
    fields: Mapping[str, str],
    allowed_tokens: Collection[str] = (),
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> IncomingRequest:
    """Classify and validate an inbound Slack request.

    An empty ``allowed_tokens`` accepts any token.
    """
    tokens = validate_allowed_tokens(allowed_tokens)
    if not isinstance(fields, Mapping):
        raise InvalidArgumentError(
            "Invalid field source. Should be a mapping of strings."
        )

    if not is_slack_request(fields):
        raise InvalidRequestError("No valid slack request detected.")

    request = IncomingRequest(**_extract(fields, tz))

    if tokens and not _token_allowed(request.token, tokens):
        raise InvalidTokenError(request.token)

    return request


def try_classify(
    fields: Mapping[str, str],
    allowed_tokens: Collection[str] = (),
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> Classification:
    """Like ``classify`` but returns the failure instead of raising it."""
    try:
        return Classification(request=classify(fields, allowed_tokens, tz))
    except SlackRequestError as e:
        return Classification(error=e)


def is_slack_request(fields: Mapping[str, str]) -> bool:
    """Return True if the fields carry the minimum keys of a Slack request."""
    return (
        all(fields.get(key) is not None for key in _REQUIRED_KEYS)
        and any(fields.get(key) is not None for key in _TRIGGER_KEYS)
    )


def split_args(text: str | None) -> list[str]:
    """Collapse whitespace runs and split command text into arguments."""
    if text is None:
        return []
    collapsed = _WHITESPACE_RUN.sub(" ", text).strip()
    if not collapsed:
        return []
    return collapsed.split(" ")


def parse_timestamp(value: str, tz: tzinfo = DEFAULT_TIMEZONE) -> datetime:
    """Parse Unix epoch seconds into an aware datetime in ``tz``.

    Fractional seconds are truncated. Unparseable values become epoch 0.
    """
    try:
        seconds = int(float(value))
        return datetime.fromtimestamp(seconds, tz=tz)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning("Unparseable Slack timestamp %r, using epoch 0", value)
        return datetime.fromtimestamp(0, tz=tz)


def validate_allowed_tokens(allowed_tokens: Any) -> tuple[str, ...]:
    if (
        allowed_tokens is None
        or isinstance(allowed_tokens, (str, bytes, Mapping))
        or not isinstance(allowed_tokens, Collection)
        or not all(isinstance(t, str) for t in allowed_tokens)
    ):
        raise InvalidArgumentError(
            "Invalid token type. Should be a sequence of strings."
        )
    return tuple(allowed_tokens)


def _token_allowed(token: str, allowed_tokens: tuple[str, ...]) -> bool:
    provided = token.encode()
    return any(
        hmac.compare_digest(provided, allowed.encode()) for allowed in allowed_tokens
    )


def _extract(fields: Mapping[str, str], tz: tzinfo) -> dict[str, Any]:
    """Copy every recognized key; unrecognized keys are ignored."""
    data: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if key in _PLAIN_KEYS:
            data[key] = value
        elif key == "timestamp":
            data["timestamp"] = parse_timestamp(value, tz)
        elif key == "command":
            data["command"] = value[1:] if value.startswith("/") else value
            data["args"] = tuple(split_args(fields.get("text")))
    return data
