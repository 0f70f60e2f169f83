"""Inbound Slack request classification."""

from slackwire.request.classifier import (
    Classification,
    InvalidArgumentError,
    InvalidRequestError,
    InvalidTokenError,
    RejectionKind,
    SlackRequestError,
    classify,
    try_classify,
)

__all__ = [
    "Classification",
    "InvalidArgumentError",
    "InvalidRequestError",
    "InvalidTokenError",
    "RejectionKind",
    "SlackRequestError",
    "classify",
    "try_classify",
]
