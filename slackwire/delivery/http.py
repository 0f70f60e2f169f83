"""HTTP delivery of Slack payloads.

Messages go to an incoming-webhook URL as a form field named ``payload``;
delayed responses go to the request's ``response_url`` as a raw JSON body.
Failures are raised as ``DeliveryError``; nothing is retried here.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from slackwire.payload.message import OutgoingMessage, message_json
from slackwire.payload.response import PreparedResponse

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 30.0


class DeliveryError(Exception):
    """Raised when a payload could not be delivered to Slack."""

    def __init__(
        self,
        url: str | None,
        detail: str,
        status_code: int | None = None,
    ) -> None:
        self.url = url
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Delivery to {url} failed: {detail}")


class SlackDelivery:
    """POSTs encoded payloads to Slack.

    Pass ``client`` to share a connection pool or to mock the transport;
    otherwise a short-lived client is opened per call.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client
        self._timeout = timeout

    async def post(
        self,
        url: str | None,
        *,
        data: dict[str, str] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        if not url:
            raise DeliveryError(url, "no destination URL")

        kwargs: dict[str, Any] = {"headers": headers, "timeout": self._timeout}
        if data is not None:
            kwargs["data"] = data
        if content is not None:
            kwargs["content"] = content

        try:
            if self._client is not None:
                resp = await self._client.post(url, **kwargs)
            else:
                async with httpx.AsyncClient(verify=True) as client:
                    resp = await client.post(url, **kwargs)
        except httpx.HTTPError as e:
            raise DeliveryError(url, f"{type(e).__name__}: {e}") from e

        if not resp.is_success:
            raise DeliveryError(url, resp.text, status_code=resp.status_code)

        logger.info("Delivered payload to %s (%d)", url, resp.status_code)
        return resp

    async def send_message(self, message: OutgoingMessage) -> httpx.Response:
        """Post a message to its incoming-webhook URL."""
        return await self.post(
            message.webhook_url, data={"payload": message_json(message)},
        )

    async def send_response(self, prepared: PreparedResponse) -> httpx.Response:
        """Post a delayed response to the originating request's response_url."""
        return await self.post(
            prepared.url, content=prepared.body, headers=prepared.headers,
        )
