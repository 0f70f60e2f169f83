"""FastAPI endpoint for Slack slash commands and outgoing webhooks."""

from __future__ import annotations

import importlib
import inspect
import logging
import os
from collections.abc import Awaitable, Callable, Collection
from datetime import tzinfo
from zoneinfo import ZoneInfo

from fastapi import BackgroundTasks, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from slackwire.audit.logger import AuditLogger
from slackwire.delivery.http import DeliveryError, SlackDelivery
from slackwire.models import AuditEvent, AuditEventType, IncomingRequest, RiskLevel
from slackwire.payload.response import PreparedResponse, prepare_response
from slackwire.payload.response import Response as SlackResponse
from slackwire.request.classifier import (
    DEFAULT_TIMEZONE,
    InvalidRequestError,
    InvalidTokenError,
    classify,
    validate_allowed_tokens,
)

logger = logging.getLogger(__name__)

HandlerResult = SlackResponse | None | Awaitable[SlackResponse | None]
Handler = Callable[[IncomingRequest], HandlerResult]


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    handler = load_handler(os.environ["SLACKWIRE_HANDLER"])
    tokens = [
        t.strip() for t in os.environ.get("SLACK_TOKENS", "").split(",") if t.strip()
    ]
    tz = ZoneInfo(os.environ.get("SLACK_TIMEZONE", "Europe/Oslo"))
    timeout = float(os.environ.get("SLACK_DELIVERY_TIMEOUT", "30"))
    audit_log = os.environ.get("AUDIT_LOG_PATH")
    audit_logger = AuditLogger.from_env(audit_log) if audit_log else None
    return create_app(
        handler,
        allowed_tokens=tokens,
        delivery=SlackDelivery(timeout=timeout),
        audit_logger=audit_logger,
        tz=tz,
    )


def load_handler(path: str) -> Handler:
    """Resolve a ``package.module:callable`` import path."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Handler path must look like 'module:callable', got {path!r}")
    handler = getattr(importlib.import_module(module_name), attr)
    if not callable(handler):
        raise TypeError(f"Handler {path!r} is not callable")
    return handler


def create_app(
    handler: Handler,
    allowed_tokens: Collection[str] = (),
    delivery: SlackDelivery | None = None,
    audit_logger: AuditLogger | None = None,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> FastAPI:
    """Create the Slack endpoint app around a request handler."""
    tokens = validate_allowed_tokens(allowed_tokens)
    delivery = delivery or SlackDelivery()
    app = FastAPI(docs_url=None, redoc_url=None)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/slack")
    async def slack(request: Request, background_tasks: BackgroundTasks) -> Response:
        form = await request.form()
        fields = {k: v for k, v in form.items() if isinstance(v, str)}
        source_ip = request.client.host if request.client else None

        try:
            incoming = classify(fields, tokens, tz)
        except InvalidTokenError as e:
            _audit(audit_logger, AuditEvent(
                event_type=AuditEventType.TOKEN_REJECTED,
                source_ip=source_ip,
                team_id=fields.get("team_id"),
                user_id=fields.get("user_id"),
                action="classify",
                result="blocked",
                risk_level=RiskLevel.HIGH,
                details={"token": e.token},
            ))
            return JSONResponse({"error": "Invalid token"}, status_code=403)
        except InvalidRequestError as e:
            _audit(audit_logger, AuditEvent(
                event_type=AuditEventType.REQUEST_REJECTED,
                source_ip=source_ip,
                action="classify",
                result="failure",
                risk_level=RiskLevel.MEDIUM,
                details={"keys": sorted(fields)},
            ))
            return JSONResponse({"error": str(e)}, status_code=400)

        _audit(audit_logger, AuditEvent(
            event_type=AuditEventType.REQUEST_ACCEPTED,
            source_ip=source_ip,
            team_id=incoming.team_id,
            user_id=incoming.user_id,
            action="classify",
            result="success",
            risk_level=RiskLevel.INFO,
            details={
                "request_type": incoming.request_type.value,
                "command": incoming.command,
                "trigger_word": incoming.trigger_word,
            },
        ))

        reply = handler(incoming)
        if inspect.isawaitable(reply):
            reply = await reply
        if reply is None:
            return Response(status_code=200)

        prepared = prepare_response(reply)
        if not prepared.delayed:
            return Response(
                content=prepared.body, status_code=200, headers=prepared.headers,
            )

        background_tasks.add_task(
            _deliver_delayed, delivery, prepared, incoming, audit_logger,
        )
        return Response(status_code=200)

    return app


async def _deliver_delayed(
    delivery: SlackDelivery,
    prepared: PreparedResponse,
    incoming: IncomingRequest,
    audit_logger: AuditLogger | None,
) -> None:
    """Background task: POST a delayed response to the request's response_url."""
    try:
        await delivery.send_response(prepared)
    except DeliveryError as e:
        logger.exception("Delayed response to %s failed", e.url)
        _audit(audit_logger, AuditEvent(
            event_type=AuditEventType.DELIVERY_FAILED,
            team_id=incoming.team_id,
            user_id=incoming.user_id,
            action="delayed_response",
            result="failure",
            risk_level=RiskLevel.MEDIUM,
            details={"url": e.url, "status_code": e.status_code, "detail": e.detail},
        ))
        return

    _audit(audit_logger, AuditEvent(
        event_type=AuditEventType.RESPONSE_DELIVERED,
        team_id=incoming.team_id,
        user_id=incoming.user_id,
        action="delayed_response",
        result="success",
        risk_level=RiskLevel.INFO,
        details={"url": prepared.url},
    ))


def _audit(audit_logger: AuditLogger | None, event: AuditEvent) -> None:
    if audit_logger:
        audit_logger.log(event)
