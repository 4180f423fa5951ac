"""Outbound transports for the email and sms notification channels."""

from __future__ import annotations

import html
import json
import logging
from typing import Any, Protocol

from anyio import to_thread
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from hotel_ops.config import Settings
from hotel_ops.domain.entities import CHANNEL_EMAIL, NotificationRecord, User
from hotel_ops.domain.exceptions import NotificationError

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Transport for one named channel. Raises on failure."""

    channel: str

    async def send(self, record: NotificationRecord, recipient: User) -> None: ...


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body

    if isinstance(body, dict):
        messages = [
            str(item["message"])
            for item in body.get("errors") or []
            if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
        return json.dumps(body, default=str)
    return str(body)


class SendGridEmailSink:
    """Deliver the rendered notification to the recipient's email address."""

    channel = CHANNEL_EMAIL

    def __init__(self, api_key: str, sender: str) -> None:
        self._api_key = api_key
        self._sender = sender

    async def send(self, record: NotificationRecord, recipient: User) -> None:
        if not recipient.email:
            raise NotificationError(f"User {recipient.id} has no email address")
        message = Mail(
            from_email=self._sender,
            to_emails=recipient.email,
            subject=record.title,
            html_content=f"<p>{html.escape(record.message)}</p>",
        )
        # The SendGrid client is blocking.
        await to_thread.run_sync(self._send, message)

    def _send(self, message: Mail) -> None:
        try:
            response = SendGridAPIClient(self._api_key).send(message)
        except Exception as exc:
            details = _extract_sendgrid_error_details(getattr(exc, "body", None))
            status_code = getattr(exc, "status_code", None)
            logger.error(
                "SendGrid API request failed with status %s: %s", status_code, details
            )
            raise NotificationError(details or str(exc)) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _extract_sendgrid_error_details(getattr(response, "body", None))
            logger.error("SendGrid API responded with status %s: %s", status_code, details)
            raise NotificationError(f"SendGrid responded with status {status_code}")


def build_sinks(settings: Settings) -> dict[str, NotificationSink]:
    """Return the transports enabled by ``settings``, keyed by channel."""

    sinks: dict[str, NotificationSink] = {}
    if settings.sendgrid_api_key and settings.sendgrid_sender:
        sinks[CHANNEL_EMAIL] = SendGridEmailSink(
            settings.sendgrid_api_key, settings.sendgrid_sender
        )
    else:
        logger.info("SendGrid configuration incomplete; email channel disabled")
    return sinks


__all__ = ["NotificationSink", "SendGridEmailSink", "build_sinks"]
