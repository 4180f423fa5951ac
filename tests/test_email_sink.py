"""Tests for the SendGrid email channel."""

from __future__ import annotations

import json
import types

import pytest

from hotel_ops.config import Settings
from hotel_ops.domain.entities import CHANNEL_EMAIL, NotificationRecord, User
from hotel_ops.domain.exceptions import NotificationError
from hotel_ops.infrastructure.notifications import sinks as sinks_module
from hotel_ops.infrastructure.notifications import SendGridEmailSink, build_sinks

pytestmark = pytest.mark.anyio


def _record() -> NotificationRecord:
    return NotificationRecord(
        id=3,
        recipient_id=7,
        hotel_id=1,
        kind="maintenance_urgent",
        title="URGENT Maintenance Required",
        message="🚨 URGENT: plumbing in Room 101 - <now>",
        priority="urgent",
        channels=("email",),
    )


def _user(email: str = "tech@example.com") -> User:
    return User(id=7, hotel_id=1, name="Tech", email=email, role="maintenance")


class RecordingClient:
    sent: list = []

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def send(self, message):
        RecordingClient.sent.append(message)
        return types.SimpleNamespace(status_code=202, body=None)


async def test_email_is_sent_with_rendered_content(monkeypatch: pytest.MonkeyPatch) -> None:
    RecordingClient.sent = []
    monkeypatch.setattr(sinks_module, "SendGridAPIClient", RecordingClient)

    await SendGridEmailSink("SG.fake", "ops@example.com").send(_record(), _user())

    [message] = RecordingClient.sent
    payload = message.get()
    assert payload["subject"] == "URGENT Maintenance Required"
    assert payload["personalizations"][0]["to"] == [{"email": "tech@example.com"}]
    assert "&lt;now&gt;" in payload["content"][0]["value"]


async def test_forbidden_response_raises_with_details(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    class ForbiddenError(Exception):
        status_code = 403
        body = json.dumps(
            {"errors": [{"message": "The provided authorization grant is invalid."}]}
        ).encode()

    class FailingClient(RecordingClient):
        def send(self, message):
            raise ForbiddenError()

    monkeypatch.setattr(sinks_module, "SendGridAPIClient", FailingClient)

    with caplog.at_level("ERROR"):
        with pytest.raises(NotificationError, match="authorization grant is invalid"):
            await SendGridEmailSink("SG.fake", "ops@example.com").send(_record(), _user())

    assert "status 403" in caplog.text


async def test_recipient_without_email_is_rejected() -> None:
    with pytest.raises(NotificationError):
        await SendGridEmailSink("SG.fake", "ops@example.com").send(_record(), _user(email=""))


def test_email_channel_requires_complete_configuration() -> None:
    assert build_sinks(Settings(_env_file=None)) == {}

    configured = build_sinks(
        Settings(_env_file=None, sendgrid_api_key="SG.fake", sendgrid_sender="ops@example.com")
    )
    assert list(configured) == [CHANNEL_EMAIL]


def test_partial_email_configuration_is_invalid() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, sendgrid_api_key="SG.fake")
