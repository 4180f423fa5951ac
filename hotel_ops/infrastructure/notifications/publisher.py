"""Bounded realtime delivery of notification envelopes to websocket subscribers."""

from __future__ import annotations

from typing import Any

import anyio

from hotel_ops.domain.entities import NotificationRecord
from hotel_ops.domain.exceptions import PushDeliveryError

from .manager import NotificationConnectionManager

TOPIC_NEW = "notification:new"
TOPIC_URGENT = "notification:urgent"


class RealtimeFanOut:
    """Push envelopes to per-user and per-hotel channels, bounded by a timeout.

    Transport errors and timeouts surface as :class:`PushDeliveryError`; the
    caller decides how to record them.
    """

    def __init__(
        self,
        manager: NotificationConnectionManager,
        *,
        timeout: float = 2.0,
    ) -> None:
        self._manager = manager
        self._timeout = timeout

    async def send_to_user(
        self, user_id: int, topic: str, envelope: dict[str, Any]
    ) -> int:
        return await self._send(
            self._manager.send_to_user, user_id, {"type": topic, "data": envelope}
        )

    async def send_to_tenant(
        self, hotel_id: int, topic: str, envelope: dict[str, Any]
    ) -> int:
        return await self._send(
            self._manager.send_to_hotel, hotel_id, {"type": topic, "data": envelope}
        )

    async def _send(self, send, target: int, message: dict[str, Any]) -> int:
        try:
            with anyio.fail_after(self._timeout):
                return await send(target, message)
        except TimeoutError as exc:
            raise PushDeliveryError(
                f"Realtime delivery timed out after {self._timeout}s"
            ) from exc
        except PushDeliveryError:
            raise
        except Exception as exc:
            raise PushDeliveryError(str(exc) or exc.__class__.__name__) from exc


def serialize_notification(record: NotificationRecord) -> dict[str, Any]:
    """Return the client projection of ``record`` carried by an envelope."""

    return {
        "id": record.id,
        "kind": record.kind,
        "title": record.title,
        "message": record.message,
        "priority": record.priority,
        "metadata": record.metadata or {},
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "read_at": record.read_at.isoformat() if record.read_at else None,
    }


__all__ = [
    "RealtimeFanOut",
    "TOPIC_NEW",
    "TOPIC_URGENT",
    "serialize_notification",
]
