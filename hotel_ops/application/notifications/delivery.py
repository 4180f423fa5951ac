"""Deliver a persisted notification over its channels and record the outcome."""

from __future__ import annotations

import logging
from typing import Mapping

from hotel_ops.domain.entities import (
    CHANNEL_IN_APP,
    CHANNEL_PUSH,
    STATUS_FAILED,
    STATUS_SENT,
    NotificationRecord,
)
from hotel_ops.domain.exceptions import PushDeliveryError
from hotel_ops.infrastructure.notifications import (
    TOPIC_NEW,
    TOPIC_URGENT,
    NotificationSink,
    RealtimeFanOut,
    serialize_notification,
)
from hotel_ops.infrastructure.repositories import NotificationRepository, UserDirectory
from hotel_ops.utils import Clock

logger = logging.getLogger(__name__)

NO_TRANSPORT = "no transport configured"


class NotificationDelivery:
    """Release a pending record to its recipient.

    The in-app channel succeeds by persistence alone, so a record carrying it
    is claimed as ``sent`` before anything goes over the network. Transport
    failures on the other channels are recorded per channel and never raised.
    """

    def __init__(
        self,
        fan_out: RealtimeFanOut,
        clock: Clock,
        sinks: Mapping[str, NotificationSink] | None = None,
    ) -> None:
        self._fan_out = fan_out
        self._clock = clock
        self._sinks = dict(sinks or {})

    async def deliver(
        self,
        record: NotificationRecord,
        store: NotificationRepository,
        directory: UserDirectory,
    ) -> bool:
        """Deliver ``record``; ``False`` when another worker already released it."""

        durable = CHANNEL_IN_APP in record.channels
        if durable:
            claimed = await store.update_status(
                record.id, STATUS_SENT, hotel_id=record.hotel_id, sent_at=self._clock.now()
            )
            if not claimed:
                logger.debug("Notification %s already released", record.id)
                return False
            await store.mark_delivered(
                record.id, CHANNEL_IN_APP, hotel_id=record.hotel_id, at=self._clock.now()
            )

        failures: list[str] = []
        if CHANNEL_PUSH in record.channels:
            reason = await self._push(record)
            if reason is None:
                await store.mark_delivered(
                    record.id, CHANNEL_PUSH, hotel_id=record.hotel_id, at=self._clock.now()
                )
            else:
                failures.append(reason)
                await store.mark_failed(
                    record.id, CHANNEL_PUSH, reason, hotel_id=record.hotel_id, at=self._clock.now()
                )

        extra_channels = [
            channel for channel in record.channels if channel not in (CHANNEL_IN_APP, CHANNEL_PUSH)
        ]
        for channel in extra_channels:
            reason = await self._send_via_sink(channel, record, directory)
            if reason is None:
                await store.mark_delivered(
                    record.id, channel, hotel_id=record.hotel_id, at=self._clock.now()
                )
            else:
                failures.append(reason)
                await store.mark_failed(
                    record.id, channel, reason, hotel_id=record.hotel_id, at=self._clock.now()
                )

        if durable:
            return True
        delivered_any = len(failures) < len(record.channels)
        if delivered_any:
            return await store.update_status(
                record.id, STATUS_SENT, hotel_id=record.hotel_id, sent_at=self._clock.now()
            )
        return await store.update_status(
            record.id,
            STATUS_FAILED,
            hotel_id=record.hotel_id,
            failure_reason="; ".join(failures),
        )

    async def _push(self, record: NotificationRecord) -> str | None:
        envelope = serialize_notification(record)
        errors: list[str] = []
        try:
            await self._fan_out.send_to_user(record.recipient_id, TOPIC_NEW, envelope)
        except PushDeliveryError as exc:
            errors.append(str(exc))
        if record.is_escalated():
            try:
                await self._fan_out.send_to_tenant(
                    record.hotel_id,
                    TOPIC_URGENT,
                    {**envelope, "recipient_id": record.recipient_id},
                )
            except PushDeliveryError as exc:
                errors.append(str(exc))
        if not errors:
            return None
        reason = "; ".join(errors)
        logger.warning("Push delivery failed for notification %s: %s", record.id, reason)
        return reason

    async def _send_via_sink(
        self, channel: str, record: NotificationRecord, directory: UserDirectory
    ) -> str | None:
        sink = self._sinks.get(channel)
        if sink is None:
            return NO_TRANSPORT
        recipient = await directory.get(record.recipient_id)
        if recipient is None:
            return f"user {record.recipient_id} not found"
        try:
            await sink.send(record, recipient)
        except Exception as exc:
            reason = str(exc) or exc.__class__.__name__
            logger.warning(
                "%s delivery failed for notification %s: %s", channel, record.id, reason
            )
            return reason
        return None


__all__ = ["NO_TRANSPORT", "NotificationDelivery"]
