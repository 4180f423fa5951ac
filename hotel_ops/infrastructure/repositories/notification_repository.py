"""Persistence helpers for notification records.

Every read and write is scoped to a hotel. Status changes are conditional
updates guarded by the current status, so concurrent dispatchers and
scheduler ticks can race without moving a record twice.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ops.domain.entities import (
    COALESCIBLE_STATUSES,
    DELIVERY_DELIVERED,
    DELIVERY_FAILED,
    STATUS_PENDING,
    STATUS_SENT,
    TERMINAL_STATUSES,
    NotificationRecord,
)
from hotel_ops.domain.exceptions import IllegalStatusTransition
from hotel_ops.infrastructure.models import NotificationModel
from hotel_ops.utils import as_utc, to_storage

COALESCED_SUFFIX = re.compile(r" \(\+\d+ more\)$")


def _select() -> Select:
    # Conditional updates bypass the identity map; reload rows on every read.
    return select(NotificationModel).execution_options(populate_existing=True)


class NotificationRepository:
    """Durable store of :class:`NotificationRecord` objects."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, record_id: int, *, hotel_id: int) -> NotificationRecord | None:
        model = await self._get_model(record_id, hotel_id=hotel_id)
        return self._to_entity(model) if model else None

    async def create(self, record: NotificationRecord) -> NotificationRecord:
        """Persist ``record`` as a new pending notification and return it with its id."""

        model = NotificationModel()
        self._apply_entity_to_model(model, record)
        model.status = STATUS_PENDING
        model.sent_at = None
        model.read_at = None
        model.failure_reason = None
        self.session.add(model)
        await self.session.commit()
        await self.session.refresh(model)
        return self._to_entity(model)

    async def update_status(
        self,
        record_id: int,
        new_status: str,
        *,
        hotel_id: int,
        sent_at: datetime | None = None,
        failure_reason: str | None = None,
    ) -> bool:
        """Move a pending record to ``new_status``.

        Returns ``False`` when the record is missing or no longer pending.
        """

        if new_status not in TERMINAL_STATUSES:
            raise IllegalStatusTransition(STATUS_PENDING, new_status)
        if new_status == STATUS_SENT and sent_at is None:
            raise ValueError("sent_at is required when marking a notification as sent")

        values: dict[str, Any] = {"status": new_status}
        if new_status == STATUS_SENT:
            values["sent_at"] = to_storage(sent_at)
        if failure_reason is not None:
            values["failure_reason"] = failure_reason

        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == record_id,
                NotificationModel.hotel_id == hotel_id,
                NotificationModel.status == STATUS_PENDING,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount == 1

    async def append_to_message(
        self,
        record_id: int,
        suffix: str,
        *,
        hotel_id: int,
        expected_count: int,
    ) -> bool:
        """Fold a duplicate into an existing record.

        The previous ``(+N more)`` suffix is replaced by ``suffix`` and the
        coalesced count is incremented. The update only applies while the
        record is still pending or sent and nobody merged into it since
        ``expected_count`` was read.
        """

        model = await self._get_model(record_id, hotel_id=hotel_id)
        if model is None or model.status not in COALESCIBLE_STATUSES:
            await self.session.rollback()
            return False

        message = COALESCED_SUFFIX.sub("", model.message) + suffix
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == record_id,
                NotificationModel.hotel_id == hotel_id,
                NotificationModel.status.in_(COALESCIBLE_STATUSES),
                NotificationModel.coalesced_count == expected_count,
            )
            .values(message=message, coalesced_count=expected_count + 1)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount == 1

    async def query_recent(
        self,
        *,
        recipient_id: int,
        kind: str,
        hotel_id: int,
        since: datetime,
    ) -> Sequence[NotificationRecord]:
        """Return immediate records of the suppression key created at or after ``since``."""

        statement = (
            _select()
            .where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.kind == kind,
                NotificationModel.hotel_id == hotel_id,
                NotificationModel.created_at >= to_storage(since),
                NotificationModel.status.in_(COALESCIBLE_STATUSES),
                NotificationModel.scheduled_for.is_(None),
            )
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        result = await self.session.execute(statement)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_hotels_with_due(self, before: datetime) -> Sequence[int]:
        result = await self.session.execute(
            select(NotificationModel.hotel_id)
            .where(
                NotificationModel.status == STATUS_PENDING,
                NotificationModel.scheduled_for.is_not(None),
                NotificationModel.scheduled_for <= to_storage(before),
            )
            .distinct()
            .order_by(NotificationModel.hotel_id)
        )
        return list(result.scalars().all())

    async def query_due(
        self, *, hotel_id: int, before: datetime, limit: int | None = None
    ) -> Sequence[NotificationRecord]:
        """Return pending scheduled records of ``hotel_id`` due at or before ``before``."""

        statement = (
            _select()
            .where(
                NotificationModel.hotel_id == hotel_id,
                NotificationModel.status == STATUS_PENDING,
                NotificationModel.scheduled_for.is_not(None),
                NotificationModel.scheduled_for <= to_storage(before),
            )
            .order_by(NotificationModel.scheduled_for, NotificationModel.id)
        )
        if limit is not None:
            statement = statement.limit(limit)
        result = await self.session.execute(statement)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def mark_delivered(
        self, record_id: int, channel: str, *, hotel_id: int, at: datetime
    ) -> None:
        await self._record_channel_result(
            record_id, channel, {"status": DELIVERY_DELIVERED}, hotel_id=hotel_id, at=at
        )

    async def mark_failed(
        self, record_id: int, channel: str, reason: str, *, hotel_id: int, at: datetime
    ) -> None:
        await self._record_channel_result(
            record_id,
            channel,
            {"status": DELIVERY_FAILED, "reason": reason},
            hotel_id=hotel_id,
            at=at,
        )

    async def list_for_user(
        self,
        user_id: int,
        *,
        hotel_id: int,
        unread_only: bool = False,
        limit: int | None = 50,
    ) -> Sequence[NotificationRecord]:
        """Return the inbox of ``user_id``: records that are not waiting to be released."""

        statement = _select().where(
            NotificationModel.recipient_id == user_id,
            NotificationModel.hotel_id == hotel_id,
            NotificationModel.status == STATUS_SENT,
        )
        if unread_only:
            statement = statement.where(NotificationModel.read_at.is_(None))
        statement = statement.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            statement = statement.limit(limit)
        result = await self.session.execute(statement)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def mark_as_read(
        self,
        notification_ids: Iterable[int],
        *,
        user_id: int,
        hotel_id: int,
        at: datetime,
    ) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        result = await self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id.in_(ids),
                NotificationModel.recipient_id == user_id,
                NotificationModel.hotel_id == hotel_id,
                NotificationModel.read_at.is_(None),
            )
            .values(read_at=to_storage(at))
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount

    async def search(
        self,
        hotel_id: int,
        *,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        kind: str | None = None,
        status: str | None = None,
        recipient_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[NotificationRecord]:
        """Return records of ``hotel_id`` matching the optional filters, newest first."""

        statement = _select().where(NotificationModel.hotel_id == hotel_id)
        if created_from is not None:
            statement = statement.where(
                NotificationModel.created_at >= to_storage(created_from)
            )
        if created_to is not None:
            statement = statement.where(
                NotificationModel.created_at <= to_storage(created_to)
            )
        if kind:
            statement = statement.where(NotificationModel.kind == kind)
        if status:
            statement = statement.where(NotificationModel.status == status)
        if recipient_id is not None:
            statement = statement.where(NotificationModel.recipient_id == recipient_id)
        statement = (
            statement.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def _get_model(
        self, record_id: int, *, hotel_id: int
    ) -> NotificationModel | None:
        result = await self.session.execute(
            _select().where(
                NotificationModel.id == record_id,
                NotificationModel.hotel_id == hotel_id,
            )
        )
        return result.scalar_one_or_none()

    async def _record_channel_result(
        self,
        record_id: int,
        channel: str,
        outcome: dict[str, Any],
        *,
        hotel_id: int,
        at: datetime,
    ) -> None:
        model = await self._get_model(record_id, hotel_id=hotel_id)
        if model is None:
            msg = f"Notification with id {record_id} not found"
            raise ValueError(msg)
        outcome = {**outcome, "at": as_utc(at).isoformat()}
        # Reassign so the JSON column is flagged as modified.
        model.channel_results = {**(model.channel_results or {}), channel: outcome}
        await self.session.commit()

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, record: NotificationRecord
    ) -> None:
        model.recipient_id = record.recipient_id
        model.hotel_id = record.hotel_id
        model.kind = record.kind
        model.title = record.title
        model.message = record.message
        model.priority = record.priority
        model.channels = list(record.channels)
        model.scheduled_for = to_storage(record.scheduled_for)
        model.created_at = to_storage(record.created_at)
        model.channel_results = dict(record.channel_results or {})
        model.metadata_ = dict(record.metadata or {})
        model.coalesced_count = record.coalesced_count or 0

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            recipient_id=model.recipient_id,
            hotel_id=model.hotel_id,
            kind=model.kind,
            title=model.title,
            message=model.message,
            priority=model.priority,
            status=model.status,
            channels=tuple(model.channels or ()),
            scheduled_for=as_utc(model.scheduled_for),
            created_at=as_utc(model.created_at),
            sent_at=as_utc(model.sent_at),
            read_at=as_utc(model.read_at),
            failure_reason=model.failure_reason,
            channel_results=dict(model.channel_results or {}),
            metadata=dict(model.metadata_ or {}),
            coalesced_count=model.coalesced_count or 0,
        )


__all__ = ["COALESCED_SUFFIX", "NotificationRepository"]
