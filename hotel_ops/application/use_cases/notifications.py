"""Inbox and audit queries over persisted notifications."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ops.domain.entities import NotificationRecord, User
from hotel_ops.infrastructure.repositories import NotificationRepository


async def list_user_notifications(
    session: AsyncSession,
    user: User,
    *,
    unread_only: bool = False,
    limit: int | None = 50,
) -> Sequence[NotificationRecord]:
    """Return the released notifications of ``user``, newest first."""

    repository = NotificationRepository(session)
    return await repository.list_for_user(
        user.id, hotel_id=user.hotel_id, unread_only=unread_only, limit=limit
    )


async def mark_notifications_as_read(
    session: AsyncSession,
    user: User,
    notification_ids: Iterable[int],
    *,
    at: datetime,
) -> int:
    repository = NotificationRepository(session)
    return await repository.mark_as_read(
        notification_ids, user_id=user.id, hotel_id=user.hotel_id, at=at
    )


async def search_hotel_notifications(
    session: AsyncSession,
    user: User,
    *,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    kind: str | None = None,
    status: str | None = None,
    recipient_id: int | None = None,
    limit: int = 100,
    offset: int = 0,
) -> Sequence[NotificationRecord]:
    """Return notifications of the hotel managed by ``user`` matching the filters."""

    if created_from and created_to and created_from > created_to:
        raise ValueError("created_from must not be later than created_to")
    repository = NotificationRepository(session)
    return await repository.search(
        user.hotel_id,
        created_from=created_from,
        created_to=created_to,
        kind=kind,
        status=status,
        recipient_id=recipient_id,
        limit=limit,
        offset=offset,
    )


__all__ = [
    "list_user_notifications",
    "mark_notifications_as_read",
    "search_hotel_notifications",
]
