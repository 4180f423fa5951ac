"""Release deferred notifications once they are due."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hotel_ops.domain.entities import STATUS_SUPPRESSED
from hotel_ops.infrastructure.repositories import NotificationRepository, UserDirectory
from hotel_ops.utils import Clock

from .delivery import NotificationDelivery

logger = logging.getLogger(__name__)

RECIPIENT_UNREACHABLE = "recipient is no longer active"


class NotificationScheduler:
    """Periodic worker delivering pending records whose release time has passed.

    Overlapping ticks are safe: a record is only delivered by the tick that
    moves it out of ``pending``.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        delivery: NotificationDelivery,
        clock: Clock,
        batch_size: int | None = 500,
    ) -> None:
        self._session_factory = session_factory
        self._delivery = delivery
        self._clock = clock
        self._batch_size = batch_size

    async def tick(self) -> int:
        """Deliver every due record and return how many this tick released."""

        now = self._clock.now()
        released = 0
        suppressed = 0
        async with self._session_factory() as session:
            store = NotificationRepository(session)
            directory = UserDirectory(session)
            for hotel_id in await store.list_hotels_with_due(now):
                due = await store.query_due(
                    hotel_id=hotel_id, before=now, limit=self._batch_size
                )
                users = await directory.get_map_by_ids(
                    record.recipient_id for record in due
                )
                for record in due:
                    user = users.get(record.recipient_id)
                    if user is None or not user.is_reachable() or user.hotel_id != hotel_id:
                        if await store.update_status(
                            record.id,
                            STATUS_SUPPRESSED,
                            hotel_id=hotel_id,
                            failure_reason=RECIPIENT_UNREACHABLE,
                        ):
                            suppressed += 1
                        continue
                    if await self._delivery.deliver(record, store, directory):
                        released += 1

        if released or suppressed:
            logger.info(
                "Scheduler released %s and suppressed %s notification(s)", released, suppressed
            )
        return released


__all__ = ["NotificationScheduler", "RECIPIENT_UNREACHABLE"]
