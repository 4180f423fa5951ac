"""Entry point that turns event intents into delivered notification records."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hotel_ops.domain.entities import EventIntent, NotificationRecord
from hotel_ops.domain.exceptions import DispatchError
from hotel_ops.infrastructure.repositories import NotificationRepository, UserDirectory
from hotel_ops.utils import Clock, as_utc

from .delivery import NotificationDelivery
from .recipients import RecipientResolver
from .rendering import ContentRenderer, RenderedContent
from .suppression import Create, SuppressionEngine

logger = logging.getLogger(__name__)

# A merge can lose the race against a concurrent merge or a status change;
# the second attempt re-reads the live records before falling back to create.
COALESCE_ATTEMPTS = 2


class NotificationDispatcher:
    """Render, route, suppress, persist and deliver notifications.

    The dispatcher is built once at startup and shared. Each call opens its own
    session so concurrent dispatches never share a transaction.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        renderer: ContentRenderer,
        suppression: SuppressionEngine,
        delivery: NotificationDelivery,
        clock: Clock,
    ) -> None:
        self._session_factory = session_factory
        self._renderer = renderer
        self._suppression = suppression
        self._delivery = delivery
        self._clock = clock

    async def dispatch(self, intent: EventIntent) -> list[int]:
        """Create and deliver the notifications of ``intent``.

        Returns the ids of newly created records. Recipients whose duplicate
        was merged into a live record do not contribute an id.
        """

        content = self._renderer.render(intent.kind, intent.payload)
        async with self._session_factory() as session:
            store = NotificationRepository(session)
            directory = UserDirectory(session)
            recipients = await RecipientResolver(directory).resolve(
                intent.kind, intent.payload, intent.recipients, intent.hotel_id
            )
            if not recipients:
                logger.info(
                    "No recipients for %s in hotel %s", intent.kind_name, intent.hotel_id
                )
                return []

            created: list[int] = []
            for recipient_id in recipients:
                candidate = self._suppression.apply_quiet_hours(
                    self._build_candidate(intent, content, recipient_id)
                )
                if candidate.scheduled_for is not None:
                    stored = await self._persist(store, candidate)
                    created.append(stored.id)
                    continue
                if await self._merge(store, candidate):
                    continue
                stored = await self._persist(store, candidate)
                created.append(stored.id)
                await self._delivery.deliver(stored, store, directory)

        logger.info(
            "Created %s notification(s) of %s for hotel %s",
            len(created),
            intent.kind_name,
            intent.hotel_id,
        )
        return created

    async def schedule(self, intent: EventIntent, when: datetime) -> list[int]:
        """Persist the notifications of ``intent`` for release at ``when``.

        Quiet hours, coalescing and delivery are skipped; the scheduler
        releases the records once they are due.
        """

        content = self._renderer.render(intent.kind, intent.payload)
        release = max(as_utc(when), self._clock.now())
        async with self._session_factory() as session:
            store = NotificationRepository(session)
            recipients = await RecipientResolver(UserDirectory(session)).resolve(
                intent.kind, intent.payload, intent.recipients, intent.hotel_id
            )
            created: list[int] = []
            for recipient_id in recipients:
                candidate = self._build_candidate(intent, content, recipient_id)
                candidate.scheduled_for = release
                candidate.metadata["scheduled"] = True
                stored = await self._persist(store, candidate)
                created.append(stored.id)

        logger.info(
            "Scheduled %s notification(s) of %s for %s",
            len(created),
            intent.kind_name,
            release.isoformat(),
        )
        return created

    async def dispatch_many(self, intents: Iterable[EventIntent]) -> list[int]:
        created: list[int] = []
        for intent in intents:
            created.extend(await self.dispatch(intent))
        return created

    def _build_candidate(
        self, intent: EventIntent, content: RenderedContent, recipient_id: int
    ) -> NotificationRecord:
        now = self._clock.now()
        metadata = {
            **intent.payload.as_dict(),
            "icon": content.icon,
            "timestamp": now.isoformat(),
        }
        return NotificationRecord(
            id=None,
            recipient_id=recipient_id,
            hotel_id=intent.hotel_id,
            kind=intent.kind_name,
            title=content.title,
            message=content.message,
            priority=intent.priority,
            channels=tuple(intent.channels),
            created_at=now,
            metadata=metadata,
        )

    async def _merge(
        self, store: NotificationRepository, candidate: NotificationRecord
    ) -> bool:
        for _ in range(COALESCE_ATTEMPTS):
            decision = await self._suppression.coalesce(candidate, store)
            if isinstance(decision, Create):
                return False
            merged = await store.append_to_message(
                decision.record_id,
                decision.suffix,
                hotel_id=candidate.hotel_id,
                expected_count=decision.expected_count,
            )
            if merged:
                logger.debug(
                    "Coalesced %s for user %s into notification %s",
                    candidate.kind,
                    candidate.recipient_id,
                    decision.record_id,
                )
                return True
        return False

    async def _persist(
        self, store: NotificationRepository, candidate: NotificationRecord
    ) -> NotificationRecord:
        try:
            return await store.create(candidate)
        except SQLAlchemyError as exc:
            logger.error(
                "Failed to persist %s notification for user %s in hotel %s: %s",
                candidate.kind,
                candidate.recipient_id,
                candidate.hotel_id,
                exc,
            )
            raise DispatchError(
                candidate.kind, candidate.hotel_id, "Notification could not be persisted"
            ) from exc


__all__ = ["COALESCE_ATTEMPTS", "NotificationDispatcher"]
