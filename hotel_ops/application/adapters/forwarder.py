"""Forward committed domain events to the notification dispatcher."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hotel_ops.config import Settings
from hotel_ops.domain.entities import DomainEvent, EventIntent
from hotel_ops.infrastructure.repositories import UserDirectory

from .base import EventAdapter
from .guest_service import GuestServiceAdapter
from .housekeeping import HousekeepingAdapter
from .maintenance import MaintenanceAdapter

logger = logging.getLogger(__name__)


def default_adapters(settings: Settings) -> list[EventAdapter]:
    return [
        HousekeepingAdapter(settings),
        MaintenanceAdapter(settings),
        GuestServiceAdapter(settings),
    ]


class DomainEventForwarder:
    """Thin facade between repositories and the dispatcher.

    The business write has already been committed when events arrive here, so
    every failure is logged and swallowed.
    """

    def __init__(
        self,
        dispatcher,
        session_factory: async_sessionmaker[AsyncSession],
        adapters: Sequence[EventAdapter],
    ) -> None:
        self._dispatcher = dispatcher
        self._session_factory = session_factory
        self._adapters = {adapter.entity_type: adapter for adapter in adapters}

    async def forward(self, events: Iterable[DomainEvent]) -> list[int]:
        """Dispatch the intents of ``events``; return the created notification ids."""

        created: list[int] = []
        for event in events:
            adapter = self._adapters.get(event.entity_type)
            if adapter is None:
                logger.debug("No notification adapter for %s", event.entity_type)
                continue
            try:
                async with self._session_factory() as session:
                    intents = await adapter.intents_for(event, UserDirectory(session))
            except Exception:
                logger.exception(
                    "Failed to derive notifications for %s in hotel %s",
                    event.entity_type,
                    event.hotel_id,
                )
                continue
            created.extend(await self.emit(intents))
        return created

    async def emit(self, intents: Iterable[EventIntent]) -> list[int]:
        created: list[int] = []
        for intent in intents:
            try:
                created.extend(await self._dispatcher.dispatch(intent))
            except Exception:
                logger.exception(
                    "Failed to dispatch %s for hotel %s", intent.kind_name, intent.hotel_id
                )
        return created


__all__ = ["DomainEventForwarder", "default_adapters"]
