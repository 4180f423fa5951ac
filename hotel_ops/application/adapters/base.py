"""Common contract of the domain event adapters."""

from __future__ import annotations

import logging
from typing import Protocol

from hotel_ops.config import Settings
from hotel_ops.domain.entities import Assignment, DomainEvent, EventIntent

logger = logging.getLogger(__name__)


class AdapterDirectory(Protocol):
    async def find_by_assignment(self, user_id: int | None) -> Assignment | None: ...

    async def is_vip(self, user_id: int | None) -> bool: ...


class EventAdapter:
    """Translate a committed entity write into notification intents."""

    entity_type: str

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def intents_for(
        self, event: DomainEvent, directory: AdapterDirectory
    ) -> list[EventIntent]:
        raise NotImplementedError

    @staticmethod
    async def hotel_member(
        directory: AdapterDirectory, user_id: int | None, hotel_id: int
    ) -> int | None:
        """Return ``user_id`` when it names a user of ``hotel_id``."""

        if user_id is None:
            return None
        assignment = await directory.find_by_assignment(user_id)
        if assignment is None:
            logger.warning("Referenced user %s does not exist", user_id)
            return None
        if assignment.hotel_id != hotel_id:
            logger.warning(
                "Referenced user %s belongs to hotel %s, not %s",
                user_id,
                assignment.hotel_id,
                hotel_id,
            )
            return None
        return user_id

    @staticmethod
    def status_became(event: DomainEvent, status: str) -> bool:
        change = event.change("status")
        return change is not None and change.after == status


__all__ = ["AdapterDirectory", "EventAdapter"]
