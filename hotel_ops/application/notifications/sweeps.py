"""Periodic sweeps that raise time-based operational notifications."""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hotel_ops.application.adapters import guest_service_payload, maintenance_payload
from hotel_ops.config import Settings
from hotel_ops.domain.entities import (
    PRIORITY_HIGH,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    EventIntent,
    EventKind,
    OperationsSummaryPayload,
)
from hotel_ops.infrastructure.repositories import (
    GuestServiceRepository,
    HousekeepingTaskRepository,
    MaintenanceTaskRepository,
    UserDirectory,
)
from hotel_ops.utils import Clock, resolve_timezone

logger = logging.getLogger(__name__)


def _start_of_local_day(now: datetime, timezone_name: str) -> datetime:
    local = now.astimezone(resolve_timezone(timezone_name))
    return datetime.combine(local.date(), time(), tzinfo=local.tzinfo)


class OperationsSweeps:
    """Overdue detection and the daily summary.

    Each overdue entity is claimed before it is reported so that it produces
    a single notification even when sweeps overlap.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher,
        *,
        settings: Settings,
        clock: Clock,
    ) -> None:
        self._session_factory = session_factory
        self._dispatcher = dispatcher
        self._settings = settings
        self._clock = clock

    async def sweep_overdue_maintenance(self) -> int:
        now = self._clock.now()
        intents: list[EventIntent] = []
        async with self._session_factory() as session:
            repository = MaintenanceTaskRepository(session)
            for task in await repository.list_overdue(now):
                if not await repository.mark_overdue_notified(
                    task.id, hotel_id=task.hotel_id, at=now
                ):
                    continue
                overdue_hours = int((now - task.due_date).total_seconds() // 3600)
                intents.append(
                    EventIntent(
                        EventKind.MAINTENANCE_OVERDUE,
                        task.hotel_id,
                        maintenance_payload(
                            task, assigned_to=task.assigned_to, overdue_hours=overdue_hours
                        ),
                        priority=PRIORITY_URGENT if task.is_emergency() else PRIORITY_HIGH,
                    )
                )
        return await self._emit(intents)

    async def sweep_overdue_guest_services(self) -> int:
        now = self._clock.now()
        standard_before = now - timedelta(minutes=self._settings.guest_service_overdue_minutes)
        urgent_before = now - timedelta(
            minutes=self._settings.guest_service_urgent_overdue_minutes
        )
        intents: list[EventIntent] = []
        async with self._session_factory() as session:
            repository = GuestServiceRepository(session)
            directory = UserDirectory(session)
            overdue = await repository.list_overdue(
                standard_before=standard_before, urgent_before=urgent_before
            )
            for request in overdue:
                if not await repository.mark_overdue_notified(
                    request.id, hotel_id=request.hotel_id, at=now
                ):
                    continue
                waited = int((now - request.created_at).total_seconds() // 60)
                intents.append(
                    EventIntent(
                        EventKind.GUEST_SERVICE_OVERDUE,
                        request.hotel_id,
                        guest_service_payload(
                            request,
                            assigned_to=request.assigned_to,
                            is_vip=await directory.is_vip(request.guest_id),
                            overdue_minutes=waited,
                        ),
                        priority=PRIORITY_URGENT if request.is_urgent() else PRIORITY_HIGH,
                    )
                )
        return await self._emit(intents)

    async def send_daily_summaries(self, timezone_name: str | None = None) -> int:
        """Report completed, open and overdue work of the current day to each hotel.

        With ``timezone_name`` only the hotels whose local zone it is are reported.
        """

        now = self._clock.now()
        intents: list[EventIntent] = []
        async with self._session_factory() as session:
            repositories = (
                HousekeepingTaskRepository(session),
                MaintenanceTaskRepository(session),
                GuestServiceRepository(session),
            )
            maintenance = repositories[1]
            for hotel_id in await UserDirectory(session).list_hotel_ids():
                zone = self._settings.policy_for(hotel_id).timezone
                if timezone_name is not None and zone != timezone_name:
                    continue
                since = _start_of_local_day(now, zone)
                completed = pending = 0
                for repository in repositories:
                    completed += await repository.count_completed_since(hotel_id, since)
                    pending += await repository.count_open(hotel_id)
                overdue = await maintenance.count_overdue(hotel_id, now)
                intents.append(
                    EventIntent(
                        EventKind.DAILY_OPERATIONS_SUMMARY,
                        hotel_id,
                        OperationsSummaryPayload(
                            completed_tasks=completed,
                            pending_tasks=pending,
                            overdue_items=overdue,
                        ),
                        priority=PRIORITY_MEDIUM,
                    )
                )
        return await self._emit(intents)

    async def _emit(self, intents: list[EventIntent]) -> int:
        created = 0
        for intent in intents:
            try:
                created += len(await self._dispatcher.dispatch(intent))
            except Exception:
                logger.exception(
                    "Failed to dispatch %s for hotel %s", intent.kind_name, intent.hotel_id
                )
        return created


__all__ = ["OperationsSweeps"]
