"""Use cases writing operational tasks and forwarding their domain events."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ops.application.adapters import DomainEventForwarder
from hotel_ops.domain.entities import (
    GuestService,
    HousekeepingTask,
    MaintenanceTask,
    WriteResult,
)
from hotel_ops.infrastructure.repositories import (
    GuestServiceRepository,
    HousekeepingTaskRepository,
    MaintenanceTaskRepository,
    TaskRepository,
)
from hotel_ops.utils import Clock


async def _create(
    repository: TaskRepository, forwarder: DomainEventForwarder, entity: Any, clock: Clock
) -> WriteResult:
    result = await repository.create(entity, now=clock.now())
    await forwarder.forward(result.events)
    return result


async def _update(
    repository: TaskRepository,
    forwarder: DomainEventForwarder,
    clock: Clock,
    task_id: int,
    hotel_id: int,
    changes: dict[str, Any],
) -> WriteResult:
    result = await repository.update(task_id, hotel_id=hotel_id, now=clock.now(), **changes)
    await forwarder.forward(result.events)
    return result


async def create_housekeeping_task(
    session: AsyncSession,
    forwarder: DomainEventForwarder,
    *,
    clock: Clock,
    task: HousekeepingTask,
) -> HousekeepingTask:
    """Store a housekeeping task, then notify the staff it concerns."""

    result = await _create(HousekeepingTaskRepository(session), forwarder, task, clock)
    return result.entity


async def update_housekeeping_task(
    session: AsyncSession,
    forwarder: DomainEventForwarder,
    *,
    clock: Clock,
    task_id: int,
    hotel_id: int,
    **changes: Any,
) -> HousekeepingTask:
    result = await _update(
        HousekeepingTaskRepository(session), forwarder, clock, task_id, hotel_id, changes
    )
    return result.entity


async def create_maintenance_task(
    session: AsyncSession,
    forwarder: DomainEventForwarder,
    *,
    clock: Clock,
    task: MaintenanceTask,
) -> MaintenanceTask:
    result = await _create(MaintenanceTaskRepository(session), forwarder, task, clock)
    return result.entity


async def update_maintenance_task(
    session: AsyncSession,
    forwarder: DomainEventForwarder,
    *,
    clock: Clock,
    task_id: int,
    hotel_id: int,
    **changes: Any,
) -> MaintenanceTask:
    result = await _update(
        MaintenanceTaskRepository(session), forwarder, clock, task_id, hotel_id, changes
    )
    return result.entity


async def create_guest_service(
    session: AsyncSession,
    forwarder: DomainEventForwarder,
    *,
    clock: Clock,
    request: GuestService,
) -> GuestService:
    result = await _create(GuestServiceRepository(session), forwarder, request, clock)
    return result.entity


async def update_guest_service(
    session: AsyncSession,
    forwarder: DomainEventForwarder,
    *,
    clock: Clock,
    request_id: int,
    hotel_id: int,
    **changes: Any,
) -> GuestService:
    result = await _update(
        GuestServiceRepository(session), forwarder, clock, request_id, hotel_id, changes
    )
    return result.entity


__all__ = [
    "create_guest_service",
    "create_housekeeping_task",
    "create_maintenance_task",
    "update_guest_service",
    "update_housekeeping_task",
    "update_maintenance_task",
]
