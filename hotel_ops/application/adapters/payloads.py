"""Project task entities onto the payload shapes of their notifications."""

from __future__ import annotations

from hotel_ops.domain.entities import (
    GuestService,
    GuestServicePayload,
    HousekeepingPayload,
    HousekeepingTask,
    MaintenancePayload,
    MaintenanceTask,
)


def housekeeping_payload(
    task: HousekeepingTask, *, assigned_to: int | None = None
) -> HousekeepingPayload:
    return HousekeepingPayload(
        task_id=task.id,
        room_number=task.room_number,
        title=task.title,
        task_type=task.task_type,
        priority=task.priority,
        assigned_to=assigned_to,
        created_by=task.created_by,
        quality_score=task.quality_score,
    )


def maintenance_payload(
    task: MaintenanceTask,
    *,
    assigned_to: int | None = None,
    overdue_hours: int | None = None,
) -> MaintenancePayload:
    return MaintenancePayload(
        task_id=task.id,
        room_number=task.room_number,
        issue_type=task.issue_type,
        title=task.title,
        description=task.description or task.title,
        priority=task.priority,
        assigned_to=assigned_to,
        created_by=task.created_by,
        cost=task.actual_cost,
        overdue_hours=overdue_hours,
        due_date=task.due_date,
    )


def guest_service_payload(
    request: GuestService,
    *,
    assigned_to: int | None = None,
    is_vip: bool | None = None,
    overdue_minutes: int | None = None,
) -> GuestServicePayload:
    return GuestServicePayload(
        request_id=request.id,
        room_number=request.room_number,
        service_type=request.service_type,
        service_variation=request.service_variation,
        description=request.description or request.title,
        priority=request.priority,
        guest_id=request.guest_id,
        assigned_to=assigned_to,
        is_vip=is_vip,
        actual_cost=request.actual_cost,
        overdue_minutes=overdue_minutes,
    )


__all__ = ["guest_service_payload", "housekeeping_payload", "maintenance_payload"]
