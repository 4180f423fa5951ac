"""Persistence layer for maintenance tasks."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, select, update

from hotel_ops.domain.entities import (
    ENTITY_MAINTENANCE_TASK,
    OPEN_TASK_STATUSES,
    MaintenanceTask,
)
from hotel_ops.infrastructure.models import MaintenanceTaskModel
from hotel_ops.utils import as_utc, to_storage

from .task_repository import TaskRepository


class MaintenanceTaskRepository(TaskRepository[MaintenanceTask, MaintenanceTaskModel]):
    model_class = MaintenanceTaskModel
    entity_type = ENTITY_MAINTENANCE_TASK
    watched_fields = ("assigned_to", "status", "priority", "actual_cost")
    updatable_fields = frozenset(
        {
            "title",
            "description",
            "issue_type",
            "priority",
            "status",
            "assigned_to",
            "estimated_cost",
            "actual_cost",
            "due_date",
        }
    )
    datetime_fields = frozenset({"due_date"})

    async def list_overdue(self, now: datetime) -> Sequence[MaintenanceTask]:
        """Return open tasks past their due date that were never reported overdue."""

        result = await self.session.execute(
            select(MaintenanceTaskModel)
            .where(
                MaintenanceTaskModel.due_date.is_not(None),
                MaintenanceTaskModel.due_date < to_storage(now),
                MaintenanceTaskModel.status.in_(OPEN_TASK_STATUSES),
                MaintenanceTaskModel.overdue_notified_at.is_(None),
            )
            .order_by(MaintenanceTaskModel.hotel_id, MaintenanceTaskModel.due_date)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    async def count_overdue(self, hotel_id: int, now: datetime) -> int:
        result = await self.session.execute(
            select(func.count(MaintenanceTaskModel.id)).where(
                MaintenanceTaskModel.hotel_id == hotel_id,
                MaintenanceTaskModel.due_date.is_not(None),
                MaintenanceTaskModel.due_date < to_storage(now),
                MaintenanceTaskModel.status.in_(OPEN_TASK_STATUSES),
            )
        )
        return result.scalar_one()

    async def mark_overdue_notified(
        self, task_id: int, *, hotel_id: int, at: datetime
    ) -> bool:
        """Claim the overdue report for a task; ``False`` when already claimed."""

        result = await self.session.execute(
            update(MaintenanceTaskModel)
            .where(
                MaintenanceTaskModel.id == task_id,
                MaintenanceTaskModel.hotel_id == hotel_id,
                MaintenanceTaskModel.overdue_notified_at.is_(None),
            )
            .values(overdue_notified_at=to_storage(at))
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount == 1

    def _apply_entity_to_model(
        self, model: MaintenanceTaskModel, entity: MaintenanceTask
    ) -> None:
        model.hotel_id = entity.hotel_id
        model.room_number = entity.room_number
        model.title = entity.title
        model.issue_type = entity.issue_type
        model.description = entity.description
        model.priority = entity.priority
        model.status = entity.status
        model.assigned_to = entity.assigned_to
        model.created_by = entity.created_by
        model.estimated_cost = entity.estimated_cost
        model.actual_cost = entity.actual_cost
        model.due_date = to_storage(entity.due_date)

    def _to_entity(self, model: MaintenanceTaskModel) -> MaintenanceTask:
        return MaintenanceTask(
            id=model.id,
            hotel_id=model.hotel_id,
            room_number=model.room_number,
            title=model.title,
            issue_type=model.issue_type,
            description=model.description,
            priority=model.priority,
            status=model.status,
            assigned_to=model.assigned_to,
            created_by=model.created_by,
            estimated_cost=model.estimated_cost,
            actual_cost=model.actual_cost,
            due_date=as_utc(model.due_date),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            completed_at=as_utc(model.completed_at),
            overdue_notified_at=as_utc(model.overdue_notified_at),
        )


__all__ = ["MaintenanceTaskRepository"]
