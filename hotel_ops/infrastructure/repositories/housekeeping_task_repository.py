"""Persistence layer for housekeeping tasks."""

from __future__ import annotations

from typing import Any

from hotel_ops.domain.entities import (
    ENTITY_HOUSEKEEPING_TASK,
    HousekeepingTask,
    InventoryLine,
)
from hotel_ops.infrastructure.models import HousekeepingTaskModel
from hotel_ops.utils import as_utc

from .task_repository import TaskRepository


def _inventory_to_json(lines: list[InventoryLine] | None) -> list[dict[str, Any]]:
    result = []
    for line in lines or []:
        if isinstance(line, dict):
            line = InventoryLine(**line)
        result.append(
            {
                "item_name": line.item_name,
                "quantity": line.quantity,
                "unit_cost": line.unit_cost,
            }
        )
    return result


class HousekeepingTaskRepository(TaskRepository[HousekeepingTask, HousekeepingTaskModel]):
    model_class = HousekeepingTaskModel
    entity_type = ENTITY_HOUSEKEEPING_TASK
    watched_fields = (
        "assigned_to",
        "status",
        "quality_score",
        "inventory_consumed",
        "task_type",
    )
    updatable_fields = frozenset(
        {
            "title",
            "task_type",
            "priority",
            "status",
            "assigned_to",
            "quality_score",
            "inventory_consumed",
        }
    )

    def _to_column(self, name: str, value: Any) -> Any:
        if name == "inventory_consumed":
            return _inventory_to_json(value)
        return value

    def _apply_entity_to_model(
        self, model: HousekeepingTaskModel, entity: HousekeepingTask
    ) -> None:
        model.hotel_id = entity.hotel_id
        model.room_number = entity.room_number
        model.title = entity.title
        model.task_type = entity.task_type
        model.priority = entity.priority
        model.status = entity.status
        model.assigned_to = entity.assigned_to
        model.created_by = entity.created_by
        model.quality_score = entity.quality_score
        model.inventory_consumed = _inventory_to_json(entity.inventory_consumed)

    def _to_entity(self, model: HousekeepingTaskModel) -> HousekeepingTask:
        return HousekeepingTask(
            id=model.id,
            hotel_id=model.hotel_id,
            room_number=model.room_number,
            title=model.title,
            task_type=model.task_type,
            priority=model.priority,
            status=model.status,
            assigned_to=model.assigned_to,
            created_by=model.created_by,
            quality_score=model.quality_score,
            inventory_consumed=[
                InventoryLine(**line) for line in (model.inventory_consumed or [])
            ],
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            completed_at=as_utc(model.completed_at),
        )


__all__ = ["HousekeepingTaskRepository"]
