"""Shared write path for operational task repositories.

Writes commit first and only then report a :class:`DomainEvent` carrying the
watched fields that changed. Callers forward those events to the
notification pipeline.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ops.domain.entities import (
    OPEN_TASK_STATUSES,
    TASK_STATUS_COMPLETED,
    DomainEvent,
    WriteResult,
    diff_fields,
)
from hotel_ops.infrastructure.database import Base
from hotel_ops.utils import to_storage

EntityT = TypeVar("EntityT")
ModelT = TypeVar("ModelT", bound=Base)


class TaskRepository(Generic[EntityT, ModelT]):
    """CRUD for one task table, reporting committed writes as domain events."""

    model_class: ClassVar[type[Base]]
    entity_type: ClassVar[str]
    watched_fields: ClassVar[tuple[str, ...]] = ()
    updatable_fields: ClassVar[frozenset[str]] = frozenset()
    datetime_fields: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, task_id: int, *, hotel_id: int) -> EntityT | None:
        model = await self._get_model(task_id, hotel_id=hotel_id)
        return self._to_entity(model) if model else None

    async def create(self, entity: EntityT, *, now: datetime) -> WriteResult[EntityT]:
        model = self.model_class()
        self._apply_entity_to_model(model, entity)
        model.created_at = to_storage(now)
        model.updated_at = to_storage(now)
        if model.status == TASK_STATUS_COMPLETED:
            model.completed_at = to_storage(now)
        self.session.add(model)
        await self.session.commit()
        await self.session.refresh(model)

        stored = self._to_entity(model)
        event = DomainEvent(entity_type=self.entity_type, entity=stored, created=True)
        return WriteResult(entity=stored, events=(event,))

    async def update(
        self, task_id: int, *, hotel_id: int, now: datetime, **changes: Any
    ) -> WriteResult[EntityT]:
        """Apply ``changes`` and report the watched fields that actually moved."""

        unknown = set(changes) - self.updatable_fields
        if unknown:
            msg = f"Unsupported fields for {self.entity_type}: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        model = await self._get_model(task_id, hotel_id=hotel_id)
        if model is None:
            msg = f"{self.entity_type} with id {task_id} not found"
            raise ValueError(msg)

        before = self._to_entity(model)
        for name, value in changes.items():
            if name in self.datetime_fields:
                value = to_storage(value)
            setattr(model, name, self._to_column(name, value))
        model.updated_at = to_storage(now)
        if (
            changes.get("status") == TASK_STATUS_COMPLETED
            and before.status != TASK_STATUS_COMPLETED
        ):
            model.completed_at = to_storage(now)
        await self.session.commit()
        await self.session.refresh(model)

        after = self._to_entity(model)
        delta = diff_fields(before, after, self.watched_fields)
        if not delta:
            return WriteResult(entity=after)
        event = DomainEvent(
            entity_type=self.entity_type, entity=after, created=False, changes=delta
        )
        return WriteResult(entity=after, events=(event,))

    async def count_open(self, hotel_id: int) -> int:
        result = await self.session.execute(
            select(func.count(self.model_class.id)).where(
                self.model_class.hotel_id == hotel_id,
                self.model_class.status.in_(OPEN_TASK_STATUSES),
            )
        )
        return result.scalar_one()

    async def count_completed_since(self, hotel_id: int, since: datetime) -> int:
        result = await self.session.execute(
            select(func.count(self.model_class.id)).where(
                self.model_class.hotel_id == hotel_id,
                self.model_class.status == TASK_STATUS_COMPLETED,
                self.model_class.completed_at >= to_storage(since),
            )
        )
        return result.scalar_one()

    async def _get_model(self, task_id: int, *, hotel_id: int) -> ModelT | None:
        result = await self.session.execute(
            select(self.model_class).where(
                self.model_class.id == task_id,
                self.model_class.hotel_id == hotel_id,
            )
        )
        return result.scalar_one_or_none()

    def _to_column(self, name: str, value: Any) -> Any:
        """Convert an entity attribute value to its column representation."""

        return value

    def _apply_entity_to_model(self, model: ModelT, entity: EntityT) -> None:
        raise NotImplementedError

    def _to_entity(self, model: ModelT) -> EntityT:
        raise NotImplementedError


__all__ = ["TaskRepository"]
