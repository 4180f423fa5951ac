"""Persistence layer for guest service requests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import and_, or_, select, update

from hotel_ops.domain.entities import (
    ENTITY_GUEST_SERVICE,
    GUEST_SERVICE_URGENT_PRIORITIES,
    OPEN_TASK_STATUSES,
    TASK_STATUS_ASSIGNED,
    TASK_STATUS_PENDING,
    GuestService,
)
from hotel_ops.infrastructure.models import GuestServiceModel
from hotel_ops.utils import as_utc, to_storage

from .task_repository import TaskRepository


class GuestServiceRepository(TaskRepository[GuestService, GuestServiceModel]):
    model_class = GuestServiceModel
    entity_type = ENTITY_GUEST_SERVICE
    watched_fields = ("assigned_to", "status", "priority")
    updatable_fields = frozenset(
        {
            "title",
            "description",
            "service_type",
            "service_variation",
            "priority",
            "status",
            "assigned_to",
            "actual_cost",
        }
    )

    async def list_overdue(
        self, *, standard_before: datetime, urgent_before: datetime
    ) -> Sequence[GuestService]:
        """Return unreported requests waiting longer than their priority allows.

        Urgent requests are overdue once created before ``urgent_before`` while
        still open. Other requests are overdue once created before
        ``standard_before`` while nobody has started them.
        """

        urgent = sorted(GUEST_SERVICE_URGENT_PRIORITIES)
        result = await self.session.execute(
            select(GuestServiceModel)
            .where(
                GuestServiceModel.overdue_notified_at.is_(None),
                or_(
                    and_(
                        GuestServiceModel.priority.in_(urgent),
                        GuestServiceModel.status.in_(OPEN_TASK_STATUSES),
                        GuestServiceModel.created_at
                        < to_storage(urgent_before),
                    ),
                    and_(
                        GuestServiceModel.priority.not_in(urgent),
                        GuestServiceModel.status.in_(
                            (TASK_STATUS_PENDING, TASK_STATUS_ASSIGNED)
                        ),
                        GuestServiceModel.created_at
                        < to_storage(standard_before),
                    ),
                ),
            )
            .order_by(GuestServiceModel.hotel_id, GuestServiceModel.created_at)
        )
        return [self._to_entity(model) for model in result.scalars().all()]

    async def mark_overdue_notified(
        self, request_id: int, *, hotel_id: int, at: datetime
    ) -> bool:
        result = await self.session.execute(
            update(GuestServiceModel)
            .where(
                GuestServiceModel.id == request_id,
                GuestServiceModel.hotel_id == hotel_id,
                GuestServiceModel.overdue_notified_at.is_(None),
            )
            .values(overdue_notified_at=to_storage(at))
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount == 1

    def _apply_entity_to_model(self, model: GuestServiceModel, entity: GuestService) -> None:
        model.hotel_id = entity.hotel_id
        model.guest_id = entity.guest_id
        model.room_number = entity.room_number
        model.service_type = entity.service_type
        model.service_variation = entity.service_variation
        model.title = entity.title
        model.description = entity.description
        model.priority = entity.priority
        model.status = entity.status
        model.assigned_to = entity.assigned_to
        model.actual_cost = entity.actual_cost

    def _to_entity(self, model: GuestServiceModel) -> GuestService:
        return GuestService(
            id=model.id,
            hotel_id=model.hotel_id,
            guest_id=model.guest_id,
            room_number=model.room_number,
            service_type=model.service_type,
            service_variation=model.service_variation,
            title=model.title,
            description=model.description,
            priority=model.priority,
            status=model.status,
            assigned_to=model.assigned_to,
            actual_cost=model.actual_cost,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            completed_at=as_utc(model.completed_at),
            overdue_notified_at=as_utc(model.overdue_notified_at),
        )


__all__ = ["GuestServiceRepository"]
