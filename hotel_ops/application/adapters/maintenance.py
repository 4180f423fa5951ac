"""Notifications raised by maintenance task writes."""

from __future__ import annotations

from hotel_ops.domain.entities import (
    ENTITY_MAINTENANCE_TASK,
    MAINTENANCE_PRIORITY_EMERGENCY,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    TASK_STATUS_COMPLETED,
    TASK_STATUS_IN_PROGRESS,
    DomainEvent,
    EventIntent,
    EventKind,
    MaintenanceTask,
    explicit,
)

from .base import AdapterDirectory, EventAdapter
from .payloads import maintenance_payload


class MaintenanceAdapter(EventAdapter):
    entity_type = ENTITY_MAINTENANCE_TASK

    async def intents_for(
        self, event: DomainEvent[MaintenanceTask], directory: AdapterDirectory
    ) -> list[EventIntent]:
        task = event.entity
        hotel_id = task.hotel_id
        emergency = task.is_emergency()
        assignee = await self.hotel_member(directory, task.assigned_to, hotel_id)
        payload = maintenance_payload(task, assigned_to=assignee)
        intents: list[EventIntent] = []

        if event.created:
            kind = (
                EventKind.MAINTENANCE_URGENT if emergency else EventKind.MAINTENANCE_REQUEST_CREATED
            )
            intents.append(
                EventIntent(
                    kind,
                    hotel_id,
                    payload,
                    priority=PRIORITY_URGENT if emergency else PRIORITY_MEDIUM,
                )
            )
        else:
            change = event.change("priority")
            if (
                change is not None
                and (change.after or "").lower() == MAINTENANCE_PRIORITY_EMERGENCY
            ):
                intents.append(
                    EventIntent(
                        EventKind.MAINTENANCE_URGENT, hotel_id, payload, priority=PRIORITY_URGENT
                    )
                )

        if assignee is not None and (event.created or event.changed("assigned_to")):
            intents.append(
                EventIntent(
                    EventKind.MAINTENANCE_ASSIGNED,
                    hotel_id,
                    payload,
                    recipients=explicit(assignee),
                    priority=PRIORITY_URGENT if emergency else PRIORITY_MEDIUM,
                )
            )

        if self.status_became(event, TASK_STATUS_IN_PROGRESS):
            intents.append(
                EventIntent(EventKind.MAINTENANCE_STARTED, hotel_id, payload, priority=PRIORITY_LOW)
            )
        if self.status_became(event, TASK_STATUS_COMPLETED):
            intents.append(
                EventIntent(
                    EventKind.MAINTENANCE_COMPLETED, hotel_id, payload, priority=PRIORITY_MEDIUM
                )
            )

        threshold = self._settings.policy_for(hotel_id).high_cost_maintenance_threshold
        if (
            (event.created or event.changed("actual_cost"))
            and task.actual_cost is not None
            and task.actual_cost >= threshold
        ):
            intents.append(
                EventIntent(
                    EventKind.MAINTENANCE_HIGH_COST, hotel_id, payload, priority=PRIORITY_HIGH
                )
            )
        return intents


__all__ = ["MaintenanceAdapter"]
