"""Notifications raised by housekeeping task writes."""

from __future__ import annotations

from hotel_ops.domain.entities import (
    ENTITY_HOUSEKEEPING_TASK,
    HOUSEKEEPING_TYPE_DEEP_CLEAN,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    QUALITY_ISSUE_THRESHOLD,
    TASK_STATUS_COMPLETED,
    TASK_STATUS_IN_PROGRESS,
    DomainEvent,
    EventIntent,
    EventKind,
    HousekeepingTask,
    InventoryPayload,
    explicit,
    normalize_priority,
)

from .base import AdapterDirectory, EventAdapter
from .payloads import housekeeping_payload


class HousekeepingAdapter(EventAdapter):
    entity_type = ENTITY_HOUSEKEEPING_TASK

    async def intents_for(
        self, event: DomainEvent[HousekeepingTask], directory: AdapterDirectory
    ) -> list[EventIntent]:
        task = event.entity
        hotel_id = task.hotel_id
        assignee = await self.hotel_member(directory, task.assigned_to, hotel_id)
        payload = housekeeping_payload(task, assigned_to=assignee)
        intents: list[EventIntent] = []

        if event.created:
            kind = (
                EventKind.DEEP_CLEANING_DUE
                if task.task_type == HOUSEKEEPING_TYPE_DEEP_CLEAN
                else EventKind.ROOM_NEEDS_CLEANING
            )
            priority = PRIORITY_URGENT if task.priority == PRIORITY_URGENT else PRIORITY_MEDIUM
            intents.append(EventIntent(kind, hotel_id, payload, priority=priority))

        if assignee is not None and (event.created or event.changed("assigned_to")):
            intents.append(
                EventIntent(
                    EventKind.HOUSEKEEPING_ASSIGNED,
                    hotel_id,
                    payload,
                    recipients=explicit(assignee),
                    priority=normalize_priority(task.priority),
                )
            )

        if self.status_became(event, TASK_STATUS_IN_PROGRESS):
            intents.append(
                EventIntent(EventKind.CLEANING_STARTED, hotel_id, payload, priority=PRIORITY_LOW)
            )
        if self.status_became(event, TASK_STATUS_COMPLETED):
            intents.append(
                EventIntent(
                    EventKind.CLEANING_COMPLETED, hotel_id, payload, priority=PRIORITY_MEDIUM
                )
            )

        if (
            (event.created or event.changed("quality_score"))
            and task.quality_score is not None
            and task.quality_score < QUALITY_ISSUE_THRESHOLD
        ):
            intents.append(
                EventIntent(
                    EventKind.CLEANING_QUALITY_ISSUE, hotel_id, payload, priority=PRIORITY_HIGH
                )
            )

        threshold = self._settings.policy_for(hotel_id).high_value_inventory_threshold
        total = task.inventory_total()
        if (event.created or event.changed("inventory_consumed")) and total > threshold:
            intents.append(
                EventIntent(
                    EventKind.INVENTORY_HIGH_VALUE_USED,
                    hotel_id,
                    InventoryPayload(
                        item_name=", ".join(line.item_name for line in task.inventory_consumed),
                        room_number=task.room_number,
                        value=round(total, 2),
                        task_id=task.id,
                    ),
                    priority=PRIORITY_MEDIUM,
                )
            )
        return intents


__all__ = ["HousekeepingAdapter"]
