"""Notifications raised by guest service request writes."""

from __future__ import annotations

from hotel_ops.domain.entities import (
    ENTITY_GUEST_SERVICE,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    TASK_STATUS_COMPLETED,
    TASK_STATUS_IN_PROGRESS,
    DomainEvent,
    EventIntent,
    EventKind,
    GuestService,
    explicit,
)

from .base import AdapterDirectory, EventAdapter
from .payloads import guest_service_payload


class GuestServiceAdapter(EventAdapter):
    """Urgency wins over VIP status when classifying a new request."""

    entity_type = ENTITY_GUEST_SERVICE

    async def intents_for(
        self, event: DomainEvent[GuestService], directory: AdapterDirectory
    ) -> list[EventIntent]:
        request = event.entity
        hotel_id = request.hotel_id
        guest = await self.hotel_member(directory, request.guest_id, hotel_id)
        is_vip = guest is not None and await directory.is_vip(guest)
        assignee = await self.hotel_member(directory, request.assigned_to, hotel_id)
        payload = guest_service_payload(request, assigned_to=assignee, is_vip=is_vip)
        intents: list[EventIntent] = []

        if event.created:
            if request.is_urgent():
                kind, priority = EventKind.GUEST_SERVICE_URGENT, PRIORITY_URGENT
            elif is_vip:
                kind, priority = EventKind.GUEST_SERVICE_VIP, PRIORITY_HIGH
            else:
                kind, priority = EventKind.GUEST_SERVICE_CREATED, PRIORITY_MEDIUM
            intents.append(EventIntent(kind, hotel_id, payload, priority=priority))

        if assignee is not None and (event.created or event.changed("assigned_to")):
            intents.append(
                EventIntent(
                    EventKind.GUEST_SERVICE_ASSIGNED,
                    hotel_id,
                    payload,
                    recipients=explicit(assignee),
                    priority=PRIORITY_HIGH if is_vip else PRIORITY_MEDIUM,
                )
            )

        # Progress updates reach the guest as well as hotel management.
        if self.status_became(event, TASK_STATUS_IN_PROGRESS):
            intents.append(
                EventIntent(
                    EventKind.GUEST_SERVICE_STARTED,
                    hotel_id,
                    payload,
                    recipients=explicit(guest, include_auto=True),
                    priority=PRIORITY_LOW,
                )
            )
        if self.status_became(event, TASK_STATUS_COMPLETED):
            intents.append(
                EventIntent(
                    EventKind.GUEST_SERVICE_COMPLETED,
                    hotel_id,
                    payload,
                    recipients=explicit(guest, include_auto=True),
                    priority=PRIORITY_MEDIUM,
                )
            )
        return intents


__all__ = ["GuestServiceAdapter"]
