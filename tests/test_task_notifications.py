"""Tests for notifications raised by operational task writes."""

from __future__ import annotations

import pytest

from hotel_ops.application.use_cases import (
    create_guest_service,
    create_housekeeping_task,
    create_maintenance_task,
    update_guest_service,
    update_housekeeping_task,
    update_maintenance_task,
)
from hotel_ops.domain.entities import (
    GuestService,
    HousekeepingTask,
    InventoryLine,
    MaintenanceTask,
)
from hotel_ops.infrastructure.notifications import TOPIC_URGENT

pytestmark = pytest.mark.anyio


def _by_kind(records) -> dict[str, list]:
    grouped: dict[str, list] = {}
    for record in records:
        grouped.setdefault(record.kind, []).append(record)
    return grouped


async def test_housekeeping_creation_and_assignment(
    service, session_factory, clock, add_user, all_notifications
) -> None:
    staff = await add_user("staff")
    housekeeper = await add_user("housekeeping")
    await add_user("admin")

    async with session_factory() as session:
        task = await create_housekeeping_task(
            session,
            service.forwarder,
            clock=clock,
            task=HousekeepingTask(
                id=None,
                hotel_id=1,
                room_number="204",
                title="Checkout clean",
                task_type="cleaning",
                priority="medium",
            ),
        )
        clock.advance(minutes=1)
        await update_housekeeping_task(
            session,
            service.forwarder,
            clock=clock,
            task_id=task.id,
            hotel_id=1,
            assigned_to=housekeeper,
        )

    records = await all_notifications()
    grouped = _by_kind(records)
    assert set(grouped) == {"room_needs_cleaning", "housekeeping_assigned"}
    assert sorted(r.recipient_id for r in grouped["room_needs_cleaning"]) == sorted(
        [staff, housekeeper]
    )
    assert [r.recipient_id for r in grouped["housekeeping_assigned"]] == [housekeeper]
    for record in records:
        assert record.priority == "medium"
        assert record.scheduled_for is None
        assert record.status == "sent"
        assert record.channel_results["in_app"]["status"] == "delivered"


async def test_emergency_maintenance_alerts_the_hotel_admin_channel(
    service, session_factory, clock, add_user, connections, make_connection, all_notifications
) -> None:
    admin = await add_user("admin")
    manager = await add_user("manager")
    technician = await add_user("maintenance")
    await add_user("staff")
    admin_socket = make_connection()
    connections.register(admin, admin_socket, hotel_id=1)

    async with session_factory() as session:
        await create_maintenance_task(
            session,
            service.forwarder,
            clock=clock,
            task=MaintenanceTask(
                id=None,
                hotel_id=1,
                room_number="101",
                title="Burst pipe",
                issue_type="plumbing",
                priority="emergency",
            ),
        )

    records = await all_notifications()
    assert {record.kind for record in records} == {"maintenance_urgent"}
    assert sorted(record.recipient_id for record in records) == sorted(
        [admin, manager, technician]
    )
    assert all(record.priority == "urgent" for record in records)
    assert TOPIC_URGENT in admin_socket.topics()
    urgent = [m for m in admin_socket.messages if m["type"] == TOPIC_URGENT]
    assert urgent[0]["data"]["kind"] == "maintenance_urgent"


async def test_assignee_from_another_hotel_is_never_notified(
    service, session_factory, clock, add_user, all_notifications
) -> None:
    await add_user("admin")
    outsider = await add_user("maintenance", hotel_id=2)

    async with session_factory() as session:
        task = await create_maintenance_task(
            session,
            service.forwarder,
            clock=clock,
            task=MaintenanceTask(
                id=None, hotel_id=1, room_number="12", title="Lamp", issue_type="electrical"
            ),
        )
        await update_maintenance_task(
            session,
            service.forwarder,
            clock=clock,
            task_id=task.id,
            hotel_id=1,
            assigned_to=outsider,
        )

    records = await all_notifications()
    assert outsider not in {record.recipient_id for record in records}
    assert {record.kind for record in records} == {"maintenance_request_created"}


async def test_maintenance_progress_and_high_cost(
    service, session_factory, clock, add_user, all_notifications
) -> None:
    admin = await add_user("admin")
    requester = await add_user("staff")
    technician = await add_user("maintenance")

    async with session_factory() as session:
        task = await create_maintenance_task(
            session,
            service.forwarder,
            clock=clock,
            task=MaintenanceTask(
                id=None,
                hotel_id=1,
                room_number="12",
                title="Replace AC unit",
                issue_type="hvac",
                created_by=requester,
                assigned_to=technician,
            ),
        )
        await update_maintenance_task(
            session,
            service.forwarder,
            clock=clock,
            task_id=task.id,
            hotel_id=1,
            status="completed",
            actual_cost=900.0,
        )

    grouped = _by_kind(await all_notifications())
    assert [r.recipient_id for r in grouped["maintenance_assigned"]] == [technician]
    assert sorted(r.recipient_id for r in grouped["maintenance_completed"]) == sorted(
        [admin, requester]
    )
    [high_cost] = grouped["maintenance_high_cost"]
    assert high_cost.priority == "high"
    assert high_cost.message == "💰 High-cost maintenance: $900 for Room 12"


async def test_housekeeping_quality_issue_and_high_value_inventory(
    service, session_factory, clock, add_user, all_notifications
) -> None:
    await add_user("admin")
    housekeeper = await add_user("housekeeping")

    async with session_factory() as session:
        task = await create_housekeeping_task(
            session,
            service.forwarder,
            clock=clock,
            task=HousekeepingTask(
                id=None,
                hotel_id=1,
                room_number="305",
                title="Suite clean",
                assigned_to=housekeeper,
            ),
        )
        await update_housekeeping_task(
            session,
            service.forwarder,
            clock=clock,
            task_id=task.id,
            hotel_id=1,
            status="completed",
            quality_score=2,
            inventory_consumed=[
                InventoryLine(item_name="Champagne", quantity=1, unit_cost=45.0),
                InventoryLine(item_name="Chocolates", quantity=2, unit_cost=7.5),
            ],
        )

    grouped = _by_kind(await all_notifications())
    assert {"cleaning_completed", "cleaning_quality_issue", "inventory_high_value_used"} <= set(
        grouped
    )
    assert all(r.priority == "high" for r in grouped["cleaning_quality_issue"])
    assert housekeeper in {r.recipient_id for r in grouped["cleaning_quality_issue"]}
    inventory = grouped["inventory_high_value_used"][0]
    assert inventory.metadata["value"] == 60.0
    assert inventory.metadata["item_name"] == "Champagne, Chocolates"


async def test_update_without_watched_changes_is_silent(
    service, session_factory, clock, add_user, all_notifications
) -> None:
    await add_user("housekeeping")

    async with session_factory() as session:
        task = await create_housekeeping_task(
            session,
            service.forwarder,
            clock=clock,
            task=HousekeepingTask(id=None, hotel_id=1, room_number="1", title="Clean"),
        )
        before = len(await all_notifications())
        await update_housekeeping_task(
            session,
            service.forwarder,
            clock=clock,
            task_id=task.id,
            hotel_id=1,
            title="Clean again",
        )

    assert len(await all_notifications()) == before


async def test_vip_guest_request_lifecycle(
    service, session_factory, clock, add_user, all_notifications
) -> None:
    admin = await add_user("admin")
    concierge = await add_user("staff")
    guest = await add_user("guest", loyalty_tier="platinum")

    async with session_factory() as session:
        request = await create_guest_service(
            session,
            service.forwarder,
            clock=clock,
            request=GuestService(
                id=None,
                hotel_id=1,
                guest_id=guest,
                room_number="12",
                service_type="room_service",
            ),
        )
        await update_guest_service(
            session,
            service.forwarder,
            clock=clock,
            request_id=request.id,
            hotel_id=1,
            assigned_to=concierge,
        )
        await update_guest_service(
            session,
            service.forwarder,
            clock=clock,
            request_id=request.id,
            hotel_id=1,
            status="completed",
        )

    grouped = _by_kind(await all_notifications())
    [vip] = grouped["guest_service_vip"]
    assert vip.recipient_id == admin
    assert vip.priority == "high"
    [assigned] = grouped["guest_service_assigned"]
    assert (assigned.recipient_id, assigned.priority) == (concierge, "high")
    assert sorted(r.recipient_id for r in grouped["guest_service_completed"]) == sorted(
        [guest, admin]
    )


async def test_urgent_guest_request_wins_over_vip(
    service, session_factory, clock, add_user, all_notifications
) -> None:
    await add_user("manager")
    guest = await add_user("guest", loyalty_tier="diamond")

    async with session_factory() as session:
        await create_guest_service(
            session,
            service.forwarder,
            clock=clock,
            request=GuestService(
                id=None,
                hotel_id=1,
                guest_id=guest,
                room_number="8",
                service_type="medical",
                priority="urgent",
            ),
        )

    records = await all_notifications()
    assert [(r.kind, r.priority) for r in records] == [("guest_service_urgent", "urgent")]
