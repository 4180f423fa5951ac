"""End-to-end tests for dispatching intents into delivered notifications."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import anyio
import pytest
from sqlalchemy.exc import SQLAlchemyError

from hotel_ops.application.notifications import NO_TRANSPORT, build_notification_service
from hotel_ops.domain.entities import (
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_SENT,
    EventIntent,
    EventKind,
    HousekeepingPayload,
    MaintenancePayload,
    OperationsSummaryPayload,
    explicit,
)
from hotel_ops.domain.exceptions import DispatchError
from hotel_ops.infrastructure.models import UserModel
from hotel_ops.infrastructure.notifications import TOPIC_NEW, TOPIC_URGENT, RealtimeFanOut
from hotel_ops.infrastructure.repositories import NotificationRepository

pytestmark = pytest.mark.anyio


async def test_dispatch_creates_one_record_per_recipient(
    service, add_user, all_notifications
) -> None:
    staff = await add_user("staff")
    housekeeper = await add_user("housekeeping")
    await add_user("admin")
    await add_user("staff", hotel_id=2)

    intent = EventIntent(
        EventKind.ROOM_NEEDS_CLEANING, 1, HousekeepingPayload(room_number="204")
    )
    created = await service.dispatcher.dispatch(intent)

    records = await all_notifications()
    assert created == [record.id for record in records]
    assert sorted(record.recipient_id for record in records) == sorted([staff, housekeeper])
    for record in records:
        assert record.status == STATUS_SENT
        assert record.priority == "medium"
        assert record.scheduled_for is None
        assert record.message == "Room 204 marked as dirty - cleaning required"
        assert record.metadata["room_number"] == "204"
        assert record.metadata["icon"] == "🧹"
        assert record.channel_results["in_app"]["status"] == "delivered"


async def test_dispatch_without_recipients_is_a_no_op(service, all_notifications) -> None:
    intent = EventIntent(
        EventKind.ROOM_NEEDS_CLEANING, 1, HousekeepingPayload(room_number="204")
    )

    assert await service.dispatcher.dispatch(intent) == []
    assert await all_notifications() == []


async def test_connected_recipient_receives_the_envelope(
    service, add_user, connections, make_connection
) -> None:
    housekeeper = await add_user("housekeeping")
    socket = make_connection()
    connections.register(housekeeper, socket)

    [record_id] = await service.dispatcher.dispatch(
        EventIntent(
            EventKind.HOUSEKEEPING_ASSIGNED,
            1,
            HousekeepingPayload(room_number="204", title="Turn down"),
            recipients=explicit(housekeeper),
        )
    )

    assert socket.topics() == [TOPIC_NEW]
    envelope = socket.messages[0]["data"]
    assert envelope["id"] == record_id
    assert envelope["kind"] == "housekeeping_assigned"
    assert envelope["message"] == "Housekeeping task assigned: Turn down for Room 204"
    assert envelope["priority"] == "medium"


async def test_escalated_priority_also_reaches_the_hotel_admin_channel(
    service, add_user, connections, make_connection
) -> None:
    admin = await add_user("admin")
    technician = await add_user("maintenance")
    admin_socket = make_connection()
    other_hotel_socket = make_connection()
    connections.register(admin, admin_socket, hotel_id=1)
    connections.register(99, other_hotel_socket, hotel_id=2)

    await service.dispatcher.dispatch(
        EventIntent(
            EventKind.MAINTENANCE_URGENT,
            1,
            MaintenancePayload(room_number="101", issue_type="plumbing"),
            recipients=explicit(technician),
            priority="urgent",
        )
    )

    assert admin_socket.topics() == [TOPIC_URGENT]
    assert admin_socket.messages[0]["data"]["recipient_id"] == technician
    assert other_hotel_socket.messages == []


async def test_duplicates_within_the_window_are_coalesced(
    service, add_user, clock, all_notifications
) -> None:
    housekeeper = await add_user("housekeeping")
    intent = EventIntent(
        EventKind.CLEANING_COMPLETED,
        1,
        HousekeepingPayload(room_number="204"),
        recipients=explicit(housekeeper),
    )

    first = await service.dispatcher.dispatch(intent)
    clock.advance(minutes=1)
    second = await service.dispatcher.dispatch(intent)
    clock.advance(minutes=1)
    third = await service.dispatcher.dispatch(intent)

    records = await all_notifications()
    assert len(first) == 1
    assert second == [] and third == []
    assert len(records) == 1
    assert records[0].message.endswith(" (+2 more)")
    assert records[0].coalesced_count == 2


async def test_duplicates_after_the_window_create_a_new_record(
    service, add_user, clock, all_notifications
) -> None:
    housekeeper = await add_user("housekeeping")
    intent = EventIntent(
        EventKind.CLEANING_COMPLETED,
        1,
        HousekeepingPayload(room_number="204"),
        recipients=explicit(housekeeper),
    )

    await service.dispatcher.dispatch(intent)
    clock.advance(minutes=6)
    await service.dispatcher.dispatch(intent)

    records = await all_notifications()
    assert len(records) == 2
    assert all(record.coalesced_count == 0 for record in records)


async def test_low_priority_during_quiet_hours_is_released_by_the_scheduler(
    service, add_user, clock, connections, all_notifications, make_connection
) -> None:
    housekeeper = await add_user("housekeeping")
    socket = make_connection()
    connections.register(housekeeper, socket)
    clock.set(datetime(2024, 5, 14, 23, 0, tzinfo=timezone.utc))

    await service.dispatcher.dispatch(
        EventIntent(
            EventKind.CLEANING_STARTED,
            1,
            HousekeepingPayload(room_number="204"),
            recipients=explicit(housekeeper),
            priority="low",
        )
    )

    [record] = await all_notifications()
    assert record.status == STATUS_PENDING
    assert record.scheduled_for == datetime(2024, 5, 15, 7, 0, tzinfo=timezone.utc)
    assert socket.messages == []

    clock.set(datetime(2024, 5, 15, 6, 59, tzinfo=timezone.utc))
    assert await service.scheduler.tick() == 0

    clock.set(datetime(2024, 5, 15, 7, 0, tzinfo=timezone.utc))
    assert await service.scheduler.tick() == 1
    assert await service.scheduler.tick() == 0

    [record] = await all_notifications()
    assert record.status == STATUS_SENT
    assert socket.topics() == [TOPIC_NEW]


async def test_urgent_intent_never_merges_into_a_deferred_record(
    service, add_user, clock, all_notifications
) -> None:
    housekeeper = await add_user("housekeeping")
    clock.set(datetime(2024, 5, 14, 23, 0, tzinfo=timezone.utc))
    for priority in ("low", "urgent"):
        await service.dispatcher.dispatch(
            EventIntent(
                EventKind.CLEANING_STARTED,
                1,
                HousekeepingPayload(room_number="204"),
                recipients=explicit(housekeeper),
                priority=priority,
            )
        )

    records = await all_notifications()
    assert [record.status for record in records] == [STATUS_PENDING, STATUS_SENT]


async def test_push_failure_is_recorded_without_failing_the_record(
    service, add_user, connections, all_notifications, make_connection
) -> None:
    housekeeper = await add_user("housekeeping")
    connections.register(housekeeper, make_connection(fail=True))

    created = await service.dispatcher.dispatch(
        EventIntent(
            EventKind.CLEANING_COMPLETED,
            1,
            HousekeepingPayload(room_number="204"),
            recipients=explicit(housekeeper),
        )
    )

    [record] = await all_notifications()
    assert created == [record.id]
    assert record.status == STATUS_SENT
    assert record.channel_results["in_app"]["status"] == "delivered"
    assert record.channel_results["push"]["status"] == "failed"
    assert "connection closed" in record.channel_failure("push")
    assert connections.connection_count(housekeeper) == 0


async def test_channel_without_transport_is_recorded_as_failed(
    service, add_user, all_notifications
) -> None:
    housekeeper = await add_user("housekeeping")

    await service.dispatcher.dispatch(
        EventIntent.build(
            EventKind.CLEANING_COMPLETED,
            1,
            {"roomNumber": "204"},
            recipients=[housekeeper],
            channels=["in_app", "sms"],
        )
    )
    await service.dispatcher.dispatch(
        EventIntent.build(
            EventKind.CLEANING_STARTED,
            1,
            {"roomNumber": "204"},
            recipients=[housekeeper],
            channels=["sms"],
        )
    )

    in_app, sms_only = await all_notifications()
    assert in_app.status == STATUS_SENT
    assert in_app.channel_failure("sms") == NO_TRANSPORT
    assert sms_only.status == STATUS_FAILED
    assert sms_only.failure_reason == NO_TRANSPORT
    assert sms_only.sent_at is None


async def test_schedule_defers_until_the_requested_time(
    service, add_user, clock, all_notifications
) -> None:
    admin = await add_user("admin")

    created = await service.dispatcher.schedule(
        EventIntent(
            EventKind.DAILY_OPERATIONS_SUMMARY,
            1,
            OperationsSummaryPayload(completed_tasks=1, pending_tasks=0, overdue_items=0),
        ),
        clock.now() + timedelta(hours=2),
    )

    [record] = await all_notifications()
    assert created == [record.id]
    assert record.recipient_id == admin
    assert record.status == STATUS_PENDING
    assert record.scheduled_for == clock.now() + timedelta(hours=2)
    assert record.metadata["scheduled"] is True


async def test_dispatch_many_flattens_created_ids(service, add_user) -> None:
    staff = await add_user("staff")
    intents = [
        EventIntent(
            kind,
            1,
            HousekeepingPayload(room_number="204"),
            recipients=explicit(staff),
        )
        for kind in (EventKind.CLEANING_STARTED, EventKind.CLEANING_COMPLETED)
    ]

    created = await service.dispatcher.dispatch_many(intents)

    assert len(created) == 2


async def test_scheduler_suppresses_records_of_deactivated_recipients(
    service, add_user, clock, session_factory, all_notifications
) -> None:
    housekeeper = await add_user("housekeeping")
    await service.dispatcher.schedule(
        EventIntent(
            EventKind.CLEANING_STARTED,
            1,
            HousekeepingPayload(room_number="204"),
            recipients=explicit(housekeeper),
        ),
        clock.now() + timedelta(minutes=30),
    )
    async with session_factory() as session:
        user = await session.get(UserModel, housekeeper)
        user.is_active = False
        await session.commit()

    clock.advance(hours=1)
    assert await service.scheduler.tick() == 0

    [record] = await all_notifications()
    assert record.status == "suppressed"
    assert record.failure_reason is not None


async def test_schedule_accepts_a_naive_release_time(
    service, add_user, all_notifications
) -> None:
    await add_user("admin")

    await service.dispatcher.schedule(
        EventIntent(
            EventKind.DAILY_OPERATIONS_SUMMARY,
            1,
            OperationsSummaryPayload(completed_tasks=0, pending_tasks=0, overdue_items=0),
        ),
        datetime(2024, 5, 15, 9, 0),
    )

    [record] = await all_notifications()
    assert record.scheduled_for == datetime(2024, 5, 15, 9, 0, tzinfo=timezone.utc)


class UnreachableRelay:
    channel = "email"

    def __init__(self) -> None:
        self.attempts: list[int] = []

    async def send(self, record, recipient) -> None:
        self.attempts.append(recipient.id)
        raise ConnectionError("smtp relay unreachable")


async def test_sink_transport_error_is_recorded_for_every_recipient(
    session_factory, settings, clock, connections, add_user, all_notifications
) -> None:
    relay = UnreachableRelay()
    service = build_notification_service(
        session_factory,
        settings=settings,
        clock=clock,
        fan_out=RealtimeFanOut(connections, timeout=1.0),
        sinks={"email": relay},
    )
    first = await add_user("staff")
    second = await add_user("housekeeping")

    created = await service.dispatcher.dispatch(
        EventIntent(
            EventKind.ROOM_NEEDS_CLEANING,
            1,
            HousekeepingPayload(room_number="204"),
            channels=("in_app", "push", "email"),
        )
    )

    records = await all_notifications()
    assert created == [record.id for record in records]
    assert sorted(relay.attempts) == sorted([first, second])
    for record in records:
        assert record.status == STATUS_SENT
        assert record.channel_results["push"]["status"] == "delivered"
        assert record.channel_failure("email") == "smtp relay unreachable"


class SilentConnection:
    async def send_json(self, data) -> None:
        await anyio.sleep_forever()


async def test_push_exceeding_the_timeout_counts_as_a_push_failure(
    session_factory, settings, clock, connections, add_user, all_notifications
) -> None:
    service = build_notification_service(
        session_factory,
        settings=settings,
        clock=clock,
        fan_out=RealtimeFanOut(connections, timeout=0.05),
    )
    housekeeper = await add_user("housekeeping")
    connections.register(housekeeper, SilentConnection())

    await service.dispatcher.dispatch(
        EventIntent(
            EventKind.CLEANING_COMPLETED,
            1,
            HousekeepingPayload(room_number="204"),
            recipients=explicit(housekeeper),
        )
    )

    [record] = await all_notifications()
    assert record.status == STATUS_SENT
    assert record.channel_results["in_app"]["status"] == "delivered"
    assert "timed out" in record.channel_failure("push")


async def test_store_write_failure_surfaces_as_dispatch_error(
    service, add_user, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    housekeeper = await add_user("housekeeping")

    async def failing_create(self, record):
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr(NotificationRepository, "create", failing_create)
    intent = EventIntent(
        EventKind.CLEANING_COMPLETED,
        1,
        HousekeepingPayload(room_number="204"),
        recipients=explicit(housekeeper),
    )

    with pytest.raises(DispatchError) as excinfo:
        await service.dispatcher.dispatch(intent)
    assert excinfo.value.kind == "cleaning_completed"
    assert excinfo.value.hotel_id == 1

    with caplog.at_level("ERROR"):
        assert await service.forwarder.emit([intent]) == []
    assert "Failed to dispatch cleaning_completed for hotel 1" in caplog.text
