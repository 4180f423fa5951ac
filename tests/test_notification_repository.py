"""Tests for the notification store."""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from hotel_ops.domain.entities import (
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_SENT,
    NotificationRecord,
)
from hotel_ops.domain.exceptions import IllegalStatusTransition
from hotel_ops.infrastructure.repositories import NotificationRepository

pytestmark = pytest.mark.anyio


def _record(clock, **overrides) -> NotificationRecord:
    values = dict(
        id=None,
        recipient_id=7,
        hotel_id=1,
        kind="room_needs_cleaning",
        title="Room Needs Cleaning",
        message="Room 204 marked as dirty - cleaning required",
        created_at=clock.now(),
    )
    values.update(overrides)
    return NotificationRecord(**values)


async def test_create_always_stores_a_pending_record(session_factory, clock) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        stored = await store.create(
            _record(clock, status=STATUS_SENT, sent_at=clock.now(), failure_reason="x")
        )

    assert stored.id is not None
    assert stored.status == STATUS_PENDING
    assert stored.sent_at is None
    assert stored.failure_reason is None
    assert stored.created_at == clock.now()


async def test_status_moves_once_out_of_pending(session_factory, clock) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        stored = await store.create(_record(clock))

        assert await store.update_status(
            stored.id, STATUS_SENT, hotel_id=1, sent_at=clock.now()
        )
        assert not await store.update_status(
            stored.id, STATUS_FAILED, hotel_id=1, failure_reason="late"
        )
        current = await store.get(stored.id, hotel_id=1)

    assert current.status == STATUS_SENT
    assert current.sent_at == clock.now()
    assert current.failure_reason is None


async def test_non_terminal_target_status_is_rejected(session_factory, clock) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        stored = await store.create(_record(clock))

        with pytest.raises(IllegalStatusTransition):
            await store.update_status(stored.id, STATUS_PENDING, hotel_id=1)
        with pytest.raises(ValueError):
            await store.update_status(stored.id, STATUS_SENT, hotel_id=1)


async def test_reads_and_writes_are_scoped_to_the_hotel(session_factory, clock) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        stored = await store.create(_record(clock))

        assert await store.get(stored.id, hotel_id=2) is None
        assert not await store.update_status(
            stored.id, STATUS_SENT, hotel_id=2, sent_at=clock.now()
        )
        assert (await store.get(stored.id, hotel_id=1)).status == STATUS_PENDING


async def test_append_replaces_the_running_suffix(session_factory, clock) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        stored = await store.create(_record(clock))

        assert await store.append_to_message(
            stored.id, " (+1 more)", hotel_id=1, expected_count=0
        )
        # A stale reader loses the race.
        assert not await store.append_to_message(
            stored.id, " (+1 more)", hotel_id=1, expected_count=0
        )
        assert await store.append_to_message(
            stored.id, " (+2 more)", hotel_id=1, expected_count=1
        )
        current = await store.get(stored.id, hotel_id=1)

    assert current.message == "Room 204 marked as dirty - cleaning required (+2 more)"
    assert current.coalesced_count == 2


async def test_append_ignores_failed_records(session_factory, clock) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        stored = await store.create(_record(clock))
        await store.update_status(stored.id, STATUS_FAILED, hotel_id=1, failure_reason="x")

        assert not await store.append_to_message(
            stored.id, " (+1 more)", hotel_id=1, expected_count=0
        )


async def test_query_recent_only_returns_live_immediate_duplicates(
    session_factory, clock
) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        old = await store.create(_record(clock, created_at=clock.now() - timedelta(minutes=10)))
        deferred = await store.create(
            _record(clock, scheduled_for=clock.now() + timedelta(hours=1))
        )
        other_kind = await store.create(_record(clock, kind="cleaning_completed"))
        other_user = await store.create(_record(clock, recipient_id=8))
        first = await store.create(_record(clock, created_at=clock.now() - timedelta(minutes=2)))
        latest = await store.create(_record(clock))

        recent = await store.query_recent(
            recipient_id=7,
            kind="room_needs_cleaning",
            hotel_id=1,
            since=clock.now() - timedelta(minutes=5),
        )

    assert [record.id for record in recent] == [latest.id, first.id]
    assert {old.id, deferred.id, other_kind.id, other_user.id}.isdisjoint(
        record.id for record in recent
    )


async def test_query_due_returns_pending_records_in_release_order(
    session_factory, clock
) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        later = await store.create(_record(clock, scheduled_for=clock.now() + timedelta(hours=2)))
        sooner = await store.create(_record(clock, scheduled_for=clock.now() + timedelta(hours=1)))
        await store.create(_record(clock, scheduled_for=clock.now() + timedelta(hours=5)))
        await store.create(_record(clock, hotel_id=2, scheduled_for=clock.now()))

        before = clock.now() + timedelta(hours=3)
        due = await store.query_due(hotel_id=1, before=before)
        hotels = await store.list_hotels_with_due(before)

    assert [record.id for record in due] == [sooner.id, later.id]
    assert hotels == [1, 2]


async def test_channel_outcomes_are_recorded(session_factory, clock) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        stored = await store.create(_record(clock))
        await store.mark_delivered(stored.id, "in_app", hotel_id=1, at=clock.now())
        await store.mark_failed(stored.id, "push", "timed out", hotel_id=1, at=clock.now())
        current = await store.get(stored.id, hotel_id=1)

    assert current.channel_results["in_app"]["status"] == "delivered"
    assert current.channel_results["push"] == {
        "status": "failed",
        "reason": "timed out",
        "at": clock.now().isoformat(),
    }
    assert current.channel_failure("push") == "timed out"
    assert current.channel_failure("in_app") is None


async def test_inbox_lists_released_records_and_marks_them_read(
    session_factory, clock
) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        sent = await store.create(_record(clock))
        await store.update_status(sent.id, STATUS_SENT, hotel_id=1, sent_at=clock.now())
        await store.create(_record(clock, scheduled_for=clock.now() + timedelta(hours=1)))
        someone_else = await store.create(_record(clock, recipient_id=8))

        inbox = await store.list_for_user(7, hotel_id=1)
        updated = await store.mark_as_read(
            [sent.id, someone_else.id], user_id=7, hotel_id=1, at=clock.now()
        )
        unread = await store.list_for_user(7, hotel_id=1, unread_only=True)

    assert [record.id for record in inbox] == [sent.id]
    assert updated == 1
    assert unread == []


async def test_search_filters_hotel_records(session_factory, clock) -> None:
    async with session_factory() as session:
        store = NotificationRepository(session)
        match = await store.create(_record(clock))
        await store.create(_record(clock, kind="cleaning_completed"))
        await store.create(_record(clock, hotel_id=2))
        await store.create(_record(clock, created_at=clock.now() - timedelta(days=2)))

        found = await store.search(
            1,
            created_from=clock.now() - timedelta(hours=1),
            kind="room_needs_cleaning",
            status=STATUS_PENDING,
        )

    assert [record.id for record in found] == [match.id]


async def test_entity_round_trip_keeps_channels_and_metadata(session_factory, clock) -> None:
    record = _record(clock, channels=("in_app", "email"), metadata={"room_number": "204"})
    async with session_factory() as session:
        stored = await NotificationRepository(session).create(record)

    assert replace(stored, id=None, status=record.status) == record
