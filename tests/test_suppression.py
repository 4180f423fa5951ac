"""Tests for quiet hours and coalescing decisions."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from hotel_ops.application.notifications import (
    CREATE,
    MergeInto,
    SuppressionEngine,
    in_quiet_hours,
)
from hotel_ops.config import HotelOverride, Settings
from hotel_ops.domain.entities import NotificationRecord
from hotel_ops.utils import FixedClock


def _record(**overrides) -> NotificationRecord:
    values = dict(
        id=None,
        recipient_id=7,
        hotel_id=1,
        kind="cleaning_started",
        title="Cleaning Started",
        message="Room 204 cleaning started",
        priority="low",
    )
    values.update(overrides)
    return NotificationRecord(**values)


@pytest.mark.parametrize(
    ("hour", "expected"),
    [(21, False), (22, True), (23, True), (0, True), (5, True), (6, False), (7, False)],
)
def test_quiet_hours_wrap_midnight(hour: int, expected: bool) -> None:
    assert in_quiet_hours(hour, 22, 6) is expected


def test_quiet_hours_within_a_single_day() -> None:
    assert in_quiet_hours(3, 1, 5) is True
    assert in_quiet_hours(5, 1, 5) is False


def test_low_priority_is_deferred_to_release_hour() -> None:
    clock = FixedClock(datetime(2024, 5, 14, 23, 30, tzinfo=timezone.utc))
    engine = SuppressionEngine(Settings(_env_file=None), clock)

    deferred = engine.apply_quiet_hours(_record())

    assert deferred.scheduled_for == datetime(2024, 5, 15, 7, 0, tzinfo=timezone.utc)


def test_early_morning_release_is_the_same_day() -> None:
    clock = FixedClock(datetime(2024, 5, 15, 2, 0, tzinfo=timezone.utc))
    engine = SuppressionEngine(Settings(_env_file=None), clock)

    deferred = engine.apply_quiet_hours(_record())

    assert deferred.scheduled_for == datetime(2024, 5, 15, 7, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("priority", ["medium", "high", "urgent"])
def test_other_priorities_are_never_deferred(priority: str) -> None:
    clock = FixedClock(datetime(2024, 5, 14, 23, 30, tzinfo=timezone.utc))
    engine = SuppressionEngine(Settings(_env_file=None), clock)

    assert engine.apply_quiet_hours(_record(priority=priority)).scheduled_for is None


def test_low_priority_outside_quiet_hours_is_immediate() -> None:
    clock = FixedClock(datetime(2024, 5, 14, 12, 0, tzinfo=timezone.utc))
    engine = SuppressionEngine(Settings(_env_file=None), clock)

    assert engine.apply_quiet_hours(_record()).scheduled_for is None


def test_quiet_hours_use_the_hotel_timezone() -> None:
    # 07:00 UTC is 03:00 in New York and already morning for the UTC hotel.
    clock = FixedClock(datetime(2024, 5, 15, 7, 0, tzinfo=timezone.utc))
    settings = Settings(_env_file=None, hotel_timezones={2: "America/New_York"})
    engine = SuppressionEngine(settings, clock)

    deferred = engine.apply_quiet_hours(_record(hotel_id=2))
    immediate = engine.apply_quiet_hours(_record(hotel_id=1))

    assert deferred.scheduled_for == datetime(2024, 5, 15, 11, 0, tzinfo=timezone.utc)
    assert immediate.scheduled_for is None


class RecentStore:
    def __init__(self, *records: NotificationRecord) -> None:
        self.records = list(records)
        self.queries: list[dict] = []

    async def query_recent(self, **criteria):
        self.queries.append(criteria)
        return self.records


@pytest.mark.anyio
async def test_coalesce_creates_when_no_live_duplicate() -> None:
    clock = FixedClock(datetime(2024, 5, 14, 10, 0, tzinfo=timezone.utc))
    engine = SuppressionEngine(Settings(_env_file=None), clock)
    store = RecentStore()

    decision = await engine.coalesce(_record(), store)

    assert decision == CREATE
    assert store.queries == [
        {
            "recipient_id": 7,
            "kind": "cleaning_started",
            "hotel_id": 1,
            "since": clock.now() - timedelta(minutes=5),
        }
    ]


@pytest.mark.anyio
async def test_coalesce_merges_into_latest_record() -> None:
    clock = FixedClock(datetime(2024, 5, 14, 10, 0, tzinfo=timezone.utc))
    engine = SuppressionEngine(Settings(_env_file=None), clock)
    latest = replace(_record(), id=11, coalesced_count=1)

    decision = await engine.coalesce(_record(), RecentStore(latest))

    assert decision == MergeInto(record_id=11, suffix=" (+2 more)", expected_count=1)


@pytest.mark.anyio
async def test_coalescing_window_can_be_overridden_per_hotel() -> None:
    clock = FixedClock(datetime(2024, 5, 14, 10, 0, tzinfo=timezone.utc))
    settings = Settings(
        _env_file=None, hotel_overrides={1: HotelOverride(coalescing_window_seconds=60)}
    )
    store = RecentStore()

    await SuppressionEngine(settings, clock).coalesce(_record(), store)

    assert store.queries[0]["since"] == clock.now() - timedelta(seconds=60)
