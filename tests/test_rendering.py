"""Tests for the notification content renderer."""

from __future__ import annotations

from hotel_ops.application.notifications import ContentRenderer
from hotel_ops.application.notifications.rendering import FALLBACK_ICON, TEMPLATES
from hotel_ops.domain.entities import (
    EventKind,
    GenericPayload,
    GuestServicePayload,
    HousekeepingPayload,
    MaintenancePayload,
    build_payload,
)


def test_every_known_kind_has_a_template() -> None:
    missing = [kind for kind in EventKind if kind not in TEMPLATES]
    assert missing == []


def test_room_needs_cleaning_renders_room_number() -> None:
    content = ContentRenderer().render(
        EventKind.ROOM_NEEDS_CLEANING, HousekeepingPayload(room_number="204")
    )

    assert content.title == "Room Needs Cleaning"
    assert content.message == "Room 204 marked as dirty - cleaning required"
    assert content.icon == "🧹"


def test_kind_given_as_string_uses_the_same_template() -> None:
    renderer = ContentRenderer()
    payload = HousekeepingPayload(room_number="204")

    assert renderer.render("room_needs_cleaning", payload) == renderer.render(
        EventKind.ROOM_NEEDS_CLEANING, payload
    )


def test_empty_description_falls_back_to_title() -> None:
    content = ContentRenderer().render(
        EventKind.MAINTENANCE_ASSIGNED,
        MaintenancePayload(room_number="101", title="Leaking tap"),
    )

    assert content.message == "Maintenance task assigned: Leaking tap for Room 101"


def test_guest_service_description_falls_back_to_variation() -> None:
    content = ContentRenderer().render(
        EventKind.GUEST_SERVICE_CREATED,
        GuestServicePayload(
            room_number="12", service_type="towels", service_variation="2 bath towels"
        ),
    )

    assert content.message == "New towels request from Room 12: 2 bath towels"


def test_integral_amounts_drop_the_decimal_part() -> None:
    content = ContentRenderer().render(
        EventKind.MAINTENANCE_HIGH_COST, MaintenancePayload(room_number="7", cost=750.0)
    )

    assert content.message == "💰 High-cost maintenance: $750 for Room 7"


def test_missing_fields_render_empty() -> None:
    content = ContentRenderer().render(EventKind.ROOM_NEEDS_CLEANING, HousekeepingPayload())

    assert content.message == "Room  marked as dirty - cleaning required"


def test_camel_case_payload_keys_are_accepted() -> None:
    payload = build_payload(
        EventKind.DAILY_OPERATIONS_SUMMARY,
        {"completedTasks": 4, "pendingTasks": 2, "overdueItems": 1, "ignored": True},
    )

    content = ContentRenderer().render(EventKind.DAILY_OPERATIONS_SUMMARY, payload)

    assert content.message == "📊 Daily Summary: 4 completed, 2 pending, 1 overdue"


def test_unknown_kind_uses_generic_envelope() -> None:
    payload = build_payload("spa_booking", {"room": "12"})
    assert isinstance(payload, GenericPayload)

    content = ContentRenderer().render("spa_booking", payload)

    assert content.title == "Hotel Notification: spa_booking"
    assert content.message == 'Notification for spa_booking: {"room": "12"}'
    assert content.icon == FALLBACK_ICON
