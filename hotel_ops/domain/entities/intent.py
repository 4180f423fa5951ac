"""Event intents handed to the notification dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

from .event_kind import EventKind, kind_value
from .notification import DEFAULT_CHANNELS, PRIORITY_MEDIUM, normalize_priority
from .payloads import Payload, build_payload


@dataclass(frozen=True)
class AutoRecipients:
    """Resolve recipients from the event kind and its payload."""


@dataclass(frozen=True)
class ExplicitRecipients:
    """Deliver to the listed users, optionally joined with automatic resolution."""

    user_ids: tuple[int, ...]
    include_auto: bool = False


Recipients = Union[AutoRecipients, ExplicitRecipients]

AUTO = AutoRecipients()


def explicit(*user_ids: int | None, include_auto: bool = False) -> ExplicitRecipients:
    """Build explicit recipients, dropping empty identifiers."""

    return ExplicitRecipients(
        user_ids=tuple(user_id for user_id in user_ids if user_id),
        include_auto=include_auto,
    )


def recipients_from(value: Any) -> Recipients:
    """Interpret a loose recipient specification.

    ``"auto"`` (or ``None``) means automatic resolution, a list of ids is
    explicit, and a list that also contains ``"auto"`` is the union of both.
    """

    if isinstance(value, (AutoRecipients, ExplicitRecipients)):
        return value
    if value is None or value == "auto":
        return AUTO
    if isinstance(value, (int, str)):
        value = [value]
    include_auto = False
    user_ids: list[int] = []
    for item in value:
        if item == "auto":
            include_auto = True
        elif item is not None and item != "":
            user_ids.append(int(item))
    return ExplicitRecipients(user_ids=tuple(user_ids), include_auto=include_auto)


@dataclass(frozen=True)
class EventIntent:
    """Something happened in a hotel; recipients and content are not decided yet."""

    kind: EventKind | str
    hotel_id: int
    payload: Payload
    recipients: Recipients = AUTO
    priority: str = PRIORITY_MEDIUM
    channels: tuple[str, ...] = DEFAULT_CHANNELS

    @property
    def kind_name(self) -> str:
        return kind_value(self.kind)

    @classmethod
    def build(
        cls,
        kind: EventKind | str,
        hotel_id: int,
        data: Mapping[str, Any] | Payload | None = None,
        *,
        recipients: Any = AUTO,
        priority: str | None = PRIORITY_MEDIUM,
        channels: Iterable[str] | None = None,
    ) -> "EventIntent":
        """Create an intent from loose values, coercing each to its typed form."""

        coerced = EventKind.coerce(kind)
        payload = data if isinstance(data, Payload) else build_payload(coerced, data)
        return cls(
            kind=coerced,
            hotel_id=hotel_id,
            payload=payload,
            recipients=recipients_from(recipients),
            priority=normalize_priority(priority),
            channels=tuple(channels) if channels else DEFAULT_CHANNELS,
        )


__all__ = [
    "AUTO",
    "AutoRecipients",
    "EventIntent",
    "ExplicitRecipients",
    "Recipients",
    "explicit",
    "recipients_from",
]
