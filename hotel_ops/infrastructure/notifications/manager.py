"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Protocol, Set

from hotel_ops.domain.exceptions import PushDeliveryError

logger = logging.getLogger(__name__)


class JsonConnection(Protocol):
    """The part of a websocket the manager relies on."""

    async def send_json(self, data: Any) -> None: ...


class NotificationConnectionManager:
    """Manage active websocket connections grouped by user and by hotel.

    Every connection belongs to its user. Connections of hotel admins and
    managers are additionally subscribed to the hotel admin channel.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[int, Set[JsonConnection]] = defaultdict(set)
        self._hotel_connections: DefaultDict[int, Set[JsonConnection]] = defaultdict(set)

    def register(
        self,
        user_id: int,
        connection: JsonConnection,
        *,
        hotel_id: int | None = None,
    ) -> None:
        """Register an accepted ``connection`` for ``user_id``.

        When ``hotel_id`` is given the connection also receives the hotel
        admin channel.
        """

        self._connections[user_id].add(connection)
        if hotel_id is not None:
            self._hotel_connections[hotel_id].add(connection)

    def disconnect(self, user_id: int, connection: JsonConnection) -> None:
        """Remove ``connection`` from every pool it belongs to."""

        connections = self._connections.get(user_id)
        if connections is not None:
            connections.discard(connection)
            if not connections:
                self._connections.pop(user_id, None)
        for hotel_id, subscribers in list(self._hotel_connections.items()):
            subscribers.discard(connection)
            if not subscribers:
                self._hotel_connections.pop(hotel_id, None)

    def connection_count(self, user_id: int) -> int:
        return len(self._connections.get(user_id, ()))

    async def send_to_user(self, user_id: int, message: dict[str, Any]) -> int:
        """Send ``message`` to every active connection for ``user_id``.

        Returns how many connections accepted the message. Nothing is sent
        when the user has no open connection.
        """

        connections = list(self._connections.get(user_id, set()))
        return await self._broadcast(connections, message, owner=user_id)

    async def send_to_hotel(self, hotel_id: int, message: dict[str, Any]) -> int:
        """Send ``message`` to every admin channel subscriber of ``hotel_id``."""

        connections = list(self._hotel_connections.get(hotel_id, set()))
        return await self._broadcast(connections, message, owner=None)

    async def _broadcast(
        self,
        connections: list[JsonConnection],
        message: dict[str, Any],
        *,
        owner: int | None,
    ) -> int:
        delivered = 0
        errors: list[Exception] = []
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception as exc:
                errors.append(exc)
                self._drop(connection, owner)
            else:
                delivered += 1
        if errors and not delivered:
            raise PushDeliveryError(
                f"All {len(errors)} connection(s) failed: {errors[-1]}"
            ) from errors[-1]
        if errors:
            logger.warning("Dropped %s broken notification connection(s)", len(errors))
        return delivered

    def _drop(self, connection: JsonConnection, owner: int | None) -> None:
        if owner is not None:
            self.disconnect(owner, connection)
            return
        for user_id, connections in list(self._connections.items()):
            if connection in connections:
                self.disconnect(user_id, connection)
                return
        for subscribers in self._hotel_connections.values():
            subscribers.discard(connection)


notification_manager = NotificationConnectionManager()


__all__ = ["JsonConnection", "NotificationConnectionManager", "notification_manager"]
