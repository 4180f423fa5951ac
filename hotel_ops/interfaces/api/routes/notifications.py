"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ops.application.use_cases import (
    list_user_notifications,
    mark_notifications_as_read,
    search_hotel_notifications,
)
from hotel_ops.domain.entities import NOTIFICATION_STATUSES, NotificationRecord, User
from hotel_ops.infrastructure.notifications import serialize_notification
from hotel_ops.interfaces.api.dependencies import (
    get_clock,
    get_current_active_user,
    get_db,
    require_admin,
    resolve_current_user,
)
from hotel_ops.interfaces.api.schemas import (
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
)
from hotel_ops.utils import Clock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

# Policy violation: the websocket could not be authenticated.
WS_POLICY_VIOLATION = 1008


def _notification_to_schema(record: NotificationRecord) -> NotificationRead:
    return NotificationRead.model_validate(record)


@router.get("/", response_model=list[NotificationRead])
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the most recent released notifications of the authenticated user."""

    records = await list_user_notifications(
        db, current_user, unread_only=unread_only, limit=limit
    )
    return [_notification_to_schema(record) for record in records]


@router.post("/read", response_model=NotificationMarkReadResponse)
async def mark_notifications_read(
    payload: NotificationMarkReadRequest,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: User = Depends(get_current_active_user),
) -> NotificationMarkReadResponse:
    updated = await mark_notifications_as_read(
        db, current_user, payload.unique_ids(), at=clock.now()
    )
    return NotificationMarkReadResponse(updated=updated)


@router.get("/admin", response_model=list[NotificationRead])
async def search_notifications(
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    kind: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    recipient_id: int | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[NotificationRead]:
    """Return the notifications of the caller's hotel matching the filters."""

    if status_filter is not None and status_filter not in NOTIFICATION_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown status: {status_filter}",
        )
    try:
        records = await search_hotel_notifications(
            db,
            current_user,
            created_from=created_from,
            created_to=created_to,
            kind=kind,
            status=status_filter,
            recipient_id=recipient_id,
            limit=limit,
            offset=offset,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return [_notification_to_schema(record) for record in records]


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user.

    Admins and managers are also subscribed to their hotel's admin channel.
    Unread notifications are replayed on connect; clients may send ``ping``
    and ``ack`` messages.
    """

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=WS_POLICY_VIOLATION)
        return

    state = websocket.app.state
    async with state.session_factory() as session:
        try:
            user = await resolve_current_user(token, session)
        except HTTPException:
            await websocket.close(code=WS_POLICY_VIOLATION)
            return
        if not user.is_reachable():
            await websocket.close(code=WS_POLICY_VIOLATION)
            return
        unread = await list_user_notifications(session, user, unread_only=True)

    manager = state.connections
    await websocket.accept()
    manager.register(
        user.id, websocket, hotel_id=user.hotel_id if user.is_admin() else None
    )
    try:
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(record) for record in unread]}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                raw_ids = message.get("ids")
                if not isinstance(raw_ids, list):
                    continue
                ids = [value for value in raw_ids if isinstance(value, int)]
                if ids:
                    async with state.session_factory() as session:
                        await mark_notifications_as_read(
                            session, user, ids, at=state.clock.now()
                        )
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for user %s", user.id)
    finally:
        manager.disconnect(user.id, websocket)
