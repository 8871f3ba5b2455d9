"""Endpoints and websocket handler for marketplace notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from resale_notifications.application.notifications import (
    NotificationService,
    realtime_payload,
)
from resale_notifications.domain.entities import NotificationRecord, NotificationRequest
from resale_notifications.domain.exceptions import (
    PreferenceLookupFailed,
    UnknownNotificationType,
)
from resale_notifications.infrastructure.notifications import notification_manager
from resale_notifications.interfaces.api.dependencies import get_notification_service
from resale_notifications.interfaces.api.schemas import (
    BulkNotificationCreate,
    BulkResultRead,
    NotificationCreate,
    NotificationRead,
    PreferencesRead,
    PreferencesUpdate,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _to_request(payload: NotificationCreate) -> NotificationRequest:
    return NotificationRequest(**payload.model_dump())


def _to_read_model(record: NotificationRecord) -> NotificationRead:
    return NotificationRead.model_validate(record)


@router.post("/", response_model=NotificationRead | None)
async def create_notification(
    payload: NotificationCreate,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationRead | None:
    """Create a notification. Returns ``null`` when user preferences block it."""

    try:
        record = await service.create_notification(_to_request(payload))
    except UnknownNotificationType as exc:
        raise HTTPException(
            status_code=422, detail=str(exc)
        ) from exc
    except PreferenceLookupFailed as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return _to_read_model(record) if record is not None else None


@router.post("/bulk", response_model=BulkResultRead)
async def create_bulk_notifications(
    payload: BulkNotificationCreate,
    service: NotificationService = Depends(get_notification_service),
) -> BulkResultRead:
    result = await service.create_bulk_notifications(
        [_to_request(item) for item in payload.notifications]
    )
    return BulkResultRead(successful=result.successful, failed=result.failed)


@router.get("/users/{user_id}", response_model=list[NotificationRead])
async def list_notifications(
    user_id: str,
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    service: NotificationService = Depends(get_notification_service),
) -> list[NotificationRead]:
    """Return the most recent notifications for ``user_id``."""

    records = await service.list_notifications(user_id, unread_only=unread_only, limit=limit)
    return [_to_read_model(record) for record in records]


@router.get("/users/{user_id}/unread-count", response_model=UnreadCountRead)
async def unread_count(
    user_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountRead:
    return UnreadCountRead(user_id=user_id, unread=await service.get_unread_count(user_id))


@router.post(
    "/users/{user_id}/read-all", status_code=status.HTTP_204_NO_CONTENT
)
async def mark_all_as_read(
    user_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    await service.mark_all_as_read(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/users/{user_id}/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT
)
async def mark_as_read(
    user_id: str,
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    """Mark one notification read. Repeating the call is harmless."""

    await service.mark_as_read(notification_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/{user_id}/preferences", response_model=PreferencesRead)
async def read_preferences(
    user_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> PreferencesRead:
    try:
        preferences = await service.get_preferences(user_id)
    except PreferenceLookupFailed as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return PreferencesRead.model_validate(preferences)


@router.put("/users/{user_id}/preferences", response_model=PreferencesRead)
async def update_preferences(
    user_id: str,
    payload: PreferencesUpdate,
    service: NotificationService = Depends(get_notification_service),
) -> PreferencesRead:
    try:
        preferences = await service.update_preferences(
            user_id, payload.model_dump(exclude_unset=True)
        )
    except PreferenceLookupFailed as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return PreferencesRead.model_validate(preferences)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    service: NotificationService = Depends(get_notification_service),
) -> None:
    """Websocket endpoint that streams notifications to ``user_id``."""

    user_id = websocket.query_params.get("user_id")
    if not user_id:
        await websocket.close(code=1008)
        return

    pending = await service.list_notifications(user_id, unread_only=True)

    await notification_manager.connect(user_id, websocket)
    try:
        if pending:
            await websocket.send_json(
                {"type": "init", "data": [realtime_payload(record) for record in pending]}
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                logger.debug("Ignoring malformed websocket frame from user %s", user_id)
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in dict.fromkeys(str(item) for item in ids):
                        await service.mark_as_read(notification_id, user_id)
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(user_id, websocket)
    except Exception:
        notification_manager.disconnect(user_id, websocket)
        raise
