"""Realtime delivery of notification events to connected clients."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class WebSocketRealtimeChannel:
    """Emit structured events over the user's open notification websockets."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    async def emit_to_user(
        self, user_id: str, event_name: str, payload: Mapping[str, Any]
    ) -> None:
        if not self._manager.is_connected(user_id):
            logger.debug("User %s has no open websocket; %s not pushed", user_id, event_name)
            return
        message = {"type": event_name, "data": copy.deepcopy(dict(payload))}
        await self._manager.send_to_user(user_id, message)


realtime_channel = WebSocketRealtimeChannel(notification_manager)


__all__ = ["WebSocketRealtimeChannel", "realtime_channel"]
