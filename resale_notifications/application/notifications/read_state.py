"""Read/unread bookkeeping for stored notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from resale_notifications.domain.entities import NotificationRecord
from resale_notifications.utils import now_in_app_timezone

from .ports import NotificationStore

logger = logging.getLogger(__name__)


class ReadStateManager:
    """Mark notifications read and count the unread ones.

    Read state is a timestamp; records are never removed.
    """

    def __init__(
        self,
        store: NotificationStore,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._store = store
        self._clock = clock

    async def mark_as_read(self, notification_id: str, user_id: str) -> bool:
        """Stamp ``read_at`` on an unread notification owned by ``user_id``.

        Returns ``False`` when nothing changed (already read, not found or
        owned by someone else).
        """

        updated = await self._store.mark_read(
            user_id, read_at=self._clock(), notification_id=notification_id
        )
        return updated > 0

    async def mark_all_as_read(self, user_id: str) -> int:
        updated = await self._store.mark_read(user_id, read_at=self._clock())
        if updated:
            logger.info("Marked %s notifications as read for user %s", updated, user_id)
        return updated

    async def unread_count(self, user_id: str) -> int:
        return await self._store.count_unread(user_id)

    async def list_notifications(
        self, user_id: str, *, unread_only: bool = False, limit: int | None = 50
    ) -> Sequence[NotificationRecord]:
        return await self._store.list_for_user(
            user_id, unread_only=unread_only, limit=limit
        )


__all__ = ["ReadStateManager"]
