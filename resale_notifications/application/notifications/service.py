"""Application service that turns notification requests into deliveries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from resale_notifications.domain.entities import (
    Channel,
    NotificationPreferences,
    NotificationRecord,
    NotificationRequest,
    NotificationType,
    Priority,
)
from resale_notifications.domain.exceptions import (
    PreferenceLookupFailed,
    UnknownNotificationType,
)
from resale_notifications.utils import ensure_app_timezone, now_in_app_timezone

from .dispatcher import ChannelDispatcher
from .ports import NotificationStore
from .preferences import ALWAYS_ALLOWED_TYPES, PreferenceResolver, is_allowed
from .read_state import ReadStateManager
from .scheduling import is_quiet_hours, next_allowed_time
from .templates import DEFAULT_TEMPLATE_REGISTRY, TemplateRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkResult:
    """Aggregate outcome of :meth:`NotificationService.create_bulk_notifications`."""

    successful: int
    failed: int


class NotificationService:
    """Create, deliver and track marketplace notifications.

    ``create_notification`` resolves the template, loads preferences, applies
    the category gate and quiet hours, persists the record and, unless the
    record is scheduled for later, dispatches it right away. Deferred records
    are picked up by :meth:`dispatch_due`.
    """

    def __init__(
        self,
        *,
        store: NotificationStore,
        preferences: PreferenceResolver,
        dispatcher: ChannelDispatcher,
        templates: TemplateRegistry = DEFAULT_TEMPLATE_REGISTRY,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._store = store
        self._preferences = preferences
        self._dispatcher = dispatcher
        self._templates = templates
        self._clock = clock
        self._read_state = ReadStateManager(store, clock=clock)

    async def create_notification(
        self, request: NotificationRequest
    ) -> NotificationRecord | None:
        """Persist and deliver ``request``.

        Returns ``None`` when the user's preferences block the notification.
        Raises :class:`UnknownNotificationType` or
        :class:`PreferenceLookupFailed` before anything is stored.
        """

        template = self._templates.resolve(request.type)
        notification_type = template.type
        priority = Priority(request.priority) if request.priority else template.priority

        preferences = await self._load_preferences(
            request.user_id, notification_type, priority
        )
        if not is_allowed(notification_type, preferences):
            logger.info(
                "Notification %s blocked by user preferences for user: %s",
                notification_type.value,
                request.user_id,
            )
            return None

        now = self._clock()
        schedule_for = ensure_app_timezone(request.schedule_for)
        if priority is not Priority.URGENT and is_quiet_hours(preferences, now):
            schedule_for = next_allowed_time(preferences, now)
            logger.info(
                "Quiet hours active for user %s; %s scheduled for %s",
                request.user_id,
                notification_type.value,
                schedule_for.isoformat(),
            )

        record = NotificationRecord(
            id=None,
            user_id=request.user_id,
            type=notification_type,
            title=template.title(request.data),
            message=template.message(request.data),
            data=dict(request.data),
            priority=priority,
            channels=[Channel(channel) for channel in request.channels or template.channels],
            created_at=now,
            schedule_for=schedule_for,
            expires_at=ensure_app_timezone(request.expires_at),
            actionable=request.actionable,
            action_url=request.action_url,
            group_id=request.group_id,
        )
        deferred = record.is_deferred(now)
        if not deferred:
            record.dispatched_at = now

        saved = await self._store.create(record)
        if deferred:
            logger.info(
                "Notification %s for user %s deferred until %s",
                saved.id,
                saved.user_id,
                saved.schedule_for.isoformat() if saved.schedule_for else None,
            )
        else:
            await self._dispatcher.dispatch(saved, template, preferences)

        logger.info("Notification created: %s for user: %s", saved.id, request.user_id)
        return saved

    async def create_bulk_notifications(
        self, requests: Iterable[NotificationRequest]
    ) -> BulkResult:
        """Run every request concurrently and count the outcomes.

        A failing request never cancels the others. Blocked requests count as
        successful.
        """

        pending = list(requests)
        results = await asyncio.gather(
            *(self.create_notification(request) for request in pending),
            return_exceptions=True,
        )

        failed = 0
        for request, result in zip(pending, results):
            if isinstance(result, BaseException):
                failed += 1
                logger.warning(
                    "Bulk notification %s for user %s failed: %s",
                    request.type,
                    request.user_id,
                    result,
                )
        successful = len(results) - failed
        logger.info("Bulk notifications: %s successful, %s failed", successful, failed)
        return BulkResult(successful=successful, failed=failed)

    async def dispatch_due(
        self, now: datetime | None = None, *, limit: int = 100
    ) -> int:
        """Deliver deferred notifications whose scheduled time has arrived.

        Preferences and the category gate are evaluated again at send time.
        Records whose preferences cannot be loaded stay pending for the next
        pass. Returns the number of records handed to the dispatcher.
        """

        now = now or self._clock()
        due = await self._store.list_due(now, limit=limit)
        dispatched = 0
        for record in due:
            try:
                template = self._templates.resolve(record.type)
                preferences = await self._preferences.get_preferences(record.user_id)
            except (UnknownNotificationType, PreferenceLookupFailed):
                logger.exception("Cannot dispatch deferred notification %s", record.id)
                continue

            if not await self._store.claim_for_dispatch(record.id, dispatched_at=now):
                logger.debug("Deferred notification %s already claimed by another pass", record.id)
                continue
            record.dispatched_at = now
            if not is_allowed(record.type, preferences):
                logger.info(
                    "Deferred notification %s dropped; %s now blocked for user %s",
                    record.id,
                    record.type.value,
                    record.user_id,
                )
                continue

            await self._dispatcher.dispatch(record, template, preferences)
            dispatched += 1

        if due:
            logger.info("Dispatched %s of %s due notifications", dispatched, len(due))
        return dispatched

    async def mark_as_read(self, notification_id: str, user_id: str) -> bool:
        return await self._read_state.mark_as_read(notification_id, user_id)

    async def mark_all_as_read(self, user_id: str) -> int:
        return await self._read_state.mark_all_as_read(user_id)

    async def get_unread_count(self, user_id: str) -> int:
        return await self._read_state.unread_count(user_id)

    async def list_notifications(
        self, user_id: str, *, unread_only: bool = False, limit: int | None = 50
    ) -> Sequence[NotificationRecord]:
        return await self._read_state.list_notifications(
            user_id, unread_only=unread_only, limit=limit
        )

    async def get_preferences(self, user_id: str) -> NotificationPreferences:
        return await self._preferences.get_preferences(user_id)

    async def update_preferences(
        self, user_id: str, changes: Mapping[str, Any]
    ) -> NotificationPreferences:
        return await self._preferences.update_preferences(user_id, changes)

    async def _load_preferences(
        self,
        user_id: str,
        notification_type: NotificationType,
        priority: Priority,
    ) -> NotificationPreferences:
        try:
            return await self._preferences.get_preferences(user_id)
        except PreferenceLookupFailed:
            if notification_type not in ALWAYS_ALLOWED_TYPES and priority is not Priority.URGENT:
                raise
            logger.warning(
                "Preference lookup failed for user %s; sending %s with default preferences",
                user_id,
                notification_type.value,
                exc_info=True,
            )
            return NotificationPreferences.defaults_for(user_id)


__all__ = ["BulkResult", "NotificationService"]
