"""Collaborator interfaces consumed by the notification service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol

from resale_notifications.domain.entities import (
    NotificationPreferences,
    NotificationRecord,
    UserContact,
)


class UserDirectory(Protocol):
    async def find_user(self, user_id: str) -> UserContact | None: ...


class PreferenceStore(Protocol):
    async def find_preferences(self, user_id: str) -> NotificationPreferences | None: ...

    async def save_preferences(
        self, preferences: NotificationPreferences
    ) -> NotificationPreferences: ...


class NotificationStore(Protocol):
    """Persistence for :class:`NotificationRecord` objects.

    Every write touches a single record, except ``mark_read`` without a
    ``notification_id`` which stamps all unread records of a user in one
    statement.
    """

    async def create(self, record: NotificationRecord) -> NotificationRecord: ...

    async def update(
        self, notification_id: str, fields: Mapping[str, Any]
    ) -> NotificationRecord: ...

    async def mark_read(
        self,
        user_id: str,
        *,
        read_at: datetime,
        notification_id: str | None = None,
    ) -> int: ...

    async def count_unread(self, user_id: str) -> int: ...

    async def list_for_user(
        self, user_id: str, *, unread_only: bool = False, limit: int | None = 50
    ) -> Sequence[NotificationRecord]: ...

    async def list_due(
        self, now: datetime, *, limit: int
    ) -> Sequence[NotificationRecord]: ...

    async def claim_for_dispatch(
        self, notification_id: str, *, dispatched_at: datetime
    ) -> bool:
        """Stamp ``dispatched_at`` only if unset. Returns whether this call won."""
        ...


class MailTransport(Protocol):
    """Send an HTML email. Implementations raise on failure."""

    async def send(self, to: str, subject: str, html: str) -> None: ...


class RealtimeChannel(Protocol):
    """Best-effort push of structured events to a user's live connections."""

    async def emit_to_user(
        self, user_id: str, event_name: str, payload: Mapping[str, Any]
    ) -> None: ...


class PushSender(Protocol):
    async def send_push(self, record: NotificationRecord) -> None: ...


class SmsSender(Protocol):
    async def send_sms(
        self, record: NotificationRecord, contact: UserContact | None
    ) -> None: ...


__all__ = [
    "MailTransport",
    "NotificationStore",
    "PreferenceStore",
    "PushSender",
    "RealtimeChannel",
    "SmsSender",
    "UserDirectory",
]
