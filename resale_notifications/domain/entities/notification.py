"""Domain entity representing a persisted user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .enums import Channel, NotificationType, Priority


@dataclass
class NotificationRecord:
    """Rendered notification stored for a specific user.

    Created once per accepted request and afterwards only mutated to stamp
    delivery and read timestamps.
    """

    id: str | None
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    priority: Priority = Priority.MEDIUM
    channels: list[Channel] = field(default_factory=list)
    created_at: datetime | None = None
    schedule_for: datetime | None = None
    expires_at: datetime | None = None
    actionable: bool = False
    action_url: str | None = None
    group_id: str | None = None
    delivered_at: datetime | None = None
    email_sent_at: datetime | None = None
    read_at: datetime | None = None
    dispatched_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def is_deferred(self, now: datetime) -> bool:
        """Return ``True`` when the record must not be sent before ``now``."""

        return self.schedule_for is not None and self.schedule_for > now


__all__ = ["NotificationRecord"]
