"""Input describing a notification the caller wants to send."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .enums import Channel, NotificationType, Priority


@dataclass
class NotificationRequest:
    """Request to notify ``user_id`` about a ``type`` event.

    ``data`` supplies the values interpolated by the template chosen for
    ``type``. ``priority`` and ``channels`` override the template defaults.
    ``type`` may be a raw string coming from an API caller; it is validated
    when the template is resolved.
    """

    user_id: str
    type: NotificationType | str
    data: dict[str, Any] = field(default_factory=dict)
    priority: Priority | None = None
    channels: list[Channel] | None = None
    schedule_for: datetime | None = None
    expires_at: datetime | None = None
    actionable: bool = False
    action_url: str | None = None
    group_id: str | None = None


__all__ = ["NotificationRequest"]
