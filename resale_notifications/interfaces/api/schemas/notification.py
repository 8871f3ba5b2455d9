"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from resale_notifications.domain.entities import Channel, NotificationType, Priority

_CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class NotificationCreate(BaseModel):
    """Request body used to create a single notification."""

    user_id: str = Field(..., min_length=1)
    type: str = Field(..., description="Notification type, e.g. OFFER_ACCEPTED")
    data: dict[str, Any] = Field(default_factory=dict)
    priority: Priority | None = None
    channels: list[Channel] | None = None
    schedule_for: datetime | None = None
    expires_at: datetime | None = None
    actionable: bool = False
    action_url: str | None = None
    group_id: str | None = None


class BulkNotificationCreate(BaseModel):
    notifications: list[NotificationCreate] = Field(..., min_length=1)


class BulkResultRead(BaseModel):
    successful: int
    failed: int


class NotificationRead(BaseModel):
    """Representation of a stored notification returned to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    priority: Priority
    channels: list[Channel] = Field(default_factory=list)
    created_at: datetime | None = None
    schedule_for: datetime | None = None
    expires_at: datetime | None = None
    actionable: bool = False
    action_url: str | None = None
    group_id: str | None = None
    delivered_at: datetime | None = None
    email_sent_at: datetime | None = None
    read_at: datetime | None = None


class UnreadCountRead(BaseModel):
    user_id: str
    unread: int


class PreferencesRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email_enabled: bool
    sms_enabled: bool
    push_enabled: bool
    in_app_enabled: bool
    offer_notifications: bool
    payment_notifications: bool
    marketing_notifications: bool
    auto_match_notifications: bool
    price_alerts: bool
    event_reminders: bool
    weekly_reports: bool
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str | None = None


class PreferencesUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    model_config = ConfigDict(extra="forbid")

    email_enabled: bool | None = None
    sms_enabled: bool | None = None
    push_enabled: bool | None = None
    in_app_enabled: bool | None = None
    offer_notifications: bool | None = None
    payment_notifications: bool | None = None
    marketing_notifications: bool | None = None
    auto_match_notifications: bool | None = None
    price_alerts: bool | None = None
    event_reminders: bool | None = None
    weekly_reports: bool | None = None
    quiet_hours_start: str | None = Field(default=None, pattern=_CLOCK_PATTERN)
    quiet_hours_end: str | None = Field(default=None, pattern=_CLOCK_PATTERN)
    timezone: str | None = None


__all__ = [
    "BulkNotificationCreate",
    "BulkResultRead",
    "NotificationCreate",
    "NotificationRead",
    "PreferencesRead",
    "PreferencesUpdate",
    "UnreadCountRead",
]
