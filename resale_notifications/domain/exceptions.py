"""Errors raised by the notification domain."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for notification failures."""


class UnknownNotificationType(NotificationError, ValueError):
    """No template is registered for the requested notification type."""

    def __init__(self, notification_type: object) -> None:
        self.notification_type = notification_type
        super().__init__(f"Unknown notification type: {notification_type}")


class PreferenceLookupFailed(NotificationError):
    """The preference store could not be read for ``user_id``."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"Could not load notification preferences for user {user_id}")


class ChannelDeliveryFailed(NotificationError):
    """A delivery channel rejected or could not send a notification."""

    def __init__(self, channel: str, reason: str | None = None) -> None:
        self.channel = channel
        self.reason = reason
        message = f"Delivery through {channel} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


__all__ = [
    "ChannelDeliveryFailed",
    "NotificationError",
    "PreferenceLookupFailed",
    "UnknownNotificationType",
]
