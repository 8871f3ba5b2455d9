"""Domain entities exposed by the application."""

from .enums import Channel, NotificationType, Priority
from .notification import NotificationRecord
from .notification_preferences import NotificationPreferences
from .notification_request import NotificationRequest
from .user_contact import UserContact

__all__ = [
    "Channel",
    "NotificationType",
    "Priority",
    "NotificationRecord",
    "NotificationPreferences",
    "NotificationRequest",
    "UserContact",
]
