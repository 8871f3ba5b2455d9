"""ORM models used by the application infrastructure."""

from .user import UserModel
from .notification import NotificationModel
from .notification_preference import NotificationPreferenceModel

__all__ = [
    "UserModel",
    "NotificationModel",
    "NotificationPreferenceModel",
]
