from .notification import (
    BulkNotificationCreate,
    BulkResultRead,
    NotificationCreate,
    NotificationRead,
    PreferencesRead,
    PreferencesUpdate,
    UnreadCountRead,
)

__all__ = [
    "BulkNotificationCreate",
    "BulkResultRead",
    "NotificationCreate",
    "NotificationRead",
    "PreferencesRead",
    "PreferencesUpdate",
    "UnreadCountRead",
]
