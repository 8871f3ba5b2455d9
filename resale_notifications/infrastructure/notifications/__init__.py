"""Realtime and vendor delivery channels for the infrastructure layer."""

from .manager import NotificationConnectionManager, notification_manager
from .realtime import WebSocketRealtimeChannel, realtime_channel
from .senders import LoggingPushSender, LoggingSmsSender

__all__ = [
    "NotificationConnectionManager",
    "notification_manager",
    "WebSocketRealtimeChannel",
    "realtime_channel",
    "LoggingPushSender",
    "LoggingSmsSender",
]
