"""Notification templating, gating, scheduling and delivery."""

from .dispatcher import REALTIME_EVENT, ChannelDispatcher, realtime_payload
from .preferences import (
    ALWAYS_ALLOWED_TYPES,
    CATEGORY_PREFERENCE_KEYS,
    PreferenceResolver,
    is_allowed,
)
from .read_state import ReadStateManager
from .scheduling import is_quiet_hours, next_allowed_time, parse_clock
from .service import BulkResult, NotificationService
from .templates import DEFAULT_TEMPLATE_REGISTRY, NotificationTemplate, TemplateRegistry

__all__ = [
    "ALWAYS_ALLOWED_TYPES",
    "BulkResult",
    "CATEGORY_PREFERENCE_KEYS",
    "ChannelDispatcher",
    "DEFAULT_TEMPLATE_REGISTRY",
    "NotificationService",
    "NotificationTemplate",
    "PreferenceResolver",
    "REALTIME_EVENT",
    "ReadStateManager",
    "TemplateRegistry",
    "is_allowed",
    "is_quiet_hours",
    "next_allowed_time",
    "parse_clock",
    "realtime_payload",
]
