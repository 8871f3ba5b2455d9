"""User preference resolution and the per-category delivery gate."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Any

from resale_notifications.domain.entities import NotificationPreferences, NotificationType
from resale_notifications.domain.exceptions import PreferenceLookupFailed

from .ports import PreferenceStore

logger = logging.getLogger(__name__)

# Types missing from this table are always allowed so that newly added
# notification types are delivered until a category rule exists for them.
CATEGORY_PREFERENCE_KEYS: Mapping[NotificationType, str] = MappingProxyType(
    {
        NotificationType.OFFER_ACCEPTED: "offer_notifications",
        NotificationType.OFFER_REJECTED: "offer_notifications",
        NotificationType.OFFER_COUNTER: "offer_notifications",
        NotificationType.PAYMENT_RECEIVED: "payment_notifications",
        NotificationType.PAYMENT_FAILED: "payment_notifications",
        NotificationType.AUTOMATCH_FOUND: "auto_match_notifications",
        NotificationType.PRICE_ALERT: "price_alerts",
        NotificationType.EVENT_REMINDER: "event_reminders",
        NotificationType.WEEKLY_REPORT: "weekly_reports",
        NotificationType.MONTHLY_REPORT: "weekly_reports",
        NotificationType.PROMOTION: "marketing_notifications",
    }
)

ALWAYS_ALLOWED_TYPES: frozenset[NotificationType] = frozenset(
    {NotificationType.SECURITY_ALERT}
)


def is_allowed(
    notification_type: NotificationType, preferences: NotificationPreferences
) -> bool:
    """Return ``True`` when the user's category toggles permit ``notification_type``."""

    if notification_type in ALWAYS_ALLOWED_TYPES:
        return True
    preference_key = CATEGORY_PREFERENCE_KEYS.get(notification_type)
    if preference_key is None:
        return True
    return bool(getattr(preferences, preference_key))


class PreferenceResolver:
    """Load notification preferences, synthesizing defaults when absent."""

    def __init__(self, store: PreferenceStore) -> None:
        self._store = store

    async def get_preferences(self, user_id: str) -> NotificationPreferences:
        """Return the stored preferences for ``user_id`` or the defaults.

        Defaults are never written back to the store. Any store error is
        re-raised as :class:`PreferenceLookupFailed`.
        """

        try:
            preferences = await self._store.find_preferences(user_id)
        except Exception as exc:
            raise PreferenceLookupFailed(user_id) from exc
        if preferences is None:
            return NotificationPreferences.defaults_for(user_id)
        return preferences

    async def update_preferences(
        self, user_id: str, changes: Mapping[str, Any]
    ) -> NotificationPreferences:
        """Merge ``changes`` over the current preferences and persist them.

        Unknown keys are ignored.
        """

        current = await self.get_preferences(user_id)
        allowed = NotificationPreferences.field_names()
        updates = {key: value for key, value in changes.items() if key in allowed}
        ignored = set(changes) - allowed
        if ignored:
            logger.debug(
                "Ignoring unknown preference keys for user %s: %s",
                user_id,
                ", ".join(sorted(ignored)),
            )
        updated = replace(current, **updates)
        saved = await self._store.save_preferences(updated)
        logger.info("Updated notification preferences for user %s", user_id)
        return saved


__all__ = [
    "ALWAYS_ALLOWED_TYPES",
    "CATEGORY_PREFERENCE_KEYS",
    "PreferenceResolver",
    "is_allowed",
]
