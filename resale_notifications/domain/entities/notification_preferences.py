"""Per-user notification preferences."""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass
class NotificationPreferences:
    """Channel and category toggles plus an optional quiet-hours window.

    ``quiet_hours_start`` and ``quiet_hours_end`` use the ``"HH:MM"`` 24-hour
    format. ``timezone`` accepts an IANA name or a ``UTC±HH:MM`` offset.
    """

    user_id: str
    email_enabled: bool = True
    sms_enabled: bool = False
    push_enabled: bool = True
    in_app_enabled: bool = True
    offer_notifications: bool = True
    payment_notifications: bool = True
    marketing_notifications: bool = False
    auto_match_notifications: bool = True
    price_alerts: bool = True
    event_reminders: bool = True
    weekly_reports: bool = True
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    timezone: str | None = None

    @classmethod
    def defaults_for(cls, user_id: str) -> "NotificationPreferences":
        """Return the preferences used when a user never saved any."""

        return cls(user_id=user_id)

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Names a caller may update (everything except ``user_id``)."""

        return frozenset(f.name for f in fields(cls) if f.name != "user_id")


__all__ = ["NotificationPreferences"]
