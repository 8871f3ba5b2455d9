"""Persistence helpers for notification preferences."""

from __future__ import annotations

from dataclasses import asdict

from sqlalchemy.orm import Session

from resale_notifications.domain.entities import NotificationPreferences
from resale_notifications.infrastructure.models import NotificationPreferenceModel


class NotificationPreferenceRepository:
    """Read and upsert :class:`NotificationPreferences` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> NotificationPreferences | None:
        model = self.session.get(NotificationPreferenceModel, user_id)
        return self._to_entity(model) if model else None

    def save(self, preferences: NotificationPreferences) -> NotificationPreferences:
        model = self.session.get(NotificationPreferenceModel, preferences.user_id)
        if model is None:
            model = NotificationPreferenceModel(user_id=preferences.user_id)
        for name, value in asdict(preferences).items():
            if name != "user_id":
                setattr(model, name, value)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> NotificationPreferences:
        return NotificationPreferences(
            user_id=model.user_id,
            email_enabled=model.email_enabled,
            sms_enabled=model.sms_enabled,
            push_enabled=model.push_enabled,
            in_app_enabled=model.in_app_enabled,
            offer_notifications=model.offer_notifications,
            payment_notifications=model.payment_notifications,
            marketing_notifications=model.marketing_notifications,
            auto_match_notifications=model.auto_match_notifications,
            price_alerts=model.price_alerts,
            event_reminders=model.event_reminders,
            weekly_reports=model.weekly_reports,
            quiet_hours_start=model.quiet_hours_start or None,
            quiet_hours_end=model.quiet_hours_end or None,
            timezone=model.timezone or None,
        )


__all__ = ["NotificationPreferenceRepository"]
