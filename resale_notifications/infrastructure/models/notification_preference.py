"""SQLAlchemy model for per-user notification preferences."""

from sqlalchemy import Boolean, Column, ForeignKey, String

from resale_notifications.infrastructure.database import Base


class NotificationPreferenceModel(Base):
    """Database representation of a user's notification settings."""

    __tablename__ = "notification_preference"

    user_id = Column(String(36), ForeignKey("user.id"), primary_key=True)
    email_enabled = Column(Boolean, nullable=False, default=True)
    sms_enabled = Column(Boolean, nullable=False, default=False)
    push_enabled = Column(Boolean, nullable=False, default=True)
    in_app_enabled = Column(Boolean, nullable=False, default=True)
    offer_notifications = Column(Boolean, nullable=False, default=True)
    payment_notifications = Column(Boolean, nullable=False, default=True)
    marketing_notifications = Column(Boolean, nullable=False, default=False)
    auto_match_notifications = Column(Boolean, nullable=False, default=True)
    price_alerts = Column(Boolean, nullable=False, default=True)
    event_reminders = Column(Boolean, nullable=False, default=True)
    weekly_reports = Column(Boolean, nullable=False, default=True)
    quiet_hours_start = Column(String(5), nullable=True)
    quiet_hours_end = Column(String(5), nullable=True)
    timezone = Column(String(64), nullable=True)


__all__ = ["NotificationPreferenceModel"]
