"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, JSON, String, Text

from resale_notifications.infrastructure.database import Base
from resale_notifications.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_read", "user_id", "read_at"),
        Index("ix_notification_due", "dispatched_at", "schedule_for"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    type = Column(String(40), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    priority = Column(String(10), nullable=False)
    channels = Column(JSON, nullable=False, default=list)
    actionable = Column(Boolean, nullable=False, default=False)
    action_url = Column(String(500), nullable=True)
    group_id = Column(String(100), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    schedule_for = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True)
    delivered_at = Column(DateTime(), nullable=True)
    email_sent_at = Column(DateTime(), nullable=True)
    read_at = Column(DateTime(), nullable=True)
    dispatched_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
