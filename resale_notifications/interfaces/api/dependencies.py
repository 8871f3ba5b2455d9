"""FastAPI dependency utilities."""

from functools import lru_cache

from resale_notifications.application.notifications import (
    ChannelDispatcher,
    NotificationService,
    PreferenceResolver,
)
from resale_notifications.config import get_settings
from resale_notifications.infrastructure.database import SessionLocal
from resale_notifications.infrastructure.email import SendGridMailTransport
from resale_notifications.infrastructure.notifications import (
    LoggingPushSender,
    LoggingSmsSender,
    realtime_channel,
)
from resale_notifications.infrastructure.stores import (
    SqlAlchemyNotificationStore,
    SqlAlchemyPreferenceStore,
    SqlAlchemyUserDirectory,
)


@lru_cache
def get_notification_service() -> NotificationService:
    """Return the process-wide notification service wired to the database."""

    settings = get_settings()
    store = SqlAlchemyNotificationStore(SessionLocal)
    dispatcher = ChannelDispatcher(
        store=store,
        users=SqlAlchemyUserDirectory(SessionLocal),
        mail=SendGridMailTransport(),
        push=LoggingPushSender(),
        sms=LoggingSmsSender(),
        realtime=realtime_channel,
        timeout_seconds=settings.channel_send_timeout_seconds,
        brand_name=settings.brand_name,
        preferences_url=settings.preferences_url,
    )
    return NotificationService(
        store=store,
        preferences=PreferenceResolver(SqlAlchemyPreferenceStore(SessionLocal)),
        dispatcher=dispatcher,
    )


__all__ = ["get_notification_service"]
