"""Push and SMS delivery hooks.

No vendor transport is wired yet. These implementations only log what would
be sent; a real sender (Firebase, Twilio, ...) can replace them without
changes to the dispatcher.
"""

from __future__ import annotations

import logging

from resale_notifications.domain.entities import NotificationRecord, UserContact

logger = logging.getLogger(__name__)


class LoggingPushSender:
    async def send_push(self, record: NotificationRecord) -> None:
        logger.info("Push notification would be sent: %s to user %s", record.id, record.user_id)


class LoggingSmsSender:
    async def send_sms(self, record: NotificationRecord, contact: UserContact | None) -> None:
        if contact is None or not contact.phone_number:
            logger.info("No phone number for user %s; SMS %s skipped", record.user_id, record.id)
            return
        logger.info("SMS notification would be sent: %s to %s", record.id, contact.phone_number)


__all__ = ["LoggingPushSender", "LoggingSmsSender"]
