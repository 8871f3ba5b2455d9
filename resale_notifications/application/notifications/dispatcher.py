"""Fan a persisted notification out to its delivery channels."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

import anyio

from resale_notifications.domain.entities import (
    Channel,
    NotificationPreferences,
    NotificationRecord,
)
from resale_notifications.domain.exceptions import ChannelDeliveryFailed
from resale_notifications.utils import now_in_app_timezone

from .ports import (
    MailTransport,
    NotificationStore,
    PushSender,
    RealtimeChannel,
    SmsSender,
    UserDirectory,
)
from .templates import NotificationTemplate

logger = logging.getLogger(__name__)

REALTIME_EVENT = "notification"

_CHANNEL_TOGGLES = {
    Channel.IN_APP: "in_app_enabled",
    Channel.EMAIL: "email_enabled",
    Channel.PUSH: "push_enabled",
    Channel.SMS: "sms_enabled",
}


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def realtime_payload(record: NotificationRecord) -> dict[str, Any]:
    """Return the websocket representation of ``record``."""

    return {
        "id": record.id,
        "type": record.type.value,
        "title": record.title,
        "message": record.message,
        "data": dict(record.data or {}),
        "priority": record.priority.value,
        "created_at": _isoformat(record.created_at),
        "read_at": _isoformat(record.read_at),
        "actionable": record.actionable,
        "action_url": record.action_url,
    }


class ChannelDispatcher:
    """Deliver notifications through every enabled channel.

    Channels run one after another, each bounded by ``timeout_seconds``. A
    channel that raises or times out is logged and skipped; ``dispatch``
    itself never raises.
    """

    def __init__(
        self,
        *,
        store: NotificationStore,
        users: UserDirectory,
        mail: MailTransport,
        push: PushSender,
        sms: SmsSender,
        realtime: RealtimeChannel | None = None,
        timeout_seconds: float = 10.0,
        brand_name: str = "",
        preferences_url: str = "",
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._store = store
        self._users = users
        self._mail = mail
        self._push = push
        self._sms = sms
        self._realtime = realtime
        self._timeout = timeout_seconds
        self._brand_name = brand_name
        self._preferences_url = preferences_url
        self._clock = clock
        self._senders: dict[
            Channel,
            Callable[[NotificationRecord, NotificationTemplate], Awaitable[None]],
        ] = {
            Channel.IN_APP: self._send_in_app,
            Channel.EMAIL: self._send_email,
            Channel.PUSH: self._send_push,
            Channel.SMS: self._send_sms,
        }

    async def dispatch(
        self,
        record: NotificationRecord,
        template: NotificationTemplate,
        preferences: NotificationPreferences,
    ) -> None:
        channels = record.channels or list(template.channels)
        for channel in channels:
            channel = Channel(channel)
            if not getattr(preferences, _CHANNEL_TOGGLES[channel]):
                logger.debug(
                    "Channel %s disabled for user %s; skipping notification %s",
                    channel.value,
                    record.user_id,
                    record.id,
                )
                continue
            try:
                with anyio.fail_after(self._timeout):
                    await self._senders[channel](record, template)
            except ChannelDeliveryFailed as exc:
                logger.warning("Notification %s not delivered: %s", record.id, exc)
            except TimeoutError:
                logger.error(
                    "Timed out after %ss sending notification %s through %s",
                    self._timeout,
                    record.id,
                    channel.value,
                )
            except Exception:
                logger.exception(
                    "Error sending notification %s through %s", record.id, channel.value
                )

    async def _send_in_app(
        self, record: NotificationRecord, template: NotificationTemplate
    ) -> None:
        if self._realtime is not None:
            await self._realtime.emit_to_user(
                record.user_id, REALTIME_EVENT, realtime_payload(record)
            )
        else:
            logger.debug("No realtime channel configured; notification %s stored only", record.id)

        # "Delivered" means the in-app attempt happened, not that a client received it.
        delivered_at = self._clock()
        await self._store.update(record.id, {"delivered_at": delivered_at})
        record.delivered_at = delivered_at

    async def _send_email(
        self, record: NotificationRecord, template: NotificationTemplate
    ) -> None:
        contact = await self._users.find_user(record.user_id)
        if contact is None or not contact.email:
            logger.info("No email address for user %s; skipping email", record.user_id)
            return

        html_content = template.email_body(
            {
                **record.data,
                "userName": contact.first_name,
                "title": record.title,
                "message": record.message,
                "actionUrl": record.action_url,
                "brandName": self._brand_name,
                "preferencesUrl": self._preferences_url,
            }
        )
        await self._mail.send(contact.email, record.title, html_content)

        email_sent_at = self._clock()
        await self._store.update(record.id, {"email_sent_at": email_sent_at})
        record.email_sent_at = email_sent_at

    async def _send_push(
        self, record: NotificationRecord, template: NotificationTemplate
    ) -> None:
        await self._push.send_push(record)

    async def _send_sms(
        self, record: NotificationRecord, template: NotificationTemplate
    ) -> None:
        contact = await self._users.find_user(record.user_id)
        await self._sms.send_sms(record, contact)


__all__ = ["ChannelDispatcher", "REALTIME_EVENT", "realtime_payload"]
