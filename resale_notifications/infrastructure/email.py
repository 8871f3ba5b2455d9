"""Notification email delivery via SendGrid."""

from __future__ import annotations

import json
import logging
from typing import Any

from anyio import to_thread
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from resale_notifications.config import get_settings
from resale_notifications.domain.exceptions import ChannelDeliveryFailed

logger = logging.getLogger(__name__)


def _error_summary(body: Any) -> str | None:
    """Collapse a SendGrid error body into a single log line."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body

    if isinstance(body, dict):
        messages = [
            str(error["message"])
            for error in body.get("errors") or []
            if isinstance(error, dict) and error.get("message")
        ]
        return "; ".join(messages) or json.dumps(body, default=str)
    if isinstance(body, list):
        return "; ".join(str(item) for item in body) or None
    return None


def _log_rejected(status_code: Any, body: Any) -> None:
    summary = _error_summary(body)
    if summary:
        logger.error("SendGrid rejected notification email with status %s: %s", status_code, summary)
    else:
        logger.error("SendGrid rejected notification email with status %s", status_code)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Hand one rendered notification to SendGrid.

    Returns ``True`` only when SendGrid answered 2xx. Missing credentials,
    transport errors and rejections are logged and reported as ``False``.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid is not configured; notification email not sent")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        # python-http-client hands this timeout to every urlopen call.
        client.client.timeout = settings.sendgrid_timeout_seconds
        response = client.send(message)
    except Exception as exc:
        status_code = getattr(exc, "status_code", None)
        if status_code is None:
            logger.exception("Could not reach SendGrid for notification email")
        else:
            _log_rejected(status_code, getattr(exc, "body", None))
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_rejected(status_code, getattr(response, "body", None))
        return False

    return True


class SendGridMailTransport:
    """Mail transport for the email channel.

    The blocking SendGrid client runs in a worker thread that is abandoned
    when the caller is cancelled (e.g. by a channel timeout). A message that was
    not accepted raises :class:`ChannelDeliveryFailed` so the dispatcher does
    not record it as sent.
    """

    async def send(self, to: str, subject: str, html: str) -> None:
        accepted = await to_thread.run_sync(
            send_email, subject, html, to, abandon_on_cancel=True
        )
        if not accepted:
            raise ChannelDeliveryFailed("EMAIL", f"SendGrid did not accept the message to {to}")


__all__ = ["SendGridMailTransport", "send_email"]
