"""Message templates for every notification type.

Each template renders the in-app title and message plus the HTML email body
from the request payload, whose keys are camelCase (``eventName``,
``counterAmount``, ...). Renderers are pure: a missing or ``None`` payload
field renders as an empty string instead of raising.
"""

from __future__ import annotations

import html
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from resale_notifications.domain.entities import Channel, NotificationType, Priority
from resale_notifications.domain.exceptions import UnknownNotificationType

Renderer = Callable[[Mapping[str, Any]], str]


@dataclass(frozen=True)
class NotificationTemplate:
    """Rendering rules and delivery defaults for one notification type."""

    type: NotificationType
    title: Renderer
    message: Renderer
    email_body: Renderer
    priority: Priority
    channels: tuple[Channel, ...]


class _PayloadView(dict):
    """Mapping used by ``str.format_map`` that blanks missing values."""

    def __init__(self, data: Mapping[str, Any], *, escape: bool = False) -> None:
        super().__init__(data)
        self._escape = escape

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            return ""
        text = str(value)
        return html.escape(text) if self._escape else text


def _text(pattern: str) -> Renderer:
    def render(data: Mapping[str, Any]) -> str:
        return pattern.format_map(_PayloadView(data))

    return render


def _field_or(key: str, fallback: str) -> Renderer:
    def render(data: Mapping[str, Any]) -> str:
        value = data.get(key)
        return str(value) if value not in (None, "") else fallback

    return render


_EMAIL_LAYOUT = """
<div style="max-width: 600px; margin: 0 auto; font-family: Arial, sans-serif; padding: 20px;">
  <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; border-radius: 8px 8px 0 0;">
    <h1 style="margin: 0; font-size: 24px;">{brandName}</h1>
    <p style="margin: 10px 0 0 0; opacity: 0.9;">Your ticket marketplace</p>
  </div>
  <div style="background: white; padding: 30px; border-radius: 0 0 8px 8px; border: 1px solid #e0e0e0;">
    <p style="color: #333;">Hi {userName},</p>
    <h2 style="color: #333; margin-top: 0;">{title}</h2>
    <p style="color: #666; line-height: 1.6; font-size: 16px;">{message}</p>
    {action}
    {section}
    <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #eee; font-size: 12px; color: #999;">
      <p>This is an automated message from {brandName}.
        <a href="{preferencesUrl}">Manage your notification preferences</a>
      </p>
    </div>
  </div>
</div>
"""

_ACTION_BUTTON = """
    <div style="margin: 30px 0;">
      <a href="{actionUrl}" style="background: #667eea; color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px; font-weight: bold;">View Details</a>
    </div>
"""

_AUTOMATCH_SECTION = """
    <div style="background: #f8f9fa; padding: 20px; border-radius: 6px; margin: 20px 0;">
      <h3 style="margin-top: 0; color: #28a745;">Match Details</h3>
      <ul style="margin: 0; padding-left: 20px;">
        <li>Event: {eventName}</li>
        <li>Price: ${price}</li>
        <li>Section: {section}</li>
        <li>Confidence: {confidence}</li>
      </ul>
    </div>
"""

_REPORT_SECTION = """
    <div style="background: #f8f9fa; padding: 20px; border-radius: 6px; margin: 20px 0;">
      <h3 style="margin-top: 0; color: #007bff;">{heading}</h3>
      <div style="margin: 10px 0;"><span>Sales:</span> <strong>{salesCount}</strong></div>
      <div style="margin: 10px 0;"><span>Revenue:</span> <strong>${revenue}</strong></div>
      <div style="margin: 10px 0;"><span>Views:</span> <strong>{viewCount}</strong></div>
    </div>
"""


def _section(pattern: str, **fixed: str) -> Renderer:
    def render(data: Mapping[str, Any]) -> str:
        view = _PayloadView({**data, **fixed}, escape=True)
        return pattern.format_map(view)

    return render


def _email(section: Renderer | None = None) -> Renderer:
    """Wrap the shared email layout around an optional type-specific block."""

    def render(data: Mapping[str, Any]) -> str:
        view = _PayloadView(data, escape=True)
        action = ""
        if data.get("actionUrl"):
            action = _ACTION_BUTTON.format(actionUrl=view["actionUrl"])
        return _EMAIL_LAYOUT.format(
            brandName=view["brandName"],
            userName=view["userName"] or "there",
            title=view["title"],
            message=view["message"],
            action=action,
            section=section(data) if section is not None else "",
            preferencesUrl=view["preferencesUrl"],
        )

    return render


def _template(
    notification_type: NotificationType,
    *,
    title: str | Renderer,
    message: str | Renderer,
    priority: Priority,
    channels: Iterable[Channel],
    section: Renderer | None = None,
) -> NotificationTemplate:
    return NotificationTemplate(
        type=notification_type,
        title=_text(title) if isinstance(title, str) else title,
        message=_text(message) if isinstance(message, str) else message,
        email_body=_email(section),
        priority=priority,
        channels=tuple(channels),
    )


_ALL_CHANNELS_BUT_SMS = (Channel.IN_APP, Channel.EMAIL, Channel.PUSH)
_IN_APP_AND_EMAIL = (Channel.IN_APP, Channel.EMAIL)

_TEMPLATES: tuple[NotificationTemplate, ...] = (
    # Offers
    _template(
        NotificationType.OFFER_ACCEPTED,
        title="Your offer has been accepted!",
        message=(
            "Great news! Your offer of ${amount} for {eventName} has been accepted. "
            "Payment will be processed shortly."
        ),
        priority=Priority.HIGH,
        channels=_ALL_CHANNELS_BUT_SMS,
    ),
    _template(
        NotificationType.OFFER_REJECTED,
        title="Offer not accepted",
        message=(
            "Your offer of ${amount} for {eventName} was not accepted. "
            "You can make a new offer or browse other listings."
        ),
        priority=Priority.MEDIUM,
        channels=_IN_APP_AND_EMAIL,
    ),
    _template(
        NotificationType.OFFER_EXPIRED,
        title="Your offer has expired",
        message=(
            "Your offer for {eventName} at {venue} has expired. "
            "You can create a new offer if tickets are still available."
        ),
        priority=Priority.LOW,
        channels=(Channel.IN_APP,),
    ),
    _template(
        NotificationType.OFFER_COUNTER,
        title="Counter offer received",
        message=(
            "The seller has made a counter offer of ${counterAmount} for {eventName} "
            "(your original offer: ${originalAmount})."
        ),
        priority=Priority.HIGH,
        channels=_ALL_CHANNELS_BUT_SMS,
    ),
    # Payments and fulfilment
    _template(
        NotificationType.PAYMENT_RECEIVED,
        title="Payment received!",
        message=(
            "You've received ${amount} for your {eventName} tickets. "
            "Funds will be transferred to your account."
        ),
        priority=Priority.HIGH,
        channels=_IN_APP_AND_EMAIL,
    ),
    _template(
        NotificationType.PAYMENT_FAILED,
        title="Payment failed",
        message=(
            "Your payment of ${amount} for {eventName} could not be processed. "
            "Please update your payment method."
        ),
        priority=Priority.URGENT,
        channels=_ALL_CHANNELS_BUT_SMS,
    ),
    _template(
        NotificationType.TICKET_DELIVERED,
        title="Your tickets have been delivered!",
        message=(
            "Your tickets for {eventName} at {venue} have been delivered. "
            "Check your email for ticket details."
        ),
        priority=Priority.HIGH,
        channels=_IN_APP_AND_EMAIL,
    ),
    _template(
        NotificationType.TICKET_SOLD,
        title="Tickets sold!",
        message=(
            "{quantity} tickets for {eventName} sold for ${amount}. "
            "You'll be notified once the payment clears."
        ),
        priority=Priority.HIGH,
        channels=_ALL_CHANNELS_BUT_SMS,
    ),
    # Listings and inventory
    _template(
        NotificationType.LISTING_EXPIRED,
        title="Listing expired",
        message=(
            "Your listing for {eventName} - {sectionName} has expired. "
            "Relist the tickets to keep selling."
        ),
        priority=Priority.MEDIUM,
        channels=_IN_APP_AND_EMAIL,
    ),
    _template(
        NotificationType.LISTING_FEATURED,
        title="Your listing is featured",
        message="Your listing for {eventName} - {sectionName} is now featured on the marketplace.",
        priority=Priority.LOW,
        channels=(Channel.IN_APP,),
    ),
    _template(
        NotificationType.INVENTORY_LOW,
        title="Low Inventory Alert",
        message=(
            "Your listing for {eventName} - {sectionName} has only {currentQuantity} "
            "tickets remaining (threshold: {threshold})."
        ),
        priority=Priority.HIGH,
        channels=_IN_APP_AND_EMAIL,
    ),
    _template(
        NotificationType.INVENTORY_OUT_OF_STOCK,
        title="Out of Stock Alert",
        message=(
            "Your listing for {eventName} - {sectionName} is now out of stock. "
            "Consider creating a new listing if you have more tickets."
        ),
        priority=Priority.HIGH,
        channels=_IN_APP_AND_EMAIL,
    ),
    # Discovery
    _template(
        NotificationType.AUTOMATCH_FOUND,
        title="Perfect ticket match found!",
        message=(
            "AutoMatch found {matchCount} tickets matching your criteria for "
            "{eventName}. Confidence: {confidence}"
        ),
        priority=Priority.HIGH,
        channels=_ALL_CHANNELS_BUT_SMS,
        section=_section(_AUTOMATCH_SECTION),
    ),
    _template(
        NotificationType.PRICE_ALERT,
        title="Price drop alert!",
        message=(
            "Tickets for {eventName} dropped to ${newPrice} (was ${oldPrice}). "
            "{availableCount} tickets available."
        ),
        priority=Priority.HIGH,
        channels=_ALL_CHANNELS_BUT_SMS,
    ),
    _template(
        NotificationType.EVENT_REMINDER,
        title="Event reminder",
        message="{eventName} is {daysUntil} days away! Don't forget to bring your tickets.",
        priority=Priority.MEDIUM,
        channels=_ALL_CHANNELS_BUT_SMS,
    ),
    # Account and platform
    _template(
        NotificationType.SYSTEM_ALERT,
        title=_field_or("subject", "System notice"),
        message="{details}",
        priority=Priority.MEDIUM,
        channels=(Channel.IN_APP,),
    ),
    _template(
        NotificationType.ACCOUNT_VERIFIED,
        title="Account verified",
        message="Your account has been verified. You can now list tickets and receive payouts.",
        priority=Priority.MEDIUM,
        channels=_IN_APP_AND_EMAIL,
    ),
    _template(
        NotificationType.SECURITY_ALERT,
        title="Security alert",
        message=(
            "{action} detected on your account from {location}. "
            "If this wasn't you, please contact support immediately."
        ),
        priority=Priority.URGENT,
        channels=(Channel.IN_APP, Channel.EMAIL, Channel.SMS),
    ),
    _template(
        NotificationType.PROMOTION,
        title=_field_or("headline", "A special offer for you"),
        message="{details}",
        priority=Priority.LOW,
        channels=_IN_APP_AND_EMAIL,
    ),
    # Reports
    _template(
        NotificationType.WEEKLY_REPORT,
        title="Your weekly report",
        message="This week: {salesCount} sales, ${revenue} earned, {viewCount} listing views.",
        priority=Priority.LOW,
        channels=(Channel.EMAIL,),
        section=_section(_REPORT_SECTION, heading="Weekly Summary"),
    ),
    _template(
        NotificationType.MONTHLY_REPORT,
        title="Your monthly report",
        message="This month: {salesCount} sales, ${revenue} earned, {viewCount} listing views.",
        priority=Priority.LOW,
        channels=(Channel.EMAIL,),
        section=_section(_REPORT_SECTION, heading="Monthly Summary"),
    ),
)


class TemplateRegistry:
    """Immutable lookup table from notification type to template."""

    def __init__(
        self, templates: Mapping[NotificationType, NotificationTemplate]
    ) -> None:
        self._templates = MappingProxyType(dict(templates))

    def resolve(self, notification_type: NotificationType | str) -> NotificationTemplate:
        """Return the template for ``notification_type``.

        Raises :class:`UnknownNotificationType` for values outside the
        :class:`NotificationType` vocabulary or without a registered template.
        """

        try:
            key = NotificationType(notification_type)
        except ValueError:
            raise UnknownNotificationType(notification_type) from None
        template = self._templates.get(key)
        if template is None:
            raise UnknownNotificationType(key.value)
        return template

    def __contains__(self, notification_type: object) -> bool:
        return notification_type in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    @property
    def types(self) -> frozenset[NotificationType]:
        return frozenset(self._templates)


def _build_default_registry() -> TemplateRegistry:
    templates = {template.type: template for template in _TEMPLATES}
    missing = set(NotificationType) - templates.keys()
    if missing:
        names = ", ".join(sorted(member.value for member in missing))
        raise RuntimeError(f"Notification types without a template: {names}")
    return TemplateRegistry(templates)


DEFAULT_TEMPLATE_REGISTRY = _build_default_registry()


__all__ = [
    "DEFAULT_TEMPLATE_REGISTRY",
    "NotificationTemplate",
    "Renderer",
    "TemplateRegistry",
]
