"""Tests for the notification template registry."""

from __future__ import annotations

import pytest

from resale_notifications.application.notifications import (
    DEFAULT_TEMPLATE_REGISTRY,
    TemplateRegistry,
)
from resale_notifications.domain.entities import Channel, NotificationType, Priority
from resale_notifications.domain.exceptions import UnknownNotificationType


def test_every_notification_type_has_a_template() -> None:
    assert DEFAULT_TEMPLATE_REGISTRY.types == frozenset(NotificationType)
    assert len(DEFAULT_TEMPLATE_REGISTRY) == len(NotificationType)


@pytest.mark.parametrize("notification_type", list(NotificationType))
def test_templates_render_with_empty_payload(notification_type: NotificationType) -> None:
    """Missing payload fields render as blanks instead of raising."""

    template = DEFAULT_TEMPLATE_REGISTRY.resolve(notification_type)

    assert template.type is notification_type
    assert template.channels
    assert isinstance(template.title({}), str)
    assert isinstance(template.message({}), str)
    assert "<div" in template.email_body({})


def test_offer_accepted_interpolates_payload() -> None:
    template = DEFAULT_TEMPLATE_REGISTRY.resolve("OFFER_ACCEPTED")

    message = template.message({"amount": 150, "eventName": "Taylor Swift"})

    assert template.title({}) == "Your offer has been accepted!"
    assert "$150" in message
    assert "Taylor Swift" in message
    assert template.priority is Priority.HIGH


def test_none_values_render_as_empty_strings() -> None:
    template = DEFAULT_TEMPLATE_REGISTRY.resolve(NotificationType.OFFER_ACCEPTED)

    message = template.message({"amount": None, "eventName": None})

    assert "None" not in message
    assert "offer of $ for  has been accepted" in message


def test_email_body_escapes_payload_and_includes_action() -> None:
    template = DEFAULT_TEMPLATE_REGISTRY.resolve(NotificationType.AUTOMATCH_FOUND)

    body = template.email_body(
        {
            "brandName": "SneatSnags",
            "userName": "Ada",
            "title": "Match",
            "message": "Found <b>3</b>",
            "eventName": "<script>alert(1)</script>",
            "price": 80,
            "section": "A12",
            "confidence": "92%",
            "actionUrl": "https://example.com/match/1",
            "preferencesUrl": "https://example.com/settings/notifications",
        }
    )

    assert "<script>" not in body
    assert "&lt;script&gt;" in body
    assert "Found &lt;b&gt;3&lt;/b&gt;" in body
    assert "Hi Ada," in body
    assert "https://example.com/match/1" in body
    assert "Match Details" in body
    assert "$80" in body


def test_email_body_without_user_name_uses_generic_greeting() -> None:
    template = DEFAULT_TEMPLATE_REGISTRY.resolve(NotificationType.WEEKLY_REPORT)

    body = template.email_body({"salesCount": 4})

    assert "Hi there," in body
    assert "Weekly Summary" in body
    assert "View Details" not in body


def test_system_alert_title_falls_back_when_subject_missing() -> None:
    template = DEFAULT_TEMPLATE_REGISTRY.resolve(NotificationType.SYSTEM_ALERT)

    assert template.title({}) == "System notice"
    assert template.title({"subject": "Maintenance tonight"}) == "Maintenance tonight"
    assert template.message({"details": "Back at 02:00"}) == "Back at 02:00"


def test_template_defaults() -> None:
    security = DEFAULT_TEMPLATE_REGISTRY.resolve(NotificationType.SECURITY_ALERT)
    weekly = DEFAULT_TEMPLATE_REGISTRY.resolve(NotificationType.WEEKLY_REPORT)

    assert security.priority is Priority.URGENT
    assert Channel.SMS in security.channels
    assert weekly.channels == (Channel.EMAIL,)
    assert DEFAULT_TEMPLATE_REGISTRY.resolve(NotificationType.PAYMENT_FAILED).priority is Priority.URGENT


@pytest.mark.parametrize("value", ["NOT_A_TYPE", "offer_accepted", ""])
def test_unknown_type_raises(value: str) -> None:
    with pytest.raises(UnknownNotificationType) as excinfo:
        DEFAULT_TEMPLATE_REGISTRY.resolve(value)

    assert excinfo.value.notification_type == value


def test_registry_without_type_raises_unknown() -> None:
    registry = TemplateRegistry(
        {
            NotificationType.PROMOTION: DEFAULT_TEMPLATE_REGISTRY.resolve(
                NotificationType.PROMOTION
            )
        }
    )

    assert NotificationType.PROMOTION in registry
    with pytest.raises(UnknownNotificationType):
        registry.resolve(NotificationType.OFFER_ACCEPTED)


@pytest.mark.parametrize(
    ("notification_type", "payload", "expected"),
    [
        (
            NotificationType.OFFER_ACCEPTED,
            {"amount": 150, "eventName": "Coldplay"},
            "Your offer of $150 for Coldplay has been accepted.",
        ),
        (
            NotificationType.OFFER_COUNTER,
            {"counterAmount": 120, "eventName": "Coldplay", "originalAmount": 100},
            "counter offer of $120 for Coldplay (your original offer: $100)",
        ),
        (
            NotificationType.PRICE_ALERT,
            {"eventName": "Adele", "newPrice": 80, "oldPrice": 95, "availableCount": 6},
            "Tickets for Adele dropped to $80 (was $95). 6 tickets available.",
        ),
        (
            NotificationType.EVENT_REMINDER,
            {"eventName": "Adele", "daysUntil": 3},
            "Adele is 3 days away!",
        ),
        (
            NotificationType.WEEKLY_REPORT,
            {"salesCount": 4, "revenue": 600, "viewCount": 90},
            "This week: 4 sales, $600 earned, 90 listing views.",
        ),
        (
            NotificationType.INVENTORY_LOW,
            {"eventName": "Adele", "sectionName": "Floor A", "currentQuantity": 2, "threshold": 5},
            "Adele - Floor A has only 2 tickets remaining (threshold: 5)",
        ),
    ],
)
def test_messages_use_documented_payload_keys(notification_type, payload, expected) -> None:
    message = DEFAULT_TEMPLATE_REGISTRY.resolve(notification_type).message(payload)

    assert expected in message
