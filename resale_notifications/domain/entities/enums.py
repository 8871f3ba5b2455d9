"""Closed vocabularies shared by notification entities."""

from __future__ import annotations

from enum import Enum


class NotificationType(str, Enum):
    """Business events that can produce a notification."""

    OFFER_ACCEPTED = "OFFER_ACCEPTED"
    OFFER_REJECTED = "OFFER_REJECTED"
    OFFER_EXPIRED = "OFFER_EXPIRED"
    OFFER_COUNTER = "OFFER_COUNTER"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    TICKET_DELIVERED = "TICKET_DELIVERED"
    TICKET_SOLD = "TICKET_SOLD"
    LISTING_EXPIRED = "LISTING_EXPIRED"
    LISTING_FEATURED = "LISTING_FEATURED"
    AUTOMATCH_FOUND = "AUTOMATCH_FOUND"
    PRICE_ALERT = "PRICE_ALERT"
    EVENT_REMINDER = "EVENT_REMINDER"
    SYSTEM_ALERT = "SYSTEM_ALERT"
    INVENTORY_LOW = "INVENTORY_LOW"
    INVENTORY_OUT_OF_STOCK = "INVENTORY_OUT_OF_STOCK"
    ACCOUNT_VERIFIED = "ACCOUNT_VERIFIED"
    SECURITY_ALERT = "SECURITY_ALERT"
    PROMOTION = "PROMOTION"
    WEEKLY_REPORT = "WEEKLY_REPORT"
    MONTHLY_REPORT = "MONTHLY_REPORT"


class Channel(str, Enum):
    """Delivery channels a notification can be fanned out to."""

    IN_APP = "IN_APP"
    EMAIL = "EMAIL"
    SMS = "SMS"
    PUSH = "PUSH"


class Priority(str, Enum):
    """Notification urgency, ordered ``LOW < MEDIUM < HIGH < URGENT``."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self.value]

    # ``str`` would otherwise compare alphabetically.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_RANK = {"LOW": 0, "MEDIUM": 1, "HIGH": 2, "URGENT": 3}


__all__ = ["Channel", "NotificationType", "Priority"]
