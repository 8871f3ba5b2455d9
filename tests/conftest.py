"""Shared fixtures and in-memory collaborators for the notification tests."""

from __future__ import annotations

import os
from dataclasses import replace
from datetime import datetime, timedelta, timezone

# Keep the module-level engine off the filesystem during tests.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import anyio
import pytest

from resale_notifications.application.notifications import (
    ChannelDispatcher,
    NotificationService,
    PreferenceResolver,
)
from resale_notifications.domain.entities import (
    NotificationPreferences,
    NotificationRecord,
    UserContact,
)
from resale_notifications.domain.exceptions import ChannelDeliveryFailed


class FakeClock:
    """Controllable clock returning aware UTC datetimes."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> None:
        self.current += timedelta(**delta)


class InMemoryNotificationStore:
    def __init__(self) -> None:
        self.records: dict[str, NotificationRecord] = {}
        self._sequence = 0

    async def create(self, record: NotificationRecord) -> NotificationRecord:
        self._sequence += 1
        saved = replace(record, id=record.id or f"n{self._sequence}")
        self.records[saved.id] = saved
        return replace(saved)

    async def update(self, notification_id, fields):
        record = self.records[notification_id]
        for name, value in fields.items():
            setattr(record, name, value)
        return replace(record)

    async def mark_read(self, user_id, *, read_at, notification_id=None) -> int:
        updated = 0
        for record in self.records.values():
            if record.user_id != user_id or record.read_at is not None:
                continue
            if notification_id is not None and record.id != notification_id:
                continue
            record.read_at = read_at
            updated += 1
        return updated

    async def count_unread(self, user_id: str) -> int:
        return sum(
            1 for r in self.records.values() if r.user_id == user_id and r.read_at is None
        )

    async def list_for_user(self, user_id, *, unread_only=False, limit=50):
        records = [
            replace(r)
            for r in self.records.values()
            if r.user_id == user_id and (not unread_only or r.read_at is None)
        ]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit] if limit is not None else records

    async def list_due(self, now, *, limit):
        due = [
            replace(r)
            for r in self.records.values()
            if r.dispatched_at is None
            and r.schedule_for is not None
            and r.schedule_for <= now
            and (r.expires_at is None or r.expires_at > now)
        ]
        due.sort(key=lambda r: r.schedule_for)
        # Yield like a real store so overlapping passes can interleave.
        await anyio.sleep(0)
        return due[:limit]

    async def claim_for_dispatch(self, notification_id, *, dispatched_at) -> bool:
        record = self.records[notification_id]
        if record.dispatched_at is not None:
            return False
        record.dispatched_at = dispatched_at
        return True


class InMemoryPreferenceStore:
    def __init__(self, *, failing_users: set[str] | None = None) -> None:
        self.saved: dict[str, NotificationPreferences] = {}
        self.failing_users = failing_users or set()
        self.save_calls = 0

    async def find_preferences(self, user_id: str):
        if user_id in self.failing_users:
            raise ConnectionError("preference store unavailable")
        return self.saved.get(user_id)

    async def save_preferences(self, preferences):
        self.save_calls += 1
        self.saved[preferences.user_id] = preferences
        return preferences


class InMemoryUserDirectory:
    def __init__(self, *contacts: UserContact) -> None:
        self.contacts = {contact.id: contact for contact in contacts}

    async def find_user(self, user_id: str):
        return self.contacts.get(user_id)


class RecordingMailTransport:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, to: str, subject: str, html: str) -> None:
        self.sent.append((to, subject, html))


class FailingMailTransport:
    def __init__(self) -> None:
        self.attempts = 0

    async def send(self, to: str, subject: str, html: str) -> None:
        self.attempts += 1
        raise ChannelDeliveryFailed("EMAIL", "mail server down")


class RecordingRealtimeChannel:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict]] = []

    async def emit_to_user(self, user_id, event_name, payload) -> None:
        self.events.append((user_id, event_name, dict(payload)))


class RecordingPushSender:
    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send_push(self, record: NotificationRecord) -> None:
        self.sent.append(record.id)


class RecordingSmsSender:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str | None]] = []

    async def send_sms(self, record, contact) -> None:
        self.sent.append((record.id, contact.phone_number if contact else None))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


@pytest.fixture
def preference_store() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@pytest.fixture
def users() -> InMemoryUserDirectory:
    return InMemoryUserDirectory(
        UserContact(id="u1", email="buyer@example.com", first_name="Ada", phone_number="+15550001"),
        UserContact(id="u2", email="seller@example.com", first_name="Linus"),
    )


@pytest.fixture
def mail() -> RecordingMailTransport:
    return RecordingMailTransport()


@pytest.fixture
def realtime() -> RecordingRealtimeChannel:
    return RecordingRealtimeChannel()


@pytest.fixture
def push() -> RecordingPushSender:
    return RecordingPushSender()


@pytest.fixture
def sms() -> RecordingSmsSender:
    return RecordingSmsSender()


@pytest.fixture
def make_dispatcher(store, users, push, sms, realtime, clock):
    def factory(*, mail, realtime=realtime, timeout_seconds: float = 1.0) -> ChannelDispatcher:
        return ChannelDispatcher(
            store=store,
            users=users,
            mail=mail,
            push=push,
            sms=sms,
            realtime=realtime,
            timeout_seconds=timeout_seconds,
            brand_name="SneatSnags",
            preferences_url="http://localhost:5173/settings/notifications",
            clock=clock,
        )

    return factory


@pytest.fixture
def dispatcher(make_dispatcher, mail) -> ChannelDispatcher:
    return make_dispatcher(mail=mail)


@pytest.fixture
def service(store, preference_store, dispatcher, clock) -> NotificationService:
    return NotificationService(
        store=store,
        preferences=PreferenceResolver(preference_store),
        dispatcher=dispatcher,
        clock=clock,
    )
