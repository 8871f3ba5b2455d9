"""Tests for the SQLAlchemy repositories and the async store adapters."""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import anyio
import pytest

from resale_notifications.domain.entities import (
    Channel,
    NotificationPreferences,
    NotificationRecord,
    NotificationType,
    Priority,
    UserContact,
)
from resale_notifications.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from resale_notifications.infrastructure.repositories import (
    NotificationPreferenceRepository,
    NotificationRepository,
    UserRepository,
)
from resale_notifications.infrastructure.stores import (
    SqlAlchemyNotificationStore,
    SqlAlchemyPreferenceStore,
    SqlAlchemyUserDirectory,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    initialize_database(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def session(session_factory):
    with session_factory() as db:
        yield db


def _record(user_id: str = "u1", **overrides) -> NotificationRecord:
    values = dict(
        id=None,
        user_id=user_id,
        type=NotificationType.TICKET_SOLD,
        title="Tickets sold!",
        message="2 tickets for Coldplay sold for $300.",
        data={"quantity": 2, "eventName": "Coldplay"},
        priority=Priority.HIGH,
        channels=[Channel.IN_APP, Channel.EMAIL],
        created_at=NOW,
    )
    values.update(overrides)
    return NotificationRecord(**values)


def test_create_assigns_id_and_round_trips(session) -> None:
    repository = NotificationRepository(session)

    saved = repository.create(_record(dispatched_at=NOW))

    assert saved.id
    fetched = repository.get(saved.id)
    assert fetched == saved
    assert fetched.type is NotificationType.TICKET_SOLD
    assert fetched.priority is Priority.HIGH
    assert fetched.channels == [Channel.IN_APP, Channel.EMAIL]
    assert fetched.data == {"quantity": 2, "eventName": "Coldplay"}
    assert fetched.created_at == NOW
    assert fetched.dispatched_at == NOW


def test_update_only_accepts_timestamps(session) -> None:
    repository = NotificationRepository(session)
    saved = repository.create(_record())

    updated = repository.update(saved.id, {"delivered_at": NOW + timedelta(seconds=5)})

    assert updated.delivered_at == NOW + timedelta(seconds=5)
    with pytest.raises(ValueError):
        repository.update(saved.id, {"title": "changed"})
    with pytest.raises(ValueError):
        repository.update("missing", {"delivered_at": NOW})


def test_mark_read_keeps_first_timestamp(session) -> None:
    repository = NotificationRepository(session)
    saved = repository.create(_record())

    assert repository.mark_read("u1", read_at=NOW, notification_id=saved.id) == 1
    assert repository.mark_read("u1", read_at=NOW + timedelta(hours=1), notification_id=saved.id) == 0
    assert repository.mark_read("u2", read_at=NOW, notification_id=saved.id) == 0
    assert repository.get(saved.id).read_at == NOW


def test_mark_all_read_and_count(session) -> None:
    repository = NotificationRepository(session)
    for offset in range(3):
        repository.create(_record(created_at=NOW + timedelta(minutes=offset)))
    repository.create(_record(user_id="u2"))

    assert repository.count_unread("u1") == 3
    assert repository.mark_read("u1", read_at=NOW) == 3
    assert repository.count_unread("u1") == 0
    assert repository.count_unread("u2") == 1


def test_list_for_user_orders_newest_first(session) -> None:
    repository = NotificationRepository(session)
    older = repository.create(_record(created_at=NOW))
    newer = repository.create(_record(created_at=NOW + timedelta(minutes=1)))
    repository.mark_read("u1", read_at=NOW, notification_id=older.id)

    assert [r.id for r in repository.list_for_user("u1")] == [newer.id, older.id]
    assert [r.id for r in repository.list_for_user("u1", unread_only=True)] == [newer.id]
    assert len(repository.list_for_user("u1", limit=1)) == 1


def test_list_due(session) -> None:
    repository = NotificationRepository(session)
    due = repository.create(_record(schedule_for=NOW - timedelta(minutes=5)))
    repository.create(_record(schedule_for=NOW + timedelta(hours=1)))
    repository.create(_record(schedule_for=NOW - timedelta(minutes=5), dispatched_at=NOW))
    repository.create(
        _record(schedule_for=NOW - timedelta(minutes=5), expires_at=NOW - timedelta(minutes=1))
    )
    repository.create(_record(dispatched_at=NOW))

    assert [r.id for r in repository.list_due(NOW)] == [due.id]


def test_claim_for_dispatch_succeeds_once(session) -> None:
    repository = NotificationRepository(session)
    record = repository.create(_record(schedule_for=NOW - timedelta(minutes=5)))

    assert repository.claim_for_dispatch(record.id, dispatched_at=NOW) is True
    assert repository.claim_for_dispatch(record.id, dispatched_at=NOW + timedelta(minutes=1)) is False
    assert repository.get(record.id).dispatched_at == NOW
    assert repository.list_due(NOW) == []


def test_preferences_upsert(session) -> None:
    repository = NotificationPreferenceRepository(session)

    assert repository.get("u1") is None
    repository.save(NotificationPreferences(user_id="u1", quiet_hours_start="22:00", quiet_hours_end="06:00"))
    saved = repository.save(
        NotificationPreferences(user_id="u1", sms_enabled=True, timezone="Europe/Madrid")
    )

    assert saved.sms_enabled is True
    assert saved.quiet_hours_start is None
    assert repository.get("u1") == saved


def test_user_contacts(session) -> None:
    repository = UserRepository(session)
    contact = UserContact(id="u1", email="buyer@example.com", first_name="Ada")

    assert repository.create(contact) == contact
    assert repository.get("u1") == contact
    assert repository.get("u2") is None


@pytest.mark.anyio
async def test_async_stores_use_their_own_sessions(session_factory) -> None:
    notifications = SqlAlchemyNotificationStore(session_factory)
    preferences = SqlAlchemyPreferenceStore(session_factory)
    users = SqlAlchemyUserDirectory(session_factory)

    saved = await notifications.create(_record(schedule_for=NOW - timedelta(minutes=1)))
    await notifications.update(saved.id, {"dispatched_at": NOW})
    await preferences.save_preferences(NotificationPreferences(user_id="u1", sms_enabled=True))

    assert [r.id for r in await notifications.list_for_user("u1")] == [saved.id]
    assert await notifications.list_due(NOW, limit=10) == []
    assert await notifications.count_unread("u1") == 1
    assert await notifications.mark_read("u1", read_at=NOW, notification_id=saved.id) == 1
    assert await notifications.count_unread("u1") == 0
    assert (await preferences.find_preferences("u1")).sms_enabled is True
    assert await preferences.find_preferences("u2") is None
    assert await users.find_user("u1") is None


@pytest.mark.anyio
async def test_async_store_propagates_errors(session_factory) -> None:
    notifications = SqlAlchemyNotificationStore(session_factory)

    with pytest.raises(ValueError):
        await notifications.update("missing", {"delivered_at": NOW})


@pytest.mark.anyio
async def test_async_store_claims_deferred_record_once(session_factory) -> None:
    notifications = SqlAlchemyNotificationStore(session_factory)
    saved = await notifications.create(_record(schedule_for=NOW - timedelta(minutes=1)))

    assert await notifications.claim_for_dispatch(saved.id, dispatched_at=NOW) is True
    assert await notifications.claim_for_dispatch(saved.id, dispatched_at=NOW) is False


@pytest.mark.anyio
async def test_cancelled_caller_does_not_wait_for_blocked_session(session_factory) -> None:
    notifications = SqlAlchemyNotificationStore(session_factory)
    started = time.monotonic()

    with pytest.raises(TimeoutError):
        with anyio.fail_after(0.1):
            await notifications._run(lambda session: time.sleep(1.5))

    assert time.monotonic() - started < 1.0
