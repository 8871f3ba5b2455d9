"""Async adapters exposing the SQLAlchemy repositories as service ports.

Repository calls block, so each runs in a worker thread with its own
session. Concurrent notification pipelines therefore never share a
``Session``. A cancelled caller stops waiting at once; the abandoned
thread still finishes (and closes) its own session.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from functools import partial
from typing import Any, TypeVar

from anyio import to_thread
from sqlalchemy.orm import Session, sessionmaker

from resale_notifications.domain.entities import (
    NotificationPreferences,
    NotificationRecord,
    UserContact,
)

from .repositories import (
    NotificationPreferenceRepository,
    NotificationRepository,
    UserRepository,
)

T = TypeVar("T")


class _SessionScoped:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def _run(self, operation: Callable[[Session], T]) -> T:
        return await to_thread.run_sync(
            partial(self._in_session, operation), abandon_on_cancel=True
        )

    def _in_session(self, operation: Callable[[Session], T]) -> T:
        with self._session_factory() as session:
            try:
                return operation(session)
            except Exception:
                session.rollback()
                raise


class SqlAlchemyNotificationStore(_SessionScoped):
    """:class:`NotificationStore` backed by :class:`NotificationRepository`."""

    async def create(self, record: NotificationRecord) -> NotificationRecord:
        return await self._run(lambda session: NotificationRepository(session).create(record))

    async def update(
        self, notification_id: str, fields: Mapping[str, Any]
    ) -> NotificationRecord:
        return await self._run(
            lambda session: NotificationRepository(session).update(notification_id, fields)
        )

    async def mark_read(
        self,
        user_id: str,
        *,
        read_at: datetime,
        notification_id: str | None = None,
    ) -> int:
        return await self._run(
            lambda session: NotificationRepository(session).mark_read(
                user_id, read_at=read_at, notification_id=notification_id
            )
        )

    async def count_unread(self, user_id: str) -> int:
        return await self._run(lambda session: NotificationRepository(session).count_unread(user_id))

    async def list_for_user(
        self, user_id: str, *, unread_only: bool = False, limit: int | None = 50
    ) -> Sequence[NotificationRecord]:
        return await self._run(
            lambda session: NotificationRepository(session).list_for_user(
                user_id, unread_only=unread_only, limit=limit
            )
        )

    async def list_due(self, now: datetime, *, limit: int) -> Sequence[NotificationRecord]:
        return await self._run(
            lambda session: NotificationRepository(session).list_due(now, limit=limit)
        )


    async def claim_for_dispatch(
        self, notification_id: str, *, dispatched_at: datetime
    ) -> bool:
        return await self._run(
            lambda session: NotificationRepository(session).claim_for_dispatch(
                notification_id, dispatched_at=dispatched_at
            )
        )


class SqlAlchemyPreferenceStore(_SessionScoped):
    """:class:`PreferenceStore` backed by :class:`NotificationPreferenceRepository`."""

    async def find_preferences(self, user_id: str) -> NotificationPreferences | None:
        return await self._run(
            lambda session: NotificationPreferenceRepository(session).get(user_id)
        )

    async def save_preferences(
        self, preferences: NotificationPreferences
    ) -> NotificationPreferences:
        return await self._run(
            lambda session: NotificationPreferenceRepository(session).save(preferences)
        )


class SqlAlchemyUserDirectory(_SessionScoped):
    """:class:`UserDirectory` backed by :class:`UserRepository`."""

    async def find_user(self, user_id: str) -> UserContact | None:
        return await self._run(lambda session: UserRepository(session).get(user_id))


__all__ = [
    "SqlAlchemyNotificationStore",
    "SqlAlchemyPreferenceStore",
    "SqlAlchemyUserDirectory",
]
