"""Persistence helpers for notification records."""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from resale_notifications.domain.entities import (
    Channel,
    NotificationRecord,
    NotificationType,
    Priority,
)
from resale_notifications.infrastructure.models import NotificationModel
from resale_notifications.utils import ensure_app_naive_datetime, ensure_app_timezone

# Records are immutable once created apart from these timestamps.
_STAMP_FIELDS = frozenset({"delivered_at", "email_sent_at", "read_at", "dispatched_at"})


class NotificationRepository:
    """Provide CRUD operations for :class:`NotificationRecord` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> NotificationRecord | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int | None = 50,
    ) -> Sequence[NotificationRecord]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        if unread_only:
            query = query.filter(NotificationModel.read_at.is_(None))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_due(self, now: datetime, *, limit: int = 100) -> Sequence[NotificationRecord]:
        cutoff = ensure_app_naive_datetime(now)
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.dispatched_at.is_(None))
            .filter(NotificationModel.schedule_for.is_not(None))
            .filter(NotificationModel.schedule_for <= cutoff)
            .filter(
                or_(
                    NotificationModel.expires_at.is_(None),
                    NotificationModel.expires_at > cutoff,
                )
            )
            .order_by(NotificationModel.schedule_for.asc(), NotificationModel.id.asc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, record: NotificationRecord) -> NotificationRecord:
        model = NotificationModel()
        self._apply_entity_to_model(model, record)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification_id: str, fields: Mapping[str, Any]) -> NotificationRecord:
        unknown = set(fields) - _STAMP_FIELDS
        if unknown:
            msg = f"Cannot update notification fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        for name, value in fields.items():
            setattr(model, name, ensure_app_naive_datetime(value))
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_read(
        self,
        user_id: str,
        *,
        read_at: datetime,
        notification_id: str | None = None,
    ) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id,
            NotificationModel.read_at.is_(None),
        )
        if notification_id is not None:
            query = query.filter(NotificationModel.id == notification_id)
        updated = query.update(
            {NotificationModel.read_at: ensure_app_naive_datetime(read_at)},
            synchronize_session="fetch",
        )
        self.session.commit()
        return updated

    def claim_for_dispatch(self, notification_id: str, *, dispatched_at: datetime) -> bool:
        """Atomically mark a deferred record as taken by one dispatch pass."""

        claimed = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.dispatched_at.is_(None),
            )
            .update(
                {NotificationModel.dispatched_at: ensure_app_naive_datetime(dispatched_at)},
                synchronize_session="fetch",
            )
        )
        self.session.commit()
        return claimed > 0

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read_at.is_(None))
            .count()
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, record: NotificationRecord) -> None:
        model.id = record.id or str(uuid.uuid4())
        model.user_id = record.user_id
        model.type = NotificationType(record.type).value
        model.title = record.title
        model.message = record.message
        model.data = record.data or {}
        model.priority = Priority(record.priority).value
        model.channels = [Channel(channel).value for channel in record.channels]
        model.actionable = record.actionable
        model.action_url = record.action_url
        model.group_id = record.group_id
        for name in (
            "created_at",
            "schedule_for",
            "expires_at",
            "delivered_at",
            "email_sent_at",
            "read_at",
            "dispatched_at",
        ):
            setattr(model, name, ensure_app_naive_datetime(getattr(record, name)))

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            data=model.data or {},
            priority=Priority(model.priority),
            channels=[Channel(channel) for channel in model.channels or []],
            created_at=ensure_app_timezone(model.created_at),
            schedule_for=ensure_app_timezone(model.schedule_for),
            expires_at=ensure_app_timezone(model.expires_at),
            actionable=bool(model.actionable),
            action_url=model.action_url,
            group_id=model.group_id,
            delivered_at=ensure_app_timezone(model.delivered_at),
            email_sent_at=ensure_app_timezone(model.email_sent_at),
            read_at=ensure_app_timezone(model.read_at),
            dispatched_at=ensure_app_timezone(model.dispatched_at),
        )


__all__ = ["NotificationRepository"]
