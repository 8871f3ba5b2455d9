"""Persistence layer for user contact data."""

from __future__ import annotations

from sqlalchemy.orm import Session

from resale_notifications.domain.entities import UserContact
from resale_notifications.infrastructure.models import UserModel


class UserRepository:
    """Look up the contact details of marketplace users."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> UserContact | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def create(self, contact: UserContact) -> UserContact:
        model = UserModel(
            id=contact.id,
            email=contact.email,
            first_name=contact.first_name,
            phone_number=contact.phone_number,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> UserContact:
        return UserContact(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            phone_number=model.phone_number,
        )


__all__ = ["UserRepository"]
