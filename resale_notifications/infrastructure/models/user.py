"""SQLAlchemy model for the user table."""

from sqlalchemy import Column, String

from resale_notifications.infrastructure.database import Base


class UserModel(Base):
    """Marketplace user columns the notification service reads."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True)
    email = Column(String(120), nullable=False, index=True)
    first_name = Column(String(50), nullable=False)
    phone_number = Column(String(30), nullable=True)


__all__ = ["UserModel"]
