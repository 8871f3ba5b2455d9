"""Register the contact details used to deliver email and SMS notifications."""

from __future__ import annotations

import argparse
import uuid

from sqlalchemy.exc import SQLAlchemyError

from resale_notifications.domain.entities import UserContact
from resale_notifications.infrastructure.database import SessionLocal, initialize_database
from resale_notifications.infrastructure.repositories import UserRepository


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a user contact for notification delivery.",
    )
    parser.add_argument("--email", required=True, help="Address that receives email notifications")
    parser.add_argument("--first-name", default="", help="Name used in email greetings")
    parser.add_argument("--phone", default=None, help="Phone number for SMS notifications (optional)")
    parser.add_argument(
        "--id",
        default=None,
        help="User identifier. A UUID is generated when omitted.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    initialize_database()

    contact = UserContact(
        id=args.id or str(uuid.uuid4()),
        email=args.email,
        first_name=args.first_name,
        phone_number=args.phone,
    )
    session = SessionLocal()
    try:
        saved = UserRepository(session).create(contact)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the user contact: {exc}") from exc
    else:
        print(
            "User contact created:\n"
            f"  ID: {saved.id}\n"
            f"  Email: {saved.email}\n"
            f"  Phone: {saved.phone_number or '-'}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
