"""Deliver notifications whose scheduled time has arrived.

Meant to run periodically (cron, a scheduler container, ...).
"""

from __future__ import annotations

import argparse
import logging
from functools import partial

import anyio
from sqlalchemy.exc import SQLAlchemyError

from resale_notifications.config import get_settings
from resale_notifications.infrastructure.database import initialize_database
from resale_notifications.interfaces.api.dependencies import get_notification_service


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Dispatch deferred notifications that are now due.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of notifications to dispatch (default: DUE_DISPATCH_BATCH_SIZE)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO)

    limit = args.limit if args.limit is not None else get_settings().due_dispatch_batch_size
    if limit <= 0:
        raise SystemExit("--limit must be a positive integer.")

    initialize_database()
    service = get_notification_service()
    try:
        dispatched = anyio.run(partial(service.dispatch_due, limit=limit))
    except SQLAlchemyError as exc:
        raise SystemExit(f"Database error while dispatching notifications: {exc}") from exc
    print(f"Dispatched {dispatched} notification(s).")


if __name__ == "__main__":
    main()
