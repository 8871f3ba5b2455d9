"""Tests for the timezone helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from resale_notifications.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    resolve_timezone,
)


@pytest.mark.parametrize(
    ("name", "offset"),
    [
        ("UTC+2", timedelta(hours=2)),
        ("GMT-05:00", timedelta(hours=-5)),
        ("utc+0530", timedelta(hours=5, minutes=30)),
    ],
)
def test_resolve_fixed_offsets(name, offset) -> None:
    assert resolve_timezone(name) == timezone(offset)


def test_resolve_iana_name_and_unknown_values() -> None:
    assert resolve_timezone(" Europe/Madrid ") == ZoneInfo("Europe/Madrid")
    assert resolve_timezone("Mars/Olympus") is None
    assert resolve_timezone("") is None
    assert resolve_timezone(None) is None


def test_storage_conversion_keeps_the_instant() -> None:
    aware = datetime(2024, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    stored = ensure_app_naive_datetime(aware)

    assert stored.tzinfo is None
    assert ensure_app_timezone(stored) == aware
    assert ensure_app_naive_datetime(None) is None
