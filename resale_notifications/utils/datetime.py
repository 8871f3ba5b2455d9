"""Application clock and timezone conversions.

Notification timestamps are aware datetimes everywhere above the
repositories. The database stores them as naive wall-clock values in the
``APP_TIMEZONE`` zone, so the helpers here convert at that boundary.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from resale_notifications.config import get_settings

_FALLBACK_ZONE: Final[str] = "UTC"
# "UTC+2", "GMT-05:00", "utc+0530"
_FIXED_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Zone named by ``APP_TIMEZONE``, or UTC when it is blank or unknown."""

    configured = (get_settings().app_timezone or "").strip()
    return resolve_timezone(configured) or ZoneInfo(_FALLBACK_ZONE)


def now_in_app_timezone() -> datetime:
    """Default clock for the notification pipeline."""

    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach or convert to the app zone. Naive values are read as app-local."""

    if value is None:
        return None
    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """App-local wall clock without ``tzinfo``, as stored in ``DateTime`` columns."""

    localized = ensure_app_timezone(value)
    return None if localized is None else localized.replace(tzinfo=None)


def resolve_timezone(tz_name: str | None) -> tzinfo | None:
    """Resolve a user or app timezone setting.

    Accepts IANA names (``Europe/Madrid``) and fixed offsets (``UTC-05:00``).
    Returns ``None`` for empty or unrecognised values so callers choose their
    own fallback.
    """

    name = (tz_name or "").strip()
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        pass

    match = _FIXED_OFFSET.match(name)
    if match is None:
        return None
    offset = timedelta(hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0))
    if match.group("sign") == "-":
        offset = -offset
    return timezone(offset)
