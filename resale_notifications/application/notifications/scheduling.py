"""Quiet-hours scheduling policy.

Quiet hours are an hour-of-day window ``[start, end)`` taken from the hour
component of ``quiet_hours_start`` and ``quiet_hours_end``. A window whose
start is later than its end wraps midnight. When the user has a resolvable
``timezone`` and ``now`` is timezone-aware, the comparison happens on the
user's wall clock; otherwise on the wall clock of ``now`` as given.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta

from resale_notifications.domain.entities import NotificationPreferences
from resale_notifications.utils import resolve_timezone

logger = logging.getLogger(__name__)

DEFAULT_RESUME_TIME = time(hour=8, minute=0)


def parse_clock(value: str | None) -> time | None:
    """Parse an ``"HH:MM"`` string, returning ``None`` when absent or invalid."""

    if not value:
        return None
    hours, _, minutes = value.strip().partition(":")
    try:
        return time(hour=int(hours), minute=int(minutes or 0))
    except ValueError:
        logger.debug("Ignoring malformed quiet-hours value %r", value)
        return None


def _user_wall_clock(preferences: NotificationPreferences, now: datetime) -> datetime:
    if now.tzinfo is None:
        return now
    tz = resolve_timezone(preferences.timezone)
    if tz is None:
        return now
    return now.astimezone(tz)


def is_quiet_hours(preferences: NotificationPreferences, now: datetime) -> bool:
    """Return ``True`` when ``now`` falls inside the user's quiet hours."""

    start = parse_clock(preferences.quiet_hours_start)
    end = parse_clock(preferences.quiet_hours_end)
    if start is None or end is None:
        return False

    current_hour = _user_wall_clock(preferences, now).hour
    if start.hour <= end.hour:
        return start.hour <= current_hour < end.hour
    return current_hour >= start.hour or current_hour < end.hour


def next_allowed_time(preferences: NotificationPreferences, now: datetime) -> datetime:
    """Return the moment quiet hours end.

    This is the next occurrence of ``quiet_hours_end`` (minutes included)
    after ``now``. Without an end time it falls back to 08:00 the following
    day. The result is expressed in the same timezone as ``now`` when ``now``
    is aware.
    """

    local_now = _user_wall_clock(preferences, now)
    resume = parse_clock(preferences.quiet_hours_end)
    if resume is None:
        candidate = (local_now + timedelta(days=1)).replace(
            hour=DEFAULT_RESUME_TIME.hour,
            minute=DEFAULT_RESUME_TIME.minute,
            second=0,
            microsecond=0,
        )
    else:
        candidate = local_now.replace(
            hour=resume.hour, minute=resume.minute, second=0, microsecond=0
        )
        if candidate <= local_now:
            candidate += timedelta(days=1)

    if now.tzinfo is not None:
        return candidate.astimezone(now.tzinfo)
    return candidate


__all__ = [
    "DEFAULT_RESUME_TIME",
    "is_quiet_hours",
    "next_allowed_time",
    "parse_clock",
]
