"""
Delivery eligibility matching.

A subscription is due when its local wall-clock hour and minute exactly equal
one of its configured notification times. The caller is expected to run a
pass once per minute; a minute with no pass is simply missed.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional

from nudge.core.logger import setup_logger
from nudge.models.notification import NotificationPreferences, NotificationTime
from nudge.models.push_subscription import NotificationTimeSlot, PushSubscription
from nudge.utils.datetime_utils import ensure_utc, get_zone

logger = setup_logger(__name__)


def resolve_local_time(now: datetime, timezone_name: str) -> datetime:
    """
    Convert ``now`` into ``timezone_name``.

    Unknown or invalid zones fall back to UTC instead of raising.
    """
    instant = ensure_utc(now)
    try:
        zone = get_zone(timezone_name)
    except ValueError:
        logger.warning(f"Invalid timezone {timezone_name!r}, falling back to UTC")
        return instant
    return instant.astimezone(zone)


def matches_any(times: Iterable[NotificationTimeSlot], hour: int, minute: int) -> bool:
    return any(slot.hour == hour and slot.minute == minute for slot in times)


def is_eligible(subscription: PushSubscription, now: datetime) -> bool:
    """Exact-minute match of the subscriber's local time against its notification times."""
    local = resolve_local_time(now, subscription.timezone)
    return matches_any(subscription.notification_times, local.hour, local.minute)


def next_notification_slot(
    prefs: NotificationPreferences,
    now: datetime,
) -> Optional[NotificationTime]:
    """Next enabled time after ``now``; wraps to tomorrow's earliest. None when disabled."""
    if not prefs.enabled:
        return None
    enabled = sorted(
        (t for t in prefs.times if t.enabled),
        key=lambda t: t.hour * 60 + t.minute,
    )
    if not enabled:
        return None

    current_minutes = now.hour * 60 + now.minute
    for slot in enabled:
        if slot.hour * 60 + slot.minute > current_minutes:
            return slot
    return enabled[0]


def seconds_until_next_notification(
    prefs: NotificationPreferences,
    now: datetime,
) -> Optional[int]:
    """
    Seconds from ``now`` (local wall-clock) to the next enabled notification time.

    Returns None when notifications are disabled or no time is enabled.
    Wraps to the earliest enabled time tomorrow.
    """
    slot = next_notification_slot(prefs, now)
    if slot is None:
        return None

    target = now.replace(hour=slot.hour, minute=slot.minute, second=0, microsecond=0)
    if slot.hour * 60 + slot.minute <= now.hour * 60 + now.minute:
        target = (now + timedelta(days=1)).replace(
            hour=slot.hour, minute=slot.minute, second=0, microsecond=0
        )
    return int((target - now).total_seconds())


def format_notification_time(hour: int, minute: int) -> str:
    """Format as a 12-hour clock, e.g. (7, 0) -> "7:00 AM"."""
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def parse_time_string(value: str) -> NotificationTimeSlot:
    """
    Parse "HH:MM".

    Raises:
        ValueError: If the string is malformed or out of range.
    """
    hour_str, sep, minute_str = value.strip().partition(":")
    if not sep:
        raise ValueError(f"Invalid time string: {value!r}")
    return NotificationTimeSlot(hour=int(hour_str), minute=int(minute_str))
