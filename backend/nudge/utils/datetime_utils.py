"""
Timezone-aware datetime utilities.

This module provides utilities for working with timezone-aware datetimes,
ensuring consistent handling across the application.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# UTC timezone constant
UTC = timezone.utc


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Returns:
        datetime: Current UTC time with tzinfo set to UTC
    """
    return datetime.now(UTC)


def get_zone(timezone_name: str) -> ZoneInfo:
    """
    Resolve an IANA timezone name.

    Raises:
        ValueError: If the name is empty, malformed or unknown to the host.
    """
    if not timezone_name:
        raise ValueError("Empty timezone name")
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {timezone_name}") from exc


def is_valid_timezone(timezone_name: str) -> bool:
    try:
        get_zone(timezone_name)
    except ValueError:
        return False
    return True


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware and in UTC.

    Args:
        dt: datetime to convert (can be None, naive, or timezone-aware)

    Returns:
        Optional[datetime]: UTC timezone-aware datetime, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def to_local_naive(dt: datetime, reference: datetime) -> datetime:
    """
    Express ``dt`` as wall-clock time in the zone of ``reference``.

    Naive values are taken to already be wall-clock time.
    """
    if dt.tzinfo is None:
        return dt
    if reference.tzinfo is None:
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt.astimezone(reference.tzinfo).replace(tzinfo=None)
