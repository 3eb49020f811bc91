"""
Time helpers. Timestamps are stored as naive UTC, like every model default.
"""
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utcnow() -> datetime:
    return datetime.utcnow()


def start_of_local_day(tz_name: str = "UTC", now: Optional[datetime] = None) -> datetime:
    """
    Midnight of the current day in `tz_name`, as a naive UTC datetime.

    `now` is an aware datetime (defaults to the current instant). Unknown
    zone names fall back to UTC.
    """
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        tz = timezone.utc

    local_now = (now or datetime.now(timezone.utc)).astimezone(tz)
    local_midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return local_midnight.astimezone(timezone.utc).replace(tzinfo=None)
