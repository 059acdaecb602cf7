"""
Timezone resolver.

Maps a requester's IANA timezone to their local calendar date so daily
content can be bucketed by the requester's day instead of the UTC day.
Formatting problems fall back to UTC rather than raising.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"

# ZoneInfo reads tzdata files by name: directories ("Europe") and over-long
# names surface as OSError subclasses rather than ZoneInfoNotFoundError.
ZONE_ERRORS = (ZoneInfoNotFoundError, ValueError, TypeError, OSError)


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def utc_today(now: Optional[datetime] = None) -> date:
    """Today's UTC calendar date."""
    return _now(now).astimezone(timezone.utc).date()


def is_valid_timezone(tz_name: Optional[str]) -> bool:
    """True if the name resolves to an IANA zone."""
    if not tz_name or not isinstance(tz_name, str):
        return False
    try:
        ZoneInfo(tz_name)
        return True
    except ZONE_ERRORS:
        return False


def safe_timezone(tz_name: Optional[str]) -> str:
    """Return the name if valid, otherwise "UTC"."""
    return tz_name if is_valid_timezone(tz_name) else DEFAULT_TIMEZONE


def local_date(tz_name: str, now: Optional[datetime] = None) -> date:
    """The current calendar date in the given timezone."""
    current = _now(now)
    try:
        return current.astimezone(ZoneInfo(tz_name)).date()
    except ZONE_ERRORS as e:
        logger.error(f"Error calculating local date for timezone {str(tz_name)[:64]!r}: {e}")
        return utc_today(current)


def current_hour_in_timezone(tz_name: str, now: Optional[datetime] = None) -> int:
    """Current hour (0-23) in the given timezone."""
    current = _now(now)
    return current.astimezone(ZoneInfo(safe_timezone(tz_name))).hour


def is_next_day_from_utc(tz_name: str, now: Optional[datetime] = None) -> bool:
    """Whether the zone has already crossed into tomorrow relative to UTC."""
    current = _now(now)
    return local_date(tz_name, current) > utc_today(current)
