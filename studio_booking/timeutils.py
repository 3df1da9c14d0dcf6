import logging
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from studio_booking import config
from studio_booking.errors import InvalidDate, InvalidSlot, TimezoneResolutionError

logger = logging.getLogger(__name__)

TIME_LABEL_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def get_timezone(name: str | None = None) -> ZoneInfo:
    """Resolves an IANA zone name, defaulting to the configured booking timezone."""
    tz_name = name if name is not None else config.TIMEZONE
    if not tz_name:
        raise TimezoneResolutionError("No timezone configured")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Cannot resolve timezone '{tz_name}': {e}")
        raise TimezoneResolutionError(f"Unknown timezone: {tz_name}") from e


def parse_time_label(label: str) -> Tuple[int, int]:
    """Parses a 12-hour label such as "10:00 AM" into (hour, minute) on a 24-hour clock."""
    match = TIME_LABEL_RE.match(label or "")
    if not match:
        raise InvalidSlot(f"Malformed time label: {label!r}")

    hours, minutes, period = int(match.group(1)), int(match.group(2)), match.group(3).upper()
    if not 1 <= hours <= 12 or minutes > 59:
        raise InvalidSlot(f"Malformed time label: {label!r}")

    hour24 = hours % 12
    if period == "PM":
        hour24 += 12
    return hour24, minutes


def format_time_label(hour: int, minute: int) -> str:
    """Formats a 24-hour (hour, minute) pair as a display label, e.g. (14, 0) -> "2:00 PM"."""
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


def parse_date(value: str) -> date:
    """Parses a strict YYYY-MM-DD date string."""
    if not value or not DATE_RE.match(value):
        raise InvalidDate(f"Invalid date format: {value!r}. Expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDate(f"Invalid date: {value!r}") from e


def _localize(wall: datetime, tz: ZoneInfo) -> datetime:
    """Attaches tz to a naive wall-clock time, moving times inside a DST gap forward."""
    local = wall.replace(tzinfo=tz)
    normalized = local.astimezone(timezone.utc).astimezone(tz)
    if normalized.replace(tzinfo=None) != wall:
        logger.debug(f"Wall time {wall.isoformat()} does not exist in {tz.key}, using {normalized.isoformat()}")
    return normalized


def local_timestamp(day: date, hour: int, minute: int, tz: ZoneInfo) -> datetime:
    """Builds the aware local timestamp for a wall-clock time on a given date.

    The UTC offset comes from the timezone database for that specific date.
    """
    return _localize(datetime.combine(day, time(hour, minute)), tz)


def add_wall_clock_minutes(ts: datetime, minutes: int, tz: ZoneInfo) -> datetime:
    """Adds minutes of wall-clock time, recomputing the offset for the resulting date."""
    wall = to_local(ts, tz).replace(tzinfo=None) + timedelta(minutes=minutes)
    return _localize(wall, tz)


def to_local(dt: datetime, tz: ZoneInfo) -> datetime:
    """Normalizes an aware datetime into the fixed timezone."""
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError(f"Expected a timezone-aware datetime, got {dt.isoformat()}")
    return dt.astimezone(tz)
