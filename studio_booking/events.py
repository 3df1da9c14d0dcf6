import logging
from typing import Any, Dict, List
from zoneinfo import ZoneInfo

from studio_booking import config
from studio_booking.errors import InvalidDuration
from studio_booking.models import BookingDetails, BookingRequest, BusyInterval, Slot
from studio_booking.slots import find_slot
from studio_booking.timeutils import add_wall_clock_minutes, get_timezone, local_timestamp, to_local

logger = logging.getLogger(__name__)


def build(request: BookingRequest, slot_menu: List[Slot], tz: ZoneInfo | None = None) -> BusyInterval:
    """Builds the busy interval a confirmed booking occupies on the calendar.

    The end is computed in wall-clock minutes, so a 2 hour booking ends two
    clock hours later even across a DST change, and each end carries the
    offset valid for its own date.
    """
    if not request.duration_hours >= config.MIN_DURATION_HOURS:
        raise InvalidDuration(
            f"Duration {request.duration_hours}h is below the {config.MIN_DURATION_HOURS}h minimum"
        )
    slot = find_slot(slot_menu, request.slot)
    tz = tz or get_timezone()

    start = local_timestamp(request.date, slot.hour, slot.minute, tz)
    try:
        end = add_wall_clock_minutes(start, round(request.duration_hours * 60), tz)
    except OverflowError as e:
        raise InvalidDuration(f"Duration {request.duration_hours}h is out of range") from e

    logger.debug(f"Built interval {start.isoformat()} -> {end.isoformat()} for {slot.label} on {request.date}")
    return BusyInterval(start=start, end=end, label=slot.label)


def _describe(details: BookingDetails, duration_hours: float) -> str:
    lines = [
        f"Event Type: {details.event_type or 'Not specified'}",
        f"Organizer: {details.contact_name}",
        f"Email: {details.email}",
        f"Phone: {details.phone or 'Not provided'}",
        f"Duration: {duration_hours:g} hours",
    ]
    if details.business_name:
        lines.append(f"Business: {details.business_name}")
    if details.special_requests:
        lines.append(f"Special Requests: {details.special_requests}")
    lines += [
        "",
        f"Booking ID: {details.booking_id}",
        f"Status: {details.status}",
        "",
        "This booking automatically blocks the time slot for other users.",
    ]
    return "\n".join(lines)


def build_event_body(interval: BusyInterval, details: BookingDetails, tz: ZoneInfo | None = None) -> Dict[str, Any]:
    """Builds the Google Calendar event resource for a booking's interval."""
    tz = tz or get_timezone()
    wall_start = to_local(interval.start, tz).replace(tzinfo=None)
    wall_end = to_local(interval.end, tz).replace(tzinfo=None)
    duration_hours = (wall_end - wall_start).total_seconds() / 3600

    return {
        "summary": f"{details.event_name} - {details.contact_name}",
        "description": _describe(details, duration_hours),
        "start": {"dateTime": interval.start.isoformat(), "timeZone": tz.key},
        "end": {"dateTime": interval.end.isoformat(), "timeZone": tz.key},
        "location": config.EVENT_LOCATION,
        "colorId": config.EVENT_COLOR_ID,
        "reminders": {
            "useDefault": False,
            "overrides": [{"method": "email", "minutes": m} for m in config.EVENT_REMINDER_MINUTES],
        },
    }
