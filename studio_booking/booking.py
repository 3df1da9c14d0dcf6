"""Booking flow glue: availability checks and payment-confirmed event creation.

Availability is computed from whatever the calendar returns right now. Two
customers can still see the same slot as open; ``confirm_booking`` re-reads
the calendar under a lock before writing, which serializes commits within one
process. Deployments running several processes must serialize per
(date, slot) in the shared store as well.
"""

import logging
import threading
from datetime import date, datetime
from typing import List
from zoneinfo import ZoneInfo

from studio_booking import availability, events
from studio_booking.errors import SlotUnavailableError
from studio_booking.google_calendar import GoogleCalendarClient, fetch_busy_intervals
from studio_booking.models import BookingDetails, BookingRequest, DayAvailability, Slot
from studio_booking.slots import find_slot, get_slot_menu
from studio_booking.timeutils import get_timezone, local_timestamp, parse_date

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        calendar: GoogleCalendarClient,
        slot_menu: List[Slot] | None = None,
        tz: ZoneInfo | None = None,
        lock: "threading.Lock | None" = None,
    ):
        self.calendar = calendar
        self.slot_menu = slot_menu if slot_menu is not None else get_slot_menu()
        self.tz = tz or get_timezone()
        self.lock = lock or threading.Lock()

    def check_availability(self, date_str: str, today: date | None = None) -> DayAvailability:
        """Returns the availability of every slot on a date.

        Calendar outages raise CalendarUnavailableError rather than reporting
        the day as fully open.
        """
        day = parse_date(date_str)
        today = today or datetime.now(self.tz).date()

        if day < today:
            logger.warning(f"Requested date is in the past: {date_str}")
            return DayAvailability(
                date=date_str,
                availability=availability.closed_day(self.slot_menu),
                available_count=0,
                message="Past dates are not available for booking",
            )

        busy_intervals = fetch_busy_intervals(self.calendar, day, self.tz)
        slot_map = availability.resolve(day, busy_intervals, self.slot_menu, self.tz)
        open_count = sum(slot_map.values())
        logger.info(f"Availability for {date_str}: {open_count}/{len(slot_map)} slots open")

        return DayAvailability(
            date=date_str,
            availability=slot_map,
            available_count=open_count,
            message="Availability retrieved successfully",
        )

    def confirm_booking(self, request: BookingRequest, details: BookingDetails) -> str:
        """Registers a paid booking on the calendar and returns the calendar event id."""
        if details.calendar_event_id:
            logger.info(f"Calendar event already exists for booking {details.booking_id}: {details.calendar_event_id}")
            return details.calendar_event_id

        interval = events.build(request, self.slot_menu, self.tz)
        slot = find_slot(self.slot_menu, request.slot)

        with self.lock:
            busy_intervals = fetch_busy_intervals(self.calendar, request.date, self.tz)
            slot_start = local_timestamp(request.date, slot.hour, slot.minute, self.tz)
            if availability.is_blocked(slot_start, busy_intervals):
                logger.warning(f"Slot {slot.label} on {request.date} was taken before booking {details.booking_id}")
                raise SlotUnavailableError(f"{slot.label} on {request.date} is no longer available")

            created = self.calendar.insert_event(events.build_event_body(interval, details, self.tz))

        event_id = created.get("id")
        logger.info(f"Booking {details.booking_id} registered as calendar event {event_id}")
        return event_id
