import argparse
import json
import logging
import sys
import time

from pydantic import ValidationError

from studio_booking import config, events, persist
from studio_booking.booking import BookingService
from studio_booking.errors import BookingError, CalendarUnavailableError
from studio_booking.google_calendar import GoogleCalendarClient
from studio_booking.models import BookingDetails, BookingRequest, DayAvailability
from studio_booking.slots import get_slot_menu
from studio_booking.timeutils import get_timezone, parse_date

logger = logging.getLogger(__name__)

EXIT_INVALID = 2
EXIT_DEGRADED = 3


def setup_logging(verbose: bool):
    """Configures logging to stderr with local time."""
    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s]: %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    formatter.converter = time.localtime
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


def parse_arguments(argv=None):
    """Parses command line arguments."""
    parser = argparse.ArgumentParser(description="Check studio slot availability and register bookings.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("availability", help="Show which slots are open on a date.")
    check.add_argument("--date", required=True, help="Date in YYYY-MM-DD format.")
    check.add_argument("--today", help="Override today's date (YYYY-MM-DD) for past-date checks.")
    check.add_argument("--output", help="Also write the result as a JSON report to this path.")

    event = subparsers.add_parser("event", help="Compute (and optionally create) the calendar event for a booking.")
    event.add_argument("--date", required=True, help="Date in YYYY-MM-DD format.")
    event.add_argument("--slot", required=True, help='Slot label, e.g. "2:00 PM".')
    event.add_argument("--hours", type=float, default=config.DEFAULT_DURATION_HOURS, help="Duration in hours.")
    event.add_argument("--create", action="store_true", help="Register the event on the calendar.")
    event.add_argument("--booking-id", default="manual", help="Booking id shown in the event description.")
    event.add_argument("--name", default="Studio Booking", help="Event name.")
    event.add_argument("--contact", default="Studio", help="Contact name.")
    event.add_argument("--email", default="", help="Contact email.")
    return parser.parse_args(argv)


def print_availability_report(day_data: DayAvailability):
    """Prints the formatted availability report to stdout."""
    print(f"\n--- Availability Report for {day_data.date} ---")

    for label, is_open in day_data.availability.items():
        prefix = "[AVAILABLE]" if is_open else "[BOOKED]   "
        print(f"{prefix} {label}")

    print(f"Summary: {day_data.available_count} of {len(day_data.availability)} slots open. {day_data.message}")


def run_availability(args) -> int:
    today = parse_date(args.today) if args.today else None
    service = BookingService(GoogleCalendarClient())
    day_data = service.check_availability(args.date, today=today)
    print_availability_report(day_data)
    if args.output:
        persist.save_report([day_data], args.output)
    return 0


def run_event(args) -> int:
    request = BookingRequest(date=parse_date(args.date), slot=args.slot, duration_hours=args.hours)
    interval = events.build(request, get_slot_menu(), get_timezone())
    print(json.dumps({"start": interval.start.isoformat(), "end": interval.end.isoformat()}))

    if args.create:
        details = BookingDetails(
            booking_id=args.booking_id,
            event_name=args.name,
            contact_name=args.contact,
            email=args.email,
        )
        event_id = BookingService(GoogleCalendarClient()).confirm_booking(request, details)
        print(f"Created calendar event {event_id}")
    return 0


def main(argv=None) -> int:
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    handlers = {"availability": run_availability, "event": run_event}
    try:
        return handlers[args.command](args)
    except CalendarUnavailableError as e:
        logger.error(f"Calendar service degraded: {e}")
        print("Booking calendar is temporarily unavailable. Please retry or contact us.", file=sys.stderr)
        return EXIT_DEGRADED
    except (BookingError, ValidationError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
