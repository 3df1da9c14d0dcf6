class BookingError(Exception):
    """Base class for all booking calendar errors."""


class InvalidSlot(BookingError, ValueError):
    """Raised when a slot label is malformed or not part of the configured menu."""


class InvalidDuration(BookingError, ValueError):
    """Raised when a booking duration is below the configured minimum."""


class InvalidDate(BookingError, ValueError):
    """Raised when a date string is not in YYYY-MM-DD format."""


class TimezoneResolutionError(BookingError):
    """Raised when the configured timezone cannot be found in the timezone database."""


class CalendarUnavailableError(BookingError):
    """Raised when the external calendar cannot be read or written."""


class SlotUnavailableError(BookingError):
    """Raised when a slot was taken between the availability check and the booking commit."""
