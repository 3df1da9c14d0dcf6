"""Resolves which slots of the daily menu are still bookable on a given date.

A slot is blocked when its start instant falls inside a busy interval,
using the half-open rule ``start <= slot < end``. A slot starting exactly when
an event ends stays open, so back-to-back bookings are allowed.

Only the slot's start point is tested, not its implied duration.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List
from zoneinfo import ZoneInfo

from studio_booking.models import AvailabilityMap, BusyInterval, Slot
from studio_booking.timeutils import get_timezone, local_timestamp

logger = logging.getLogger(__name__)


def is_blocked(instant: datetime, busy_intervals: Iterable[BusyInterval]) -> bool:
    """Checks whether an instant falls inside any half-open busy interval."""
    return any(interval.contains(instant) for interval in busy_intervals)


def resolve(
    day: date,
    busy_intervals: List[BusyInterval],
    slot_menu: List[Slot],
    tz: ZoneInfo | None = None,
) -> AvailabilityMap:
    """Maps every slot label in the menu to True (bookable) or False (blocked) for one date."""
    tz = tz or get_timezone()
    availability: AvailabilityMap = {}

    for slot in slot_menu:
        slot_start = local_timestamp(day, slot.hour, slot.minute, tz)
        blocking = next((i for i in busy_intervals if i.contains(slot_start)), None)
        if blocking is not None:
            logger.debug(f"Conflict: {slot.label} on {day} falls within {blocking.label or 'busy interval'}")
        availability[slot.label] = blocking is None

    logger.debug(f"Resolved {sum(availability.values())}/{len(availability)} open slots for {day}")
    return availability


def closed_day(slot_menu: List[Slot]) -> AvailabilityMap:
    """Marks every slot as unavailable, e.g. for dates in the past."""
    return {slot.label: False for slot in slot_menu}
