import logging
from typing import List

from studio_booking import config
from studio_booking.errors import InvalidSlot
from studio_booking.models import Slot
from studio_booking.timeutils import format_time_label, parse_time_label

logger = logging.getLogger(__name__)


def generate_slot_menu(start_hour: int = 6, end_hour: int = 20, step_minutes: int = 60) -> List[Slot]:
    """Generates slot start times from start_hour through end_hour inclusive."""
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")

    slots = []
    current = start_hour * 60
    last = end_hour * 60

    while current <= last and current < 24 * 60:
        hour, minute = divmod(current, 60)
        slots.append(Slot(label=format_time_label(hour, minute), hour=hour, minute=minute))
        current += step_minutes

    logger.debug(f"Generated {len(slots)} slots: {[s.label for s in slots]}")
    return slots


def build_slot_menu(labels: List[str]) -> List[Slot]:
    """Builds a slot menu from explicit display labels, keeping their order."""
    slots: List[Slot] = []
    seen = set()
    for label in labels:
        hour, minute = parse_time_label(label)
        canonical = format_time_label(hour, minute)
        if canonical in seen:
            raise InvalidSlot(f"Duplicate slot in menu: {label!r}")
        seen.add(canonical)
        slots.append(Slot(label=canonical, hour=hour, minute=minute))
    return slots


def get_slot_menu() -> List[Slot]:
    """Returns the configured slot menu."""
    if config.SLOT_LABELS:
        return build_slot_menu(config.SLOT_LABELS)
    return generate_slot_menu(config.SLOT_START_HOUR, config.SLOT_END_HOUR, config.SLOT_STEP_MINUTES)


def find_slot(slot_menu: List[Slot], label: str) -> Slot:
    """Looks up a menu entry by label. Raises InvalidSlot for anything not on the menu.

    Exact label matches win; otherwise a clock label such as " 2:00 pm" is
    matched against the entries' start times.
    """
    for slot in slot_menu:
        if slot.label == label:
            return slot

    try:
        hour, minute = parse_time_label(label)
    except InvalidSlot:
        raise InvalidSlot(f"Slot {label!r} is not offered")
    for slot in slot_menu:
        if slot.hour == hour and slot.minute == minute:
            return slot
    raise InvalidSlot(f"Slot {label!r} is not offered")
