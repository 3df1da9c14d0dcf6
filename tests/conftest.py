from zoneinfo import ZoneInfo

import pytest

from studio_booking.slots import generate_slot_menu


@pytest.fixture
def denver():
    return ZoneInfo("America/Denver")


@pytest.fixture
def menu():
    # 6:00 AM .. 8:00 PM, hourly
    return generate_slot_menu(6, 20, 60)
