from datetime import date, datetime, timedelta, timezone

from studio_booking import availability, events
from studio_booking.models import BookingRequest, BusyInterval
from studio_booking.timeutils import local_timestamp

DAY = date(2025, 6, 14)


def busy(tz, start_hour, end_hour, day=DAY, label=None):
    return BusyInterval(
        start=local_timestamp(day, start_hour, 0, tz),
        end=local_timestamp(day, end_hour, 0, tz),
        label=label,
    )


def test_every_slot_present(menu, denver):
    intervals = [busy(denver, 7, 9), busy(denver, 15, 16)]
    result = availability.resolve(DAY, intervals, menu, denver)
    assert list(result.keys()) == [s.label for s in menu]


def test_empty_calendar_is_fully_available(menu, denver):
    result = availability.resolve(DAY, [], menu, denver)
    assert len(result) == 15
    assert all(result.values())


def test_exact_start_blocks(menu, denver):
    result = availability.resolve(DAY, [busy(denver, 10, 11)], menu, denver)
    assert result["10:00 AM"] is False


def test_back_to_back_not_blocked(menu, denver):
    result = availability.resolve(DAY, [busy(denver, 10, 11)], menu, denver)
    assert result["11:00 AM"] is True
    assert result["9:00 AM"] is True


def test_only_slot_start_is_tested(menu, denver):
    # 9:30-10:15 covers 10:00 but not 9:00, even though a 9:00 slot would run into it
    interval = BusyInterval(
        start=local_timestamp(DAY, 9, 30, denver),
        end=local_timestamp(DAY, 10, 15, denver),
    )
    result = availability.resolve(DAY, [interval], menu, denver)
    assert result["9:00 AM"] is True
    assert result["10:00 AM"] is False


def test_interval_in_utc_is_compared_by_instant(menu, denver):
    # 20:00-21:00 UTC == 14:00-15:00 MDT
    interval = BusyInterval(
        start=datetime(2025, 6, 14, 20, 0, tzinfo=timezone.utc),
        end=datetime(2025, 6, 14, 21, 0, tzinfo=timezone.utc),
    )
    result = availability.resolve(DAY, [interval], menu, denver)
    assert result["2:00 PM"] is False
    assert result["3:00 PM"] is True


def test_interval_spanning_midnight(menu, denver):
    previous_day = DAY - timedelta(days=1)
    interval = BusyInterval(
        start=local_timestamp(previous_day, 22, 0, denver),
        end=local_timestamp(DAY, 7, 0, denver),
    )
    result = availability.resolve(DAY, [interval], menu, denver)
    assert result["6:00 AM"] is False
    assert result["7:00 AM"] is True


def test_interval_on_other_day_does_not_block(menu, denver):
    other = busy(denver, 10, 11, day=DAY + timedelta(days=1))
    result = availability.resolve(DAY, [other], menu, denver)
    assert all(result.values())


def test_round_trip_with_built_interval(menu, denver):
    request = BookingRequest(date=DAY, slot="2:00 PM", duration_hours=2.0)
    interval = events.build(request, menu, denver)

    result = availability.resolve(DAY, [interval], menu, denver)

    assert result["2:00 PM"] is False
    assert result["3:00 PM"] is False
    assert result["4:00 PM"] is True
    assert result["1:00 PM"] is True


def test_is_blocked_half_open(denver):
    interval = busy(denver, 10, 11)
    assert availability.is_blocked(local_timestamp(DAY, 10, 0, denver), [interval])
    assert availability.is_blocked(local_timestamp(DAY, 10, 59, denver), [interval])
    assert not availability.is_blocked(local_timestamp(DAY, 11, 0, denver), [interval])
    assert not availability.is_blocked(local_timestamp(DAY, 10, 0, denver), [])


def test_closed_day(menu):
    result = availability.closed_day(menu)
    assert len(result) == len(menu)
    assert not any(result.values())
