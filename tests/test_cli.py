from unittest.mock import MagicMock, patch

from studio_booking import cli
from studio_booking.errors import CalendarUnavailableError
from studio_booking.models import DayAvailability


def _day():
    return DayAvailability(
        date="2025-06-14",
        availability={"10:00 AM": False, "11:00 AM": True},
        available_count=1,
        message="Availability retrieved successfully",
    )


@patch("studio_booking.cli.persist.save_report")
@patch("studio_booking.cli.GoogleCalendarClient")
@patch("studio_booking.cli.BookingService")
def test_availability_command(mock_service_cls, mock_client, mock_save, capsys):
    mock_service_cls.return_value.check_availability.return_value = _day()

    code = cli.main(["availability", "--date", "2025-06-14", "--output", "/tmp/out.json"])

    assert code == 0
    mock_service_cls.return_value.check_availability.assert_called_once_with("2025-06-14", today=None)
    mock_save.assert_called_once()
    out = capsys.readouterr().out
    assert "[BOOKED]    10:00 AM" in out
    assert "[AVAILABLE] 11:00 AM" in out


@patch("studio_booking.cli.GoogleCalendarClient")
@patch("studio_booking.cli.BookingService")
def test_availability_command_calendar_down(mock_service_cls, mock_client, capsys):
    mock_service_cls.return_value.check_availability.side_effect = CalendarUnavailableError("down")

    code = cli.main(["availability", "--date", "2025-06-14"])

    assert code == cli.EXIT_DEGRADED
    assert "temporarily unavailable" in capsys.readouterr().err


def test_availability_command_bad_date():
    assert cli.main(["availability", "--date", "2025-06-14", "--today", "yesterday"]) == cli.EXIT_INVALID


@patch("studio_booking.cli.get_timezone")
@patch("studio_booking.cli.get_slot_menu")
def test_event_command_prints_interval(mock_menu, mock_tz, menu, denver, capsys):
    mock_menu.return_value = menu
    mock_tz.return_value = denver

    code = cli.main(["event", "--date", "2025-06-14", "--slot", "8:00 PM", "--hours", "5"])

    assert code == 0
    out = capsys.readouterr().out
    assert '"start": "2025-06-14T20:00:00-06:00"' in out
    assert '"end": "2025-06-15T01:00:00-06:00"' in out


@patch("studio_booking.cli.get_timezone")
@patch("studio_booking.cli.get_slot_menu")
def test_event_command_invalid_slot(mock_menu, mock_tz, menu, denver):
    mock_menu.return_value = menu
    mock_tz.return_value = denver
    assert cli.main(["event", "--date", "2025-06-14", "--slot", "11:00 PM"]) == cli.EXIT_INVALID


@patch("studio_booking.cli.GoogleCalendarClient")
@patch("studio_booking.cli.BookingService")
@patch("studio_booking.cli.get_timezone")
@patch("studio_booking.cli.get_slot_menu")
def test_event_command_create(mock_menu, mock_tz, mock_service_cls, mock_client, menu, denver, capsys):
    mock_menu.return_value = menu
    mock_tz.return_value = denver
    mock_service_cls.return_value.confirm_booking.return_value = "evt_9"

    code = cli.main(["event", "--date", "2025-06-14", "--slot", "2:00 PM", "--create", "--booking-id", "bk_9"])

    assert code == 0
    request, details = mock_service_cls.return_value.confirm_booking.call_args.args
    assert request.slot == "2:00 PM"
    assert details.booking_id == "bk_9"
    assert "evt_9" in capsys.readouterr().out


@patch("studio_booking.cli.run_availability")
@patch("studio_booking.cli.parse_arguments")
def test_main_dispatches(mock_args, mock_run):
    mock_args.return_value = MagicMock(command="availability", verbose=True)
    mock_run.return_value = 0

    assert cli.main() == 0
    mock_run.assert_called_once_with(mock_args.return_value)


@patch("studio_booking.cli.config.DEFAULT_DURATION_HOURS", 3.0)
def test_event_hours_default_from_config():
    args = cli.parse_arguments(["event", "--date", "2025-06-14", "--slot", "9:00 AM"])
    assert args.hours == 3.0


@patch("studio_booking.cli.get_timezone")
@patch("studio_booking.cli.get_slot_menu")
def test_event_command_rejects_infinite_hours(mock_menu, mock_tz, menu, denver):
    mock_menu.return_value = menu
    mock_tz.return_value = denver
    assert cli.main(["event", "--date", "2025-06-14", "--slot", "9:00 AM", "--hours", "inf"]) == cli.EXIT_INVALID
