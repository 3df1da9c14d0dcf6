from datetime import date as CalendarDate, datetime, timezone
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from studio_booking import config

AvailabilityMap = Dict[str, bool]


class Slot(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)


class BusyInterval(BaseModel):
    """Half-open [start, end) range already committed on the calendar."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    label: str | None = None

    @field_validator("start", "end")
    @classmethod
    def _require_offset(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("timestamps must carry a UTC offset")
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "BusyInterval":
        if self.start.astimezone(timezone.utc) >= self.end.astimezone(timezone.utc):
            raise ValueError(f"interval start {self.start.isoformat()} must be before end {self.end.isoformat()}")
        return self

    def contains(self, instant: datetime) -> bool:
        # compare in UTC; same-zone datetimes would otherwise compare by wall clock
        utc = instant.astimezone(timezone.utc)
        return self.start.astimezone(timezone.utc) <= utc < self.end.astimezone(timezone.utc)


class BookingRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: CalendarDate
    slot: str  # menu label, e.g. "2:00 PM"
    duration_hours: float = Field(default_factory=lambda: config.DEFAULT_DURATION_HOURS, allow_inf_nan=False)


class BookingDetails(BaseModel):
    """Display metadata attached to the calendar event of a confirmed booking."""

    model_config = ConfigDict(frozen=True)

    booking_id: str
    event_name: str
    contact_name: str
    email: str
    phone: str | None = None
    event_type: str | None = None
    business_name: str | None = None
    special_requests: str | None = None
    status: str = "confirmed"
    calendar_event_id: str | None = None


class DayAvailability(BaseModel):
    date: str
    availability: AvailabilityMap
    available_count: int
    message: str
