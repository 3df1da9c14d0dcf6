import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import google.auth.exceptions
import google.auth.transport.requests
import requests
from google.oauth2 import service_account

from studio_booking import config
from studio_booking.errors import CalendarUnavailableError
from studio_booking.models import BusyInterval
from studio_booking.timeutils import get_timezone, local_timestamp, to_local

logger = logging.getLogger(__name__)


def load_credentials(
    client_email: str | None = None, private_key: str | None = None
) -> Optional[service_account.Credentials]:
    """Builds service account credentials from the configured email and private key."""
    client_email = client_email or config.GOOGLE_CLIENT_EMAIL
    private_key = private_key or config.GOOGLE_PRIVATE_KEY
    if not client_email or not private_key:
        return None

    # Keys pasted into env files usually carry literal "\\n" sequences
    if "\\n" in private_key:
        private_key = private_key.replace("\\n", "\n")

    info = {
        "type": "service_account",
        "client_email": client_email,
        "private_key": private_key,
        "token_uri": config.GOOGLE_TOKEN_URI,
    }
    try:
        return service_account.Credentials.from_service_account_info(info, scopes=config.GOOGLE_CALENDAR_SCOPES)
    except ValueError as e:
        logger.error(f"Invalid Google service account key: {e}")
        raise CalendarUnavailableError("Google Calendar credentials are invalid") from e


class GoogleCalendarClient:
    """Thin wrapper over the Google Calendar v3 events endpoints."""

    def __init__(
        self,
        calendar_id: str | None = None,
        access_token: str | None = None,
        credentials: service_account.Credentials | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
    ):
        self.calendar_id = calendar_id or config.GOOGLE_CALENDAR_ID
        self.access_token = access_token or config.GOOGLE_CALENDAR_ACCESS_TOKEN
        self.credentials = credentials if credentials is not None else (None if access_token else load_credentials())
        self.base_url = (base_url or config.GOOGLE_CALENDAR_API_BASE).rstrip("/")
        self.timeout = timeout or config.GOOGLE_CALENDAR_TIMEOUT
        self.session = session or requests.Session()

    def _events_url(self) -> str:
        if not self.calendar_id or not (self.credentials or self.access_token):
            raise CalendarUnavailableError("Google Calendar credentials are not configured")
        return f"{self.base_url}/calendars/{quote(self.calendar_id, safe='')}/events"

    def _bearer_token(self) -> str:
        if self.credentials is None:
            return self.access_token
        if not self.credentials.valid:
            logger.info("Refreshing Google Calendar access token")
            try:
                self.credentials.refresh(google.auth.transport.requests.Request())
            except google.auth.exceptions.GoogleAuthError as e:
                logger.error(f"Google Calendar token refresh failed: {e}")
                raise CalendarUnavailableError("Calendar authentication failed") from e
        return self.credentials.token

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._bearer_token()}", "Accept": "application/json"}

    def list_events(self, time_min: datetime, time_max: datetime) -> List[Dict[str, Any]]:
        """Lists single events overlapping [time_min, time_max), following pagination."""
        url = self._events_url()
        params: Dict[str, Any] = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        items: List[Dict[str, Any]] = []

        while True:
            logger.info(f"Listing calendar events {params['timeMin']} -> {params['timeMax']}")
            try:
                response = self.session.get(url, headers=self._headers(), params=params, timeout=self.timeout)
                response.raise_for_status()
                data: Dict = response.json()
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.error(f"Failed to list calendar events: {e}")
                raise CalendarUnavailableError("Calendar temporarily unavailable") from e

            items.extend(data.get("items", []))
            page_token = data.get("nextPageToken")
            if not page_token:
                break
            params["pageToken"] = page_token

        logger.debug(f"Found {len(items)} events")
        return items

    def insert_event(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Creates an event without notifying attendees and returns the created resource."""
        url = self._events_url()
        try:
            response = self.session.post(
                url,
                headers=self._headers(),
                params={"sendUpdates": "none"},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            created: Dict = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Failed to create calendar event: {e}")
            raise CalendarUnavailableError("Calendar event could not be created") from e

        logger.info(f"Calendar event created: {created.get('id')}")
        return created


def _parse_boundary(boundary: Dict[str, Any], tz: ZoneInfo) -> Optional[datetime]:
    if boundary.get("dateTime"):
        value = datetime.fromisoformat(boundary["dateTime"].replace("Z", "+00:00"))
        if value.tzinfo is None:
            zone = ZoneInfo(boundary["timeZone"]) if boundary.get("timeZone") else tz
            value = value.replace(tzinfo=zone)
        return to_local(value, tz)
    if boundary.get("date"):
        # All-day events span local midnight to midnight
        return local_timestamp(date.fromisoformat(boundary["date"]), 0, 0, tz)
    return None


def parse_event(item: Dict[str, Any], tz: ZoneInfo) -> Optional[BusyInterval]:
    """Normalizes a Google Calendar event into a busy interval in the fixed timezone.

    Returns None for events that do not occupy time: cancelled, marked as
    free, missing a boundary, or zero-length. Unreadable times raise
    CalendarUnavailableError so they never show up as free slots.
    """
    if item.get("status") == "cancelled" or item.get("transparency") == "transparent":
        return None

    try:
        start = _parse_boundary(item.get("start") or {}, tz)
        end = _parse_boundary(item.get("end") or {}, tz)
    except (ValueError, ZoneInfoNotFoundError) as e:
        logger.error(f"Cannot read times of calendar event {item.get('id')}: {e}")
        raise CalendarUnavailableError("Calendar returned an event with unreadable times") from e
    if start is None or end is None:
        logger.warning(f"Skipping event {item.get('id')} without start/end")
        return None
    if start.astimezone(timezone.utc) >= end.astimezone(timezone.utc):
        logger.warning(f"Skipping event {item.get('id')} with non-positive length")
        return None

    return BusyInterval(start=start, end=end, label=item.get("summary"))


def fetch_busy_intervals(client: GoogleCalendarClient, day: date, tz: ZoneInfo | None = None) -> List[BusyInterval]:
    """Fetches every busy interval touching the local calendar day."""
    tz = tz or get_timezone()
    day_start = local_timestamp(day, 0, 0, tz)
    day_end = local_timestamp(day + timedelta(days=1), 0, 0, tz)

    intervals = []
    for item in client.list_events(day_start, day_end):
        interval = parse_event(item, tz)
        if interval is not None:
            intervals.append(interval)
    return intervals
