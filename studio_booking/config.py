import logging
import os
from typing import List

logger = logging.getLogger(__name__)

# --- Time & slot menu ---
TIMEZONE = os.environ.get("BOOKING_TIMEZONE", "America/Denver")

# Comma-separated labels, e.g. "9:00 AM,10:30 AM". Empty means use the generated schedule.
SLOT_LABELS: List[str] = [
    label.strip() for label in os.environ.get("SLOT_LABELS", "").split(",") if label.strip()
]
SLOT_START_HOUR = int(os.environ.get("SLOT_START_HOUR", "6"))
SLOT_END_HOUR = int(os.environ.get("SLOT_END_HOUR", "20"))
SLOT_STEP_MINUTES = int(os.environ.get("SLOT_STEP_MINUTES", "60"))

# --- Bookings ---
DEFAULT_DURATION_HOURS = float(os.environ.get("DEFAULT_DURATION_HOURS", "2"))
MIN_DURATION_HOURS = float(os.environ.get("MIN_DURATION_HOURS", "0.5"))

# --- File Paths ---
DATA_DIR = "public/data"
REPORT_FILE = os.environ.get("REPORT_FILE", os.path.join(DATA_DIR, "availability.json"))

# --- Google Calendar ---
GOOGLE_CALENDAR_ID = os.environ.get("GOOGLE_CALENDAR_ID")
GOOGLE_CLIENT_EMAIL = os.environ.get("GOOGLE_CLIENT_EMAIL")
GOOGLE_PRIVATE_KEY = os.environ.get("GOOGLE_PRIVATE_KEY")
GOOGLE_TOKEN_URI = os.environ.get("GOOGLE_TOKEN_URI", "https://oauth2.googleapis.com/token")
GOOGLE_CALENDAR_SCOPES: List[str] = ["https://www.googleapis.com/auth/calendar"]
# Static bearer token, used only when no service account is configured
GOOGLE_CALENDAR_ACCESS_TOKEN = os.environ.get("GOOGLE_CALENDAR_ACCESS_TOKEN")
GOOGLE_CALENDAR_API_BASE = os.environ.get("GOOGLE_CALENDAR_API_BASE", "https://www.googleapis.com/calendar/v3")
GOOGLE_CALENDAR_TIMEOUT = int(os.environ.get("GOOGLE_CALENDAR_TIMEOUT", "10"))

# --- Event display ---
EVENT_LOCATION = os.environ.get("EVENT_LOCATION", "Merritt Fitness, 2246 Irving St, Denver, CO 80211")
EVENT_COLOR_ID = "10"  # green, confirmed bookings
EVENT_REMINDER_MINUTES: List[int] = [24 * 60, 60]

if not GOOGLE_CALENDAR_ID or not ((GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY) or GOOGLE_CALENDAR_ACCESS_TOKEN):
    logger.warning("Google Calendar configuration incomplete. Calendar reads and writes will fail.")
