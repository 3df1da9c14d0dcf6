import json
import logging
import os
from datetime import datetime, timezone
from typing import List

from studio_booking import config
from studio_booking.models import DayAvailability

logger = logging.getLogger(__name__)


def ensure_parent_dir(path: str):
    """Ensures the directory holding path exists."""
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)


def save_report(days: List[DayAvailability], path: str | None = None):
    """Saves availability results to a JSON file with a last-updated timestamp."""
    path = path or config.REPORT_FILE
    ensure_parent_dir(path)
    try:
        data = {
            "last_updated": datetime.now(timezone.utc).isoformat(),
            "days": [day.model_dump() for day in days],
        }
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        logger.info(f"Saved report to {path}")
    except IOError as e:
        logger.error(f"Failed to save report: {e}")
