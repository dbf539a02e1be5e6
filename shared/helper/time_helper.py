"""Timestamp helpers. All timestamps are rendered in the configured TIMEZONE."""

import os
from datetime import datetime

from pytz import timezone


def now_iso() -> str:
    """Return the current time as an ISO-8601 string in the TIMEZONE zone."""
    return datetime.now(timezone(os.getenv("TIMEZONE", "Europe/Berlin"))).isoformat()
