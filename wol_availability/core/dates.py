"""Parsing of operator-supplied dates: naive dates and times are in settings.time_zone."""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from wol_availability.config import settings


def parse_local(value: str) -> datetime:
    """'2026-10-19' or '2026-10-19T18:00' in the local zone (or with an explicit offset) -> UTC."""
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(settings.time_zone))
    return dt.astimezone(timezone.utc)
