"""Datetime utilities."""

from datetime import datetime, timezone
from typing import Optional


def parse_optional_datetime(value) -> Optional[datetime]:
    """Parse datetime from ISO string, pass datetimes through, keep None as None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    raise TypeError(f"Cannot parse datetime from {type(value).__name__}")


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
