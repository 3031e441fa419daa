"""Date parsing helpers. Everything is stored and compared as naive UTC."""

from datetime import datetime, timezone
from typing import Optional


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(raw: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime string ("2030-06-01", "2030-06-01T09:00:00Z").
    Returns None when the value can't be parsed.
    """
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return to_utc_naive(datetime.fromisoformat(text))
    except ValueError:
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
