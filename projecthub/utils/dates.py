"""Datetime parsing for request fields and query params."""

from datetime import date, datetime, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite hands them back without tzinfo)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO date or datetime (``Z`` suffix allowed). Returns None for empty or invalid input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    try:
        s = str(value).strip().replace("Z", "+00:00")
        if not s:
            return None
        if len(s) <= 10:
            return datetime.fromisoformat(s + "T00:00:00+00:00")
        return ensure_utc(datetime.fromisoformat(s))
    except (ValueError, TypeError):
        return None


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Serialize a stored datetime as ISO-8601 UTC."""
    value = ensure_utc(value)
    return value.isoformat() if value is not None else None


def epoch_millis() -> int:
    """Current time in milliseconds, used in synthesized import keys."""
    return int(utcnow().timestamp() * 1000)
