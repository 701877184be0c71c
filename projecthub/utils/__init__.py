"""Utility modules."""

from projecthub.utils.dates import ensure_utc, epoch_millis, isoformat, parse_datetime, utcnow
from projecthub.utils.logger import bind_context, clear_context, get_logger

__all__ = [
    "get_logger",
    "bind_context",
    "clear_context",
    "parse_datetime",
    "isoformat",
    "ensure_utc",
    "utcnow",
    "epoch_millis",
]
