"""Lenient field types shared by request models."""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

from projecthub.utils.dates import parse_datetime


def _coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise ValueError(f"Invalid date/time: {value!r}")
    return parsed


FlexibleDatetime = Annotated[Optional[datetime], BeforeValidator(_coerce_datetime)]
