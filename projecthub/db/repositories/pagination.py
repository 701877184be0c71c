"""Offset pagination for list queries."""

import math
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


def paginate(session: Session, query: Select, page: int, limit: int) -> tuple[list[Any], dict[str, int]]:
    """Run query for one page; return (rows, {page, limit, total, pages})."""
    page = max(1, page)
    limit = max(1, limit)
    total = session.scalar(select(func.count()).select_from(query.order_by(None).subquery())) or 0
    rows = list(session.scalars(query.offset((page - 1) * limit).limit(limit)).all())
    return rows, {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit)}
