"""Ordering and paging helpers shared by the list queries."""
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Query


def apply_sort(
    q: Query,
    columns: Dict[str, Any],
    sort_field: Optional[str],
    sort_direction: Optional[str],
    default: Tuple[Any, str],
    tiebreaker: Any,
) -> Query:
    if sort_field and sort_field in columns:
        column = columns[sort_field]
        direction = sort_direction or "asc"
    else:
        column, direction = default
        direction = sort_direction or direction
    ordered = column.desc() if direction == "desc" else column.asc()
    return q.order_by(ordered, tiebreaker.asc())


def paginate(q: Query, skip: int, limit: int) -> Tuple[List[Any], int]:
    """Return ``(items, total)`` for the window ``[skip, skip + limit)``."""
    total = q.order_by(None).count()
    items = q.offset(skip).limit(limit).all()
    return items, total
