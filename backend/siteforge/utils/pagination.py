# siteforge/utils/pagination.py
from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple, TypedDict, Type, Any

from sqlalchemy.orm import Query
from sqlalchemy.sql import or_, and_

from siteforge.errors import ValidationError

MAX_PAGE_SIZE = 100


class CursorMeta(TypedDict):
    """
    Strongly-typed cursor pagination metadata.

    Explicit keys prevent contract drift across list_* endpoints.
    """
    has_more: bool
    next_cursor: Optional[str]
    prev_cursor: Optional[str]


def encode_cursor(created_at: datetime, row_id: Any) -> str:
    """
    Encode a cursor using a stable, deterministic sort key.

    Format: ISO8601|<id>
    """
    if not isinstance(created_at, datetime) or row_id is None:
        raise ValueError("created_at and row_id are required to encode cursor")

    return f"{created_at.isoformat()}|{row_id}"


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    """
    Decode a cursor into (created_at, id).

    Raises:
    - ValidationError if cursor format or timestamp is invalid
    """
    if not cursor or "|" not in cursor:
        raise ValidationError("Invalid cursor format")

    try:
        ts_str, row_id = cursor.split("|", 1)
        return datetime.fromisoformat(ts_str), row_id
    except ValueError as exc:
        raise ValidationError("Invalid cursor format") from exc


def apply_cursor(
    query: Query,
    *,
    model: Type[Any],
    cursor: Optional[str],
) -> Query:
    """
    Restrict ``query`` to rows strictly older than ``cursor``.

    Ordering contract (MANDATORY):
      ORDER BY created_at DESC, id DESC
    """
    if not cursor:
        return query

    cursor_ts, cursor_id = decode_cursor(cursor)

    return query.filter(
        or_(
            model.created_at < cursor_ts,
            and_(
                model.created_at == cursor_ts,
                model.id < cursor_id,
            ),
        )
    )


def paginate_cursor(
    query: Query,
    *,
    model: Type[Any],
    limit: int,
    cursor: Optional[str] = None,
) -> tuple[list[Any], CursorMeta]:
    """
    Execute a cursor-paginated query.

    Strategy:
    - Fetch limit + 1 rows to detect continuation
    - Trim extra row from result set
    - Generate the next cursor from the last returned row
    """
    if limit <= 0:
        raise ValidationError("Limit must be greater than zero")

    limit = min(limit, MAX_PAGE_SIZE)

    ordered_query = apply_cursor(query, model=model, cursor=cursor).order_by(
        model.created_at.desc(),
        model.id.desc(),
    )

    rows = ordered_query.limit(limit + 1).all()

    has_more = len(rows) > limit
    items = rows[:limit]

    next_cursor: Optional[str] = None
    if items and has_more:
        last = items[-1]
        next_cursor = encode_cursor(last.created_at, last.id)

    return items, {
        "has_more": has_more,
        "next_cursor": next_cursor,
        "prev_cursor": cursor,
    }


def paginate_offset(query: Query, *, page: int = 1, per_page: int = 20) -> tuple[list[Any], int]:
    """Classic page/per_page slicing; returns (items, total)."""
    if page < 1 or per_page < 1:
        raise ValidationError("page and per_page must be positive")

    per_page = min(per_page, MAX_PAGE_SIZE)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return items, total
