# siteforge/normalizers/pagination.py
from typing import Callable, Any, List, Optional, Dict

from siteforge.utils.pagination import CursorMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    cursor: Optional[CursorMeta] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    total: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Wrap a page of ORM rows as ``{"items": [...], "pagination": {...}}``.

    Cursor metadata wins when given; otherwise page/per_page (and total,
    when known) describe an offset page.
    """
    response: Dict[str, Any] = {
        "items": [normalize_fn(item) for item in items],
    }

    if cursor is not None:
        response["pagination"] = {
            "has_more": cursor["has_more"],
            "next_cursor": cursor["next_cursor"],
            "prev_cursor": cursor["prev_cursor"],
        }
        return response

    if page is not None and per_page is not None:
        response["pagination"] = {"page": page, "per_page": per_page}

        if total is not None:
            response["pagination"]["total"] = total
            response["pagination"]["total_pages"] = (total + per_page - 1) // per_page

    return response


def normalize_page_envelope(envelope: Dict[str, Any], normalize_fn: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
    """Normalize the items of a ``{items, totalCount, page, pageSize, totalPages}`` envelope."""
    return {**envelope, "items": [normalize_fn(item) for item in envelope["items"]]}
