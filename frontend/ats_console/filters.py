"""
Pagination window and filter helpers
"""
from typing import Any, Dict, List, Union

ELLIPSIS = "..."

DEFAULT_FILTERS: Dict[str, Any] = {"page": 1, "limit": 10}

# Changing any of these starts the listing again from page 1
PAGE_RESETTING_FILTERS = ("search", "status", "sortBy", "sortOrder", "limit")


def visible_pages(current: int, total: int, max_visible: int = 5) -> List[Union[int, str]]:
    """
    Page numbers to show around ``current``.

    Up to ``max_visible`` pages are listed outright. Beyond that the window
    starts two pages before ``current`` and the first and last pages are kept,
    separated by ``"..."`` when there is a gap.
    """
    if total <= max_visible:
        return list(range(1, total + 1))

    start = max(1, current - 2)
    end = min(total, start + max_visible - 1)

    pages: List[Union[int, str]] = []
    if start > 1:
        pages.append(1)
        if start > 2:
            pages.append(ELLIPSIS)

    pages.extend(range(start, end + 1))

    if end < total:
        if end < total - 1:
            pages.append(ELLIPSIS)
        pages.append(total)
    return pages


def has_active_filters(filters: Dict[str, Any]) -> bool:
    return bool(
        filters.get("search")
        or filters.get("status")
        or filters.get("sortBy", "createdAt") != "createdAt"
        or filters.get("sortOrder", "desc") != "desc"
    )
