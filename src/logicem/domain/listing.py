"""Filter / sort / paginate helpers shared by every list view.

Records are plain dicts (the JSON documents from the store). Sorting
compares timestamps as datetimes, task priority by rank, and everything
else as a lower-cased string.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from logicem.domain.lifecycle import PRIORITY_RANK

DEFAULT_PAGE_SIZE = 20

DATE_FIELDS = frozenset(
    {"created_at", "updated_at", "closed_at", "completed_at", "deactivated_at", "campaign_date"}
)


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class ListQuery(BaseModel):
    """Search, sort, and page parameters for a list view."""

    model_config = {"frozen": True}

    search: str = ""
    sort_field: str = "created_at"
    direction: SortDirection = SortDirection.DESC
    page: int = 1
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)


class Page(BaseModel):
    """One page of a filtered, sorted list."""

    model_config = {"frozen": True}

    items: list[dict[str, Any]]
    page: int
    page_size: int
    total: int
    total_pages: int


def _parse_timestamp(value: Any) -> float:
    if not value:
        return float("-inf")
    try:
        return datetime.fromisoformat(str(value)).timestamp()
    except ValueError:
        return float("-inf")


def sort_key(record: dict[str, Any], field: str) -> Any:
    """Comparable key for *record* on *field*."""
    value = record.get(field)
    if field in DATE_FIELDS:
        return _parse_timestamp(value)
    if field == "priority":
        return PRIORITY_RANK.get(str(value), 0)
    return "" if value is None else str(value).lower()


def sort_records(
    records: Iterable[dict[str, Any]],
    field: str,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[dict[str, Any]]:
    """Return *records* sorted on *field*; stable for equal keys."""
    descending = SortDirection(direction) is SortDirection.DESC
    return sorted(records, key=lambda r: sort_key(r, field), reverse=descending)


def matches_search(record: dict[str, Any], term: str, fields: Sequence[str]) -> bool:
    """Case-insensitive substring match of *term* against any of *fields*.

    An empty term matches every record.
    """
    needle = term.strip().lower()
    if not needle:
        return True
    for field in fields:
        value = record.get(field)
        if value is not None and needle in str(value).lower():
            return True
    return False


def paginate(items: Sequence[dict[str, Any]], page: int, page_size: int) -> Page:
    """Slice *items* into a 1-based page. Pages below 1 clamp to 1."""
    page = max(1, page)
    total = len(items)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=page,
        page_size=page_size,
        total=total,
        total_pages=math.ceil(total / page_size) if total else 0,
    )
