"""Tests for search, sort, and pagination helpers."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from logicem.domain.listing import (
    ListQuery,
    SortDirection,
    matches_search,
    paginate,
    sort_records,
)


def _rows() -> list[dict[str, Any]]:
    return [
        {"id": "a", "name": "Bravo", "priority": "alta", "created_at": "2024-01-02T00:00:00Z"},
        {"id": "b", "name": "alpha", "priority": "urgente", "created_at": "2024-01-03T00:00:00Z"},
        {"id": "c", "name": "Charlie", "priority": "baja", "created_at": "2024-01-01T00:00:00Z"},
    ]


class TestSortRecords:
    def test_strings_case_insensitive(self) -> None:
        ids = [r["id"] for r in sort_records(_rows(), "name", SortDirection.ASC)]
        assert ids == ["b", "a", "c"]

    def test_dates_descending(self) -> None:
        ids = [r["id"] for r in sort_records(_rows(), "created_at", "desc")]
        assert ids == ["b", "a", "c"]

    def test_priority_by_rank(self) -> None:
        ids = [r["id"] for r in sort_records(_rows(), "priority", "asc")]
        assert ids == ["c", "a", "b"]

    def test_missing_dates_sort_first_ascending(self) -> None:
        rows = [*_rows(), {"id": "d", "name": "Delta", "created_at": None}]
        assert sort_records(rows, "created_at")[0]["id"] == "d"

    def test_stable_for_equal_keys(self) -> None:
        rows = [{"id": str(i), "status": "x"} for i in range(5)]
        assert [r["id"] for r in sort_records(rows, "status")] == ["0", "1", "2", "3", "4"]


class TestMatchesSearch:
    def test_empty_term_matches(self) -> None:
        assert matches_search({"name": "x"}, "  ", ("name",))

    def test_case_insensitive_substring(self) -> None:
        assert matches_search({"name": "Transporte Bogotá"}, "BOGOTÁ", ("name",))

    def test_only_listed_fields(self) -> None:
        assert not matches_search({"name": "x", "email": "bogota"}, "bogota", ("name",))

    def test_none_values_skipped(self) -> None:
        assert not matches_search({"name": None}, "none", ("name",))


class TestPaginate:
    def test_first_page(self) -> None:
        page = paginate(_rows(), 1, 2)
        assert [r["id"] for r in page.items] == ["a", "b"]
        assert page.total == 3
        assert page.total_pages == 2

    def test_last_page_partial(self) -> None:
        page = paginate(_rows(), 2, 2)
        assert [r["id"] for r in page.items] == ["c"]

    def test_page_below_one_clamps(self) -> None:
        assert paginate(_rows(), 0, 2).page == 1

    def test_page_past_end_is_empty(self) -> None:
        page = paginate(_rows(), 5, 2)
        assert page.items == []
        assert page.total == 3

    def test_empty(self) -> None:
        page = paginate([], 1, 20)
        assert page.total_pages == 0


class TestListQuery:
    def test_defaults(self) -> None:
        query = ListQuery()
        assert query.sort_field == "created_at"
        assert query.direction is SortDirection.DESC
        assert query.page_size == 20

    def test_page_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ListQuery(page_size=0)
