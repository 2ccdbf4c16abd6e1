"""Unit tests for pagination."""

import pytest
from sqlalchemy import select

from library_api.core.database import MAX_INTEGER
from library_api.models import Book
from library_api.services.pagination import (
    PageRequest,
    coerce_positive_int,
    get_page_request,
    paginate,
    paginate_query,
)


class TestCoercePositiveInt:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, 3),
            ("", 3),
            ("abc", 3),
            ("2.5", 3),
            ("0", 3),
            ("-4", 3),
            ("7", 7),
            (" 12 ", 12),
        ],
    )
    def test_coerce(self, raw, expected):
        assert coerce_positive_int(raw, 3) == expected


class TestPageRequest:
    def test_defaults(self):
        """Missing query values fall back to page 1 of 3."""
        page_request = get_page_request(page=None, limit=None)
        assert page_request == PageRequest(page=1, limit=3)

    def test_non_numeric_values_use_defaults(self):
        assert get_page_request(page="two", limit="many") == PageRequest(page=1, limit=3)

    def test_offset(self):
        assert PageRequest(page=1, limit=3).offset == 0
        assert PageRequest(page=3, limit=4).offset == 8

    def test_huge_offset_is_beyond_store(self):
        assert PageRequest(page=10**20, limit=3).is_beyond_store
        assert PageRequest(page=3, limit=MAX_INTEGER).is_beyond_store
        assert not PageRequest(page=1, limit=10**20).is_beyond_store


class TestPaginate:
    def test_second_page_of_five(self):
        """Page 2 of limit 3 over five items holds items 3 and 4."""
        assert paginate([0, 1, 2, 3, 4], page=2, limit=3) == [3, 4]

    def test_page_past_the_end_is_empty(self):
        assert paginate([0, 1, 2], page=5, limit=3) == []

    def test_window_positions(self):
        items = list(range(20))
        for page in range(1, 6):
            for limit in range(1, 6):
                window = paginate(items, page, limit)
                assert len(window) <= limit
                assert window == items[(page - 1) * limit : page * limit]


class TestPaginateQuery:
    def test_orders_by_primary_key_and_windows(self):
        stmt = paginate_query(select(Book), Book, PageRequest(page=2, limit=3))
        compiled = stmt.compile(compile_kwargs={"literal_binds": True})
        sql = str(compiled)

        assert "ORDER BY books.id" in sql
        assert "LIMIT 3" in sql
        assert "OFFSET 3" in sql

    def test_huge_limit_is_capped(self):
        stmt = paginate_query(select(Book), Book, PageRequest(page=1, limit=10**20))
        sql = str(stmt.compile(compile_kwargs={"literal_binds": True}))

        assert f"LIMIT {MAX_INTEGER}" in sql

    async def test_matches_in_memory_window(self, test_session, five_books):
        """The SQL window and the in-memory window select the same rows."""
        ids = sorted(book.id for book in five_books)
        for page in range(1, 5):
            for limit in range(1, 7):
                stmt = paginate_query(select(Book), Book, PageRequest(page=page, limit=limit))
                result = await test_session.execute(stmt)
                window = [book.id for book in result.scalars().all()]
                assert window == paginate(ids, page, limit)
