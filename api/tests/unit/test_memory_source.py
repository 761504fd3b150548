"""Tests for the in-memory data source."""

import pytest

from keyset.db.memory import InMemoryDataSource, matches, sort_records
from keyset.pagination import Comparison, DataSource, InvalidCursorError, Operator, SortDirection, SortSpec


class TestMatches:
    """Test filter evaluation."""

    @pytest.fixture
    def record(self):
        return {"id": 5, "name": "Record 5", "category": "odd", "deleted_at": None}

    def test_empty_filter(self, record):
        assert matches(record, {})

    def test_equality(self, record):
        assert matches(record, {"category": "odd"})
        assert not matches(record, {"category": "even"})

    def test_null_equality(self, record):
        assert matches(record, {"deleted_at": None})
        assert not matches(record, {"category": None})

    def test_membership(self, record):
        assert matches(record, {"category": ["odd", "prime"]})
        assert not matches(record, {"category": ("even",)})
        assert matches(record, {"id": Comparison(Operator.IN, {4, 5})})

    @pytest.mark.parametrize("op,value,expected", [
        (Operator.LT, 6, True),
        (Operator.LT, 5, False),
        (Operator.LTE, 5, True),
        (Operator.GT, 4, True),
        (Operator.GT, 5, False),
        (Operator.GTE, 5, True),
        (Operator.NE, 5, False),
        (Operator.EQ, 5, True),
    ])
    def test_comparisons(self, record, op, value, expected):
        assert matches(record, {"id": Comparison(op, value)}) is expected

    def test_null_never_orders(self, record):
        """Test NULL values fail ordering comparisons."""
        assert not matches(record, {"deleted_at": Comparison(Operator.LT, 10)})
        assert not matches(record, {"deleted_at": Comparison(Operator.GT, 10)})

    def test_incomparable_value(self, record):
        """Test comparing against a value of another type is a cursor error."""
        with pytest.raises(InvalidCursorError):
            matches(record, {"id": Comparison(Operator.LT, "16")})

    def test_missing_field(self, record):
        assert not matches(record, {"unknown": 1})

    def test_all_constraints_apply(self, record):
        assert matches(record, {"category": "odd", "id": Comparison(Operator.GT, 1)})
        assert not matches(record, {"category": "odd", "id": Comparison(Operator.GT, 5)})


class TestSortRecords:
    """Test multi-key sorting."""

    def test_multi_key(self):
        """Test secondary keys break ties."""
        rows = [
            {"id": 1, "group": "b"},
            {"id": 2, "group": "a"},
            {"id": 3, "group": "b"},
            {"id": 4, "group": "a"},
        ]
        ordered = sort_records(rows, [SortSpec("group", SortDirection.ASC), SortSpec("id", SortDirection.DESC)])

        assert [row["id"] for row in ordered] == [4, 2, 3, 1]

    def test_nulls_last_asc_first_desc(self):
        """Test NULL placement follows PostgreSQL defaults."""
        rows = [{"id": 1, "rank": None}, {"id": 2, "rank": 2}, {"id": 3, "rank": 1}]

        asc = sort_records(rows, [SortSpec("rank", SortDirection.ASC)])
        desc = sort_records(rows, [SortSpec("rank", SortDirection.DESC)])

        assert [row["id"] for row in asc] == [3, 2, 1]
        assert [row["id"] for row in desc] == [1, 2, 3]


class TestInMemoryDataSource:
    """Test the DataSource operations."""

    def test_satisfies_protocol(self):
        """Test the source implements the DataSource protocol."""
        assert isinstance(InMemoryDataSource(), DataSource)

    @pytest.mark.asyncio
    async def test_count(self, memory_source):
        assert await memory_source.count({}) == 20
        assert await memory_source.count({"category": "even"}) == 10
        assert await memory_source.count({"id": Comparison(Operator.GT, 15)}) == 5

    @pytest.mark.asyncio
    async def test_fetch_page(self, memory_source):
        rows = await memory_source.fetch_page(
            {"category": "odd"}, [SortSpec("id", SortDirection.DESC)], 3
        )

        assert [row["id"] for row in rows] == [19, 17, 15]

    @pytest.mark.asyncio
    async def test_fetch_one(self, memory_source):
        row = await memory_source.fetch_one({"id": Comparison(Operator.LT, 3)}, [SortSpec("id", SortDirection.ASC)])
        missing = await memory_source.fetch_one({"id": Comparison(Operator.LT, 1)}, [SortSpec("id", SortDirection.ASC)])

        assert row["id"] == 1
        assert missing is None

    @pytest.mark.asyncio
    async def test_add(self):
        source = InMemoryDataSource()
        source.add({"id": 1})

        assert await source.count({}) == 1
