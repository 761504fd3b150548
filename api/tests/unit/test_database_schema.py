"""Tests for the records schema declared in the SQLAlchemy models."""

from sqlalchemy import BigInteger, DateTime, Text

from keyset.db.models import Base, Record
from keyset.routes.records import RECORD_COLUMNS


class TestRecordsSchema:
    """Test the records table definition."""

    def test_table_registered(self):
        assert "records" in Base.metadata.tables

    def test_columns(self):
        """Test column types and nullability."""
        columns = Record.__table__.columns

        assert isinstance(columns["id"].type, BigInteger)
        assert columns["id"].primary_key
        assert isinstance(columns["name"].type, Text)
        assert columns["name"].nullable is False
        assert columns["category"].nullable is True
        assert isinstance(columns["created_at"].type, DateTime)
        assert columns["created_at"].type.timezone is True
        assert columns["created_at"].nullable is False

    def test_api_columns_exist(self):
        """Test every column the API selects is part of the table."""
        assert set(RECORD_COLUMNS) == set(Record.__table__.columns.keys())

    def test_sort_indexes(self):
        """Test sortable fields are indexed together with the id tiebreaker."""
        indexes = {
            index.name: [column.name for column in index.columns]
            for index in Record.__table__.indexes
        }

        assert indexes["records_created_at_id"] == ["created_at", "id"]
        assert indexes["records_category_id"] == ["category", "id"]
