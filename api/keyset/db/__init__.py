"""Data sources for the Keyset Pagination API."""

from .memory import InMemoryDataSource
from .postgres import PostgresDataSource

__all__ = [
    "InMemoryDataSource",
    "PostgresDataSource"
]
