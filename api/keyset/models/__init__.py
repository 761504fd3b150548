"""Data models for the Keyset Pagination API."""

from .records import Record, RecordListResponse

__all__ = [
    "Record",
    "RecordListResponse"
]
