"""Keyset Pagination API: cursor-based pagination over ordered record collections."""

__version__ = "1.0.0"
