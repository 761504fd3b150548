"""Exceptions raised by the pagination core."""

from typing import Optional


class PaginationError(Exception):
    """Base exception for all pagination errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidArgumentError(PaginationError):
    """Raised when the caller passes bad input (conflicting cursors, bad limit or order)."""


class InvalidCursorError(PaginationError):
    """Raised when a cursor token cannot be decoded."""


class DataSourceError(PaginationError):
    """Raised by data sources when the underlying storage fails."""
