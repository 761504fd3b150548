"""HTTP middleware for the Keyset Pagination API."""

from .request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
