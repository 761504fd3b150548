"""API routes for the Keyset Pagination API."""

from .records import router as records_router

__all__ = ["records_router"]
