"""Error handling module for the Keyset Pagination API."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    InternalServerError,
    ServiceUnavailableError,
    create_problem_response,
    problem_from_pagination_error
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "BadRequestError",
    "InternalServerError",
    "ServiceUnavailableError",
    "create_problem_response",
    "problem_from_pagination_error",
    "register_exception_handlers"
]
