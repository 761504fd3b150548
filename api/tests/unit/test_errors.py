"""Tests for error handling and Problem Details implementation."""

import json

import pytest
from fastapi import Request
from fastapi.responses import JSONResponse
from unittest.mock import Mock

from keyset.errors.problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    InternalServerError,
    ServiceUnavailableError,
    create_problem_response,
    problem_from_pagination_error
)
from keyset.pagination.exceptions import (
    PaginationError,
    InvalidArgumentError,
    InvalidCursorError,
    DataSourceError
)


class TestProblemDetail:
    """Test ProblemDetail model."""

    def test_problem_detail_defaults(self):
        """Test ProblemDetail with default values."""
        problem = ProblemDetail(title="Test Error", status=400)

        assert problem.type == "about:blank"
        assert problem.title == "Test Error"
        assert problem.status == 400
        assert problem.detail is None
        assert problem.instance is None

    def test_problem_detail_extra_fields(self):
        """Test ProblemDetail allows extra fields."""
        problem = ProblemDetail(title="Test Error", status=400, error="invalid_cursor")

        assert problem.error == "invalid_cursor"


class TestProblemDetailException:
    """Test ProblemDetailException base class."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = ProblemDetailException(status=400, title="Test Error", detail="Test detail")

        assert exc.status == 400
        assert exc.title == "Test Error"
        assert exc.detail == "Test detail"
        assert exc.type_uri == "about:blank"
        assert exc.instance is None
        assert str(exc) == "Test detail"

    def test_to_problem_detail_with_request(self):
        """Test the request path becomes the instance."""
        request = Mock(spec=Request)
        request.url.path = "/v1/records"

        problem = ProblemDetailException(status=400, title="Test Error").to_problem_detail(request)

        assert problem.instance == "/v1/records"

    def test_to_problem_detail_with_extensions(self):
        """Test extensions are carried onto the problem."""
        exc = ProblemDetailException(status=400, title="Test Error", error_code="TEST_001")

        assert exc.to_problem_detail().error_code == "TEST_001"

    def test_to_response(self):
        """Test converting to JSONResponse."""
        response = ProblemDetailException(status=400, title="Test Error", detail="Test detail").to_response()

        assert isinstance(response, JSONResponse)
        assert response.status_code == 400
        assert response.headers["Content-Type"] == "application/problem+json"
        assert json.loads(response.body) == {
            "type": "about:blank",
            "title": "Test Error",
            "status": 400,
            "detail": "Test detail"
        }


class TestSpecificExceptions:
    """Test specific exception classes."""

    def test_bad_request_error(self):
        exc = BadRequestError("Invalid input")

        assert exc.status == 400
        assert exc.title == "Bad Request"
        assert exc.detail == "Invalid input"

    def test_internal_server_error(self):
        exc = InternalServerError()

        assert exc.status == 500
        assert exc.detail == "Internal server error"

    def test_service_unavailable_error(self):
        exc = ServiceUnavailableError()

        assert exc.status == 503
        assert exc.title == "Service Unavailable"


class TestPaginationErrorMapping:
    """Test mapping pagination errors onto Problem Details."""

    @pytest.mark.parametrize("error,status,code", [
        (InvalidArgumentError("only one cursor direction may be specified"), 400, "invalid_argument"),
        (InvalidCursorError("Invalid cursor format"), 400, "invalid_cursor"),
        (DataSourceError("Database error fetching records: boom"), 503, "data_source_error"),
    ])
    def test_mapping(self, error, status, code):
        """Test each pagination error kind maps to its status."""
        problem = problem_from_pagination_error(error)

        assert problem.status == status
        assert problem.extensions["error"] == code

    def test_caller_errors_keep_message(self):
        """Test caller errors expose their message."""
        problem = problem_from_pagination_error(InvalidCursorError("Invalid cursor format: bad padding"))

        assert problem.detail == "Invalid cursor format: bad padding"

    def test_data_source_error_hides_driver_message(self):
        """Test storage failures do not leak driver details."""
        problem = problem_from_pagination_error(DataSourceError("Database error: password authentication failed"))

        assert "password" not in problem.detail

    def test_unknown_pagination_error(self):
        """Test the base class maps to 500."""
        assert problem_from_pagination_error(PaginationError("odd")).status == 500


class TestCreateProblemResponse:
    """Test create_problem_response function."""

    def test_with_request_and_extensions(self):
        """Test response creation with request path and extensions."""
        request = Mock(spec=Request)
        request.url.path = "/v1/records"

        response = create_problem_response(
            status=400,
            title="Bad Request",
            detail="Cannot sort by 'body'",
            request=request,
            sortable_fields=["id"]
        )
        body = json.loads(response.body)

        assert response.status_code == 400
        assert body["instance"] == "/v1/records"
        assert body["sortable_fields"] == ["id"]
