"""Pagination module for cursor-based pagination."""

from .cursor import CursorData, encode_cursor, decode_cursor
from .exceptions import (
    PaginationError,
    InvalidArgumentError,
    InvalidCursorError,
    DataSourceError
)
from .predicates import (
    Operator,
    Comparison,
    SortDirection,
    SortSpec,
    CursorSide,
    parse_order,
    build_boundary,
    apply_boundary
)
from .source import DataSource
from .links import create_link_header
from .paginator import (
    Cursors,
    PageInfo,
    Page,
    Paginator,
    paginate,
    normalize_limit,
    make_find_all_paginated
)

__all__ = [
    "CursorData",
    "encode_cursor",
    "decode_cursor",
    "PaginationError",
    "InvalidArgumentError",
    "InvalidCursorError",
    "DataSourceError",
    "Operator",
    "Comparison",
    "SortDirection",
    "SortSpec",
    "CursorSide",
    "parse_order",
    "build_boundary",
    "apply_boundary",
    "DataSource",
    "create_link_header",
    "Cursors",
    "PageInfo",
    "Page",
    "Paginator",
    "paginate",
    "normalize_limit",
    "make_find_all_paginated"
]
