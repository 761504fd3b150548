"""Keyset (cursor-based) pagination over a DataSource."""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .cursor import decode_cursor, encode_cursor
from .exceptions import InvalidArgumentError
from .predicates import (
    CursorSide, Filter, OrderInput, SortDirection, SortSpec,
    apply_boundary, build_boundary, parse_order
)
from .source import DataSource


logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_ORDER = (SortSpec("id", SortDirection.DESC),)


class Cursors(BaseModel):
    """Cursor tokens for the edges of a page."""

    before: Optional[str] = Field(default=None, description="Cursor of the first record on the page")
    after: Optional[str] = Field(default=None, description="Cursor of the last record on the page")


class PageInfo(BaseModel):
    """Whether records exist on either side of a page."""

    has_prev_page: bool = Field(alias="hasPrevPage", description="Records exist before the first record")
    has_next_page: bool = Field(alias="hasNextPage", description="Records exist after the last record")

    model_config = ConfigDict(populate_by_name=True)


class Page(BaseModel):
    """One page of records plus its pagination metadata."""

    records: List[Any] = Field(description="Records in the requested order")
    cursors: Cursors = Field(default_factory=Cursors, description="Edge cursors of this page")
    page_info: Optional[PageInfo] = Field(default=None, alias="pageInfo")
    total_count: Optional[int] = Field(default=None, alias="totalCount")

    model_config = ConfigDict(populate_by_name=True)

    def to_response(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, omitting metadata that was not requested."""
        exclude = set()
        if self.page_info is None:
            exclude.add("page_info")
        if self.total_count is None:
            exclude.add("total_count")
        return self.model_dump(by_alias=True, exclude=exclude)


def normalize_limit(limit: Any, default_limit: int = DEFAULT_LIMIT, max_limit: Optional[int] = None) -> int:
    """Validate a page size.

    Integers and strings of ASCII digits are accepted; booleans, floats and
    anything else are rejected.

    Raises:
        InvalidArgumentError: If the limit is not a positive integer or exceeds max_limit
    """
    if limit is None:
        limit = default_limit

    if isinstance(limit, str):
        text = limit.strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidArgumentError(f"Limit must be a positive integer, got {limit!r}")
        limit = int(text)
    elif isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgumentError(f"Limit must be a positive integer, got {limit!r}")

    if limit < 1:
        raise InvalidArgumentError(f"Limit must be a positive integer, got {limit}")
    if max_limit is not None and limit > max_limit:
        raise InvalidArgumentError(f"Limit must not exceed {max_limit}, got {limit}")
    return limit


def sort_value(record: Any, field: str) -> Any:
    """Read the sort-key value of a record by key or attribute."""
    if isinstance(record, Mapping):
        if field not in record:
            raise InvalidArgumentError(f"Record has no sort field '{field}'")
        value = record[field]
    else:
        try:
            value = getattr(record, field)
        except AttributeError as e:
            raise InvalidArgumentError(f"Record has no sort field '{field}'", original_error=e) from e

    if value is None:
        raise InvalidArgumentError(f"Sort field '{field}' must not be null")
    return value


async def _exists_beyond(
    source: DataSource,
    where: Filter,
    order: Sequence[SortSpec],
    side: CursorSide,
    value: Any
) -> bool:
    primary = order[0]
    probe_filter = apply_boundary(where, primary.field, build_boundary(primary.direction, side, value))
    return await source.fetch_one(probe_filter, order) is not None


async def paginate(
    source: DataSource,
    where: Optional[Filter] = None,
    *,
    order: Optional[OrderInput] = None,
    limit: Any = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    include_page_info: bool = False,
    include_total_count: bool = False,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: Optional[int] = None
) -> Page:
    """Fetch one page of records from a data source.

    Args:
        source: DataSource to query
        where: Filter mapping; never modified
        order: Order specification, first entry is the sort key (default: id DESC)
        limit: Page size (default: default_limit)
        after: Cursor to continue after, in the sort direction
        before: Cursor to page back from, against the sort direction. The
            source is queried with every order entry inverted so it returns
            the records nearest the cursor; they are reversed before returning
        include_page_info: Probe for records on either side of the page
        include_total_count: Count all records matching ``where``
        default_limit: Page size used when limit is None
        max_limit: Optional upper bound for limit

    Returns:
        The page, with records always in the requested order

    Raises:
        InvalidArgumentError: If both cursors are given, or limit/order are invalid
        InvalidCursorError: If a cursor cannot be decoded or its value does not
            compare with the sort field

    The count, page and probe queries are not run in one snapshot; concurrent
    writes between them can make the metadata drift from the records.
    """
    if after and before:
        raise InvalidArgumentError("only one cursor direction may be specified")

    page_size = normalize_limit(limit, default_limit, max_limit)
    sort_specs = parse_order(order if order is not None else DEFAULT_ORDER)
    primary = sort_specs[0]
    base_filter = dict(where or {})

    page_filter: Dict[str, Any] = base_filter
    fetch_order: List[SortSpec] = sort_specs
    side: Optional[CursorSide] = None

    if after:
        side = CursorSide.AFTER
        boundary = build_boundary(primary.direction, side, decode_cursor(after))
        page_filter = apply_boundary(base_filter, primary.field, boundary)
    elif before:
        side = CursorSide.BEFORE
        boundary = build_boundary(primary.direction, side, decode_cursor(before))
        page_filter = apply_boundary(base_filter, primary.field, boundary)
        # Walk backwards from the cursor, then restore the requested order
        fetch_order = [spec.inverted() for spec in sort_specs]

    logger.debug(
        f"Paginating on {primary.field} {primary.direction.value} "
        f"(limit={page_size}, cursor={side.value if side else None})"
    )

    total_count: Optional[int] = None
    if include_total_count:
        fetched, total_count = await asyncio.gather(
            source.fetch_page(page_filter, fetch_order, page_size),
            source.count(base_filter)
        )
    else:
        fetched = await source.fetch_page(page_filter, fetch_order, page_size)

    records = list(fetched)[:page_size]
    if side is CursorSide.BEFORE:
        records.reverse()

    cursors = Cursors()
    page_info: Optional[PageInfo] = None

    if records:
        first_value = sort_value(records[0], primary.field)
        last_value = sort_value(records[-1], primary.field)
        cursors = Cursors(before=encode_cursor(first_value), after=encode_cursor(last_value))

        if include_page_info:
            has_prev, has_next = await asyncio.gather(
                _exists_beyond(source, base_filter, sort_specs, CursorSide.BEFORE, first_value),
                _exists_beyond(source, base_filter, sort_specs, CursorSide.AFTER, last_value)
            )
            page_info = PageInfo(has_prev_page=has_prev, has_next_page=has_next)
    elif include_page_info:
        page_info = PageInfo(has_prev_page=False, has_next_page=False)

    logger.debug(f"Fetched {len(records)} records (total_count={total_count})")

    return Page(records=records, cursors=cursors, page_info=page_info, total_count=total_count)


class Paginator:
    """Binds a data source and pagination defaults."""

    def __init__(
        self,
        source: DataSource,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: Optional[int] = None,
        default_order: OrderInput = DEFAULT_ORDER
    ):
        self.source = source
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.default_order = parse_order(default_order)

    async def find_all(
        self,
        where: Optional[Filter] = None,
        *,
        order: Optional[OrderInput] = None,
        limit: Any = None,
        after: Optional[str] = None,
        before: Optional[str] = None,
        include_page_info: bool = False,
        include_total_count: bool = False
    ) -> Page:
        """Fetch one page using this paginator's defaults. See paginate()."""
        return await paginate(
            self.source,
            where,
            order=order if order is not None else self.default_order,
            limit=limit,
            after=after,
            before=before,
            include_page_info=include_page_info,
            include_total_count=include_total_count,
            default_limit=self.default_limit,
            max_limit=self.max_limit
        )


def make_find_all_paginated(source: DataSource, **defaults: Any):
    """Return a ``find_all`` coroutine function bound to ``source``."""
    return Paginator(source, **defaults).find_all
