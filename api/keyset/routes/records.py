"""Records API endpoints."""

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..db.postgres import PostgresDataSource
from ..errors.problem_details import BadRequestError
from ..models.records import Record, RecordListResponse
from ..pagination import DataSource, Page, create_link_header, paginate


logger = logging.getLogger(__name__)

RECORD_COLUMNS = ("id", "name", "category", "created_at")

router = APIRouter(
    prefix="/records",
    tags=["Records"],
    responses={
        400: {"description": "Bad Request - Invalid cursor or pagination parameters"},
        503: {"description": "Service Unavailable - Record storage failed"}
    }
)


def get_record_source() -> DataSource:
    """DataSource for the records table."""
    return PostgresDataSource(get_settings().records_table, columns=RECORD_COLUMNS)


RecordSource = Annotated[DataSource, Depends(get_record_source)]


def _has_next(page: Page, limit: int) -> bool:
    if page.page_info is not None:
        return page.page_info.has_next_page
    return len(page.records) >= limit


def _has_prev(page: Page, cursor_given: bool) -> bool:
    if page.page_info is not None:
        return page.page_info.has_prev_page
    return cursor_given


@router.get(
    "",
    response_model=RecordListResponse,
    summary="List records",
    description="List records with cursor-based pagination over a single sort key.",
    responses={
        200: {"description": "Records retrieved successfully"}
    }
)
async def list_records(
    request: Request,
    source: RecordSource,
    limit: Annotated[Optional[int], Query(ge=1, description="Number of records per page")] = None,
    after: Annotated[Optional[str], Query(description="Cursor to continue after")] = None,
    before: Annotated[Optional[str], Query(description="Cursor to page back from")] = None,
    sort: Annotated[Optional[str], Query(description="Sort field")] = None,
    order: Annotated[Optional[str], Query(pattern="^(asc|desc)$", description="Sort order")] = None,
    category: Annotated[Optional[str], Query(description="Only records in this category")] = None,
    page_info: Annotated[bool, Query(description="Report whether neighbouring pages exist")] = False,
    total_count: Annotated[bool, Query(description="Report the number of matching records")] = False
) -> JSONResponse:
    """List records with keyset pagination.

    Records are sorted by ``sort`` (``id`` by default) with ``id`` as a
    tiebreaker. Pass the ``after`` cursor of a page to get the next page and
    the ``before`` cursor to get the previous one. Cursors are opaque.

    Returns:
        Page of records with cursors, optional page info and total count, and
        a Link header for the neighbouring pages
    """
    settings = get_settings()
    sort_field = sort or settings.default_sort_field
    direction = order or settings.default_order

    if sort_field not in settings.sortable_fields:
        raise BadRequestError(
            f"Cannot sort by '{sort_field}'",
            sortable_fields=settings.sortable_fields
        )

    where: Dict[str, Any] = {}
    if category is not None:
        where["category"] = category

    sort_order = [(sort_field, direction)]
    if sort_field != "id":
        sort_order.append(("id", direction))

    page_size = limit or settings.default_page_size
    logger.info(f"Listing records by {sort_field} {direction} (limit={page_size})")

    page = await paginate(
        source,
        where,
        order=sort_order,
        limit=page_size,
        after=after,
        before=before,
        include_page_info=page_info,
        include_total_count=total_count,
        max_limit=settings.max_page_size
    )

    response_data = RecordListResponse(
        records=[Record.model_validate(record) for record in page.records],
        cursors=page.cursors,
        page_info=page.page_info,
        total_count=page.total_count
    )
    response = JSONResponse(content=response_data.to_response())

    current_params = {
        "limit": str(page_size),
        "sort": sort_field,
        "order": direction,
        "category": category,
        "page_info": "true" if page_info else None,
        "total_count": "true" if total_count else None
    }
    link_header = create_link_header(
        base_url=str(request.url).split("?")[0],
        params=current_params,
        next_cursor=page.cursors.after if _has_next(page, page_size) else None,
        prev_cursor=page.cursors.before if _has_prev(page, bool(after or before)) else None
    )
    if link_header:
        response.headers["Link"] = link_header

    logger.info(f"Retrieved {len(page.records)} records")
    return response
