"""PostgreSQL DataSource built on asyncpg."""

import asyncio
import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Sequence, Tuple

import asyncpg
from asyncpg import Pool

from ..pagination.exceptions import DataSourceError, InvalidArgumentError, InvalidCursorError
from ..pagination.predicates import Comparison, Filter, Operator, SortSpec
from .connection import get_db_pool


logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SQL_OPERATORS = {
    Operator.EQ: "=",
    Operator.NE: "<>",
    Operator.LT: "<",
    Operator.LTE: "<=",
    Operator.GT: ">",
    Operator.GTE: ">=",
}


def quote_identifier(name: str) -> str:
    """Validate and double-quote a table or column name.

    Raises:
        InvalidArgumentError: If the name is not a plain SQL identifier
    """
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise InvalidArgumentError(f"Invalid identifier: {name!r}")
    return f'"{name}"'


def build_where_clause(where: Filter, start: int = 1) -> Tuple[str, List[Any]]:
    """Build a parameterized WHERE clause from a filter mapping.

    Args:
        where: Filter mapping of column to constraint
        start: Number of the first $n placeholder

    Returns:
        Tuple of (where_clause, parameters)
    """
    conditions = []
    params: List[Any] = []

    for field, constraint in where.items():
        column = quote_identifier(field)

        if isinstance(constraint, Comparison):
            op, value = constraint.op, constraint.value
        elif isinstance(constraint, (list, tuple, set, frozenset)):
            op, value = Operator.IN, constraint
        else:
            op, value = Operator.EQ, constraint

        if op is Operator.IN:
            values = list(value)
            if not values:
                conditions.append("FALSE")
                continue
            params.append(values)
            conditions.append(f"{column} = ANY(${start + len(params) - 1})")
        elif value is None and op is Operator.EQ:
            conditions.append(f"{column} IS NULL")
        elif value is None and op is Operator.NE:
            conditions.append(f"{column} IS NOT NULL")
        elif op in SQL_OPERATORS:
            params.append(value)
            conditions.append(f"{column} {SQL_OPERATORS[op]} ${start + len(params) - 1}")
        else:
            raise InvalidArgumentError(f"Unsupported operator: {op!r}")

    where_clause = " AND ".join(conditions) if conditions else "TRUE"
    return where_clause, params


def build_order_clause(order: Sequence[SortSpec]) -> str:
    """Build ORDER BY clause from sort specs."""
    if not order:
        return ""
    entries = [f"{quote_identifier(spec.field)} {spec.direction.value}" for spec in order]
    return "ORDER BY " + ", ".join(entries)


@contextmanager
def handle_database_errors(operation: str) -> Generator[None, None, None]:
    """Re-raise driver and connection failures as DataSourceError.

    Parameters the driver cannot encode for their column raise
    InvalidCursorError instead.

    Usage:
        with handle_database_errors("counting records"):
            await conn.fetchval(...)
    """
    try:
        yield
    except asyncpg.DataError as e:
        logger.info(f"Rejected query parameter {operation}: {e}")
        raise InvalidCursorError(f"Cursor value does not match the sort field: {e}", original_error=e) from e
    except (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError, OSError) as e:
        logger.error(f"Database error {operation}: {e}")
        raise DataSourceError(f"Database error {operation}: {e}", original_error=e) from e


class PostgresDataSource:
    """DataSource reading one PostgreSQL table through an asyncpg pool."""

    def __init__(
        self,
        table: str,
        columns: Optional[Sequence[str]] = None,
        pool: Optional[Pool] = None
    ):
        self.table = quote_identifier(table)
        self.columns = ", ".join(quote_identifier(c) for c in columns) if columns else "*"
        self._pool = pool

    async def _get_pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return await get_db_pool()

    def _select_query(self, where: Filter, order: Sequence[SortSpec]) -> Tuple[str, List[Any]]:
        where_clause, params = build_where_clause(where)
        order_clause = build_order_clause(order)
        query = f"""
            SELECT {self.columns}
            FROM {self.table}
            WHERE {where_clause}
            {order_clause}
            LIMIT ${len(params) + 1}
        """
        return query, params

    async def count(self, where: Filter) -> int:
        """Count rows matching the filter."""
        where_clause, params = build_where_clause(where)
        query = f"SELECT COUNT(*) FROM {self.table} WHERE {where_clause}"

        with handle_database_errors("counting records"):
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                count = await conn.fetchval(query, *params)

        logger.debug(f"Counted {count} rows in {self.table}")
        return count or 0

    async def fetch_page(self, where: Filter, order: Sequence[SortSpec], limit: int) -> List[Dict[str, Any]]:
        """Fetch up to limit rows in order."""
        query, params = self._select_query(where, order)

        with handle_database_errors("fetching records"):
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(query, *params, limit)

        logger.debug(f"Fetched {len(rows)} rows from {self.table}")
        return [dict(row) for row in rows]

    async def fetch_one(self, where: Filter, order: Sequence[SortSpec]) -> Optional[Dict[str, Any]]:
        """Fetch the first row in order, or None."""
        query, params = self._select_query(where, order)

        with handle_database_errors("probing records"):
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                row = await conn.fetchrow(query, *params, 1)

        return dict(row) if row is not None else None
