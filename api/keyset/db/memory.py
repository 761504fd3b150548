"""In-memory DataSource for tests and embedding."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..pagination.exceptions import InvalidArgumentError, InvalidCursorError
from ..pagination.predicates import Comparison, Filter, Operator, SortDirection, SortSpec


logger = logging.getLogger(__name__)

_MISSING = object()


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(candidate: Any, value: Any) -> bool:
        # NULL never satisfies an ordering comparison, as in SQL
        if candidate is None or value is None:
            return False
        try:
            return compare(candidate, value)
        except TypeError as e:
            raise InvalidCursorError(
                f"Cannot compare {type(candidate).__name__} field with {type(value).__name__} cursor value",
                original_error=e
            ) from e
    return check


def _membership(candidate: Any, value: Any) -> bool:
    return candidate in value


_OPERATORS: Dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.EQ: lambda candidate, value: candidate == value,
    Operator.NE: lambda candidate, value: candidate != value,
    Operator.LT: _ordered(lambda candidate, value: candidate < value),
    Operator.LTE: _ordered(lambda candidate, value: candidate <= value),
    Operator.GT: _ordered(lambda candidate, value: candidate > value),
    Operator.GTE: _ordered(lambda candidate, value: candidate >= value),
    Operator.IN: _membership,
}


def matches(record: Mapping[str, Any], where: Filter) -> bool:
    """Check whether a record satisfies every constraint in ``where``."""
    for field, constraint in where.items():
        candidate = record.get(field, _MISSING)
        if candidate is _MISSING:
            return False

        if isinstance(constraint, Comparison):
            check = _OPERATORS.get(constraint.op)
            if check is None:
                raise InvalidArgumentError(f"Unsupported operator: {constraint.op!r}")
            if not check(candidate, constraint.value):
                return False
        elif isinstance(constraint, (list, tuple, set, frozenset)):
            if candidate not in constraint:
                return False
        elif candidate != constraint:
            return False
    return True


def sort_records(records: Iterable[Mapping[str, Any]], order: Sequence[SortSpec]) -> List[Mapping[str, Any]]:
    """Sort records by several keys, NULLs last for ASC and first for DESC."""
    result = list(records)
    # Stable sort from the least significant key up
    for spec in reversed(order):
        result.sort(
            key=lambda record, field=spec.field: (record.get(field) is None, record.get(field)),
            reverse=spec.direction is SortDirection.DESC
        )
    return result


class InMemoryDataSource:
    """DataSource over a list of mappings."""

    def __init__(self, records: Optional[Iterable[Mapping[str, Any]]] = None):
        self.records: List[Mapping[str, Any]] = list(records or [])

    def add(self, record: Mapping[str, Any]) -> None:
        """Append a record."""
        self.records.append(record)

    def _select(self, where: Filter, order: Sequence[SortSpec]) -> List[Mapping[str, Any]]:
        return sort_records((record for record in self.records if matches(record, where)), order)

    async def count(self, where: Filter) -> int:
        count = sum(1 for record in self.records if matches(record, where))
        logger.debug(f"Counted {count} in-memory records")
        return count

    async def fetch_page(self, where: Filter, order: Sequence[SortSpec], limit: int) -> List[Mapping[str, Any]]:
        return self._select(where, order)[:limit]

    async def fetch_one(self, where: Filter, order: Sequence[SortSpec]) -> Optional[Mapping[str, Any]]:
        selected = self._select(where, order)
        return selected[0] if selected else None
