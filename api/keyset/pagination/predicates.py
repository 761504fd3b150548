"""Filter predicates and sort specifications for keyset pagination."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import InvalidArgumentError


class Operator(str, Enum):
    """Comparison operators understood by data sources."""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    IN = "in"


class SortDirection(str, Enum):
    """Sort direction of an order entry."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: Union[str, "SortDirection"]) -> "SortDirection":
        """Parse a direction case-insensitively."""
        if isinstance(value, SortDirection):
            return value
        if isinstance(value, str):
            normalized = value.strip().upper()
            if normalized in ("ASC", "DESC"):
                return cls(normalized)
        raise InvalidArgumentError(f"Invalid sort direction: {value!r}")

    def inverted(self) -> "SortDirection":
        return SortDirection.ASC if self is SortDirection.DESC else SortDirection.DESC


class CursorSide(str, Enum):
    """Which side of the cursor a page is requested from."""

    AFTER = "after"
    BEFORE = "before"


@dataclass(frozen=True)
class Comparison:
    """A single-field constraint such as ``id < 16``."""

    op: Operator
    value: Any


@dataclass(frozen=True)
class SortSpec:
    """One ``(field, direction)`` order entry."""

    field: str
    direction: SortDirection = SortDirection.ASC

    def inverted(self) -> "SortSpec":
        return SortSpec(self.field, self.direction.inverted())


Filter = Mapping[str, Any]
OrderInput = Union[str, Tuple[str, str], SortSpec, Sequence[Union[Tuple[str, str], SortSpec]]]


def _parse_order_entry(entry: Any) -> SortSpec:
    if isinstance(entry, SortSpec):
        return entry

    if isinstance(entry, str):
        text = entry.strip()
        if text.startswith("-"):
            return SortSpec(text[1:], SortDirection.DESC)
        if ":" in text:
            field, direction = text.split(":", 1)
            return SortSpec(field.strip(), SortDirection.parse(direction))
        return SortSpec(text, SortDirection.ASC)

    if isinstance(entry, (list, tuple)) and len(entry) == 2 and isinstance(entry[0], str):
        return SortSpec(entry[0], SortDirection.parse(entry[1]))

    raise InvalidArgumentError(f"Invalid order entry: {entry!r}")


def _is_direction(value: Any) -> bool:
    try:
        SortDirection.parse(value)
    except InvalidArgumentError:
        return False
    return True


def parse_order(order: OrderInput) -> List[SortSpec]:
    """Normalize an order specification into a list of SortSpec entries.

    Accepts a single ``(field, direction)`` pair, a SortSpec, a string such as
    ``"id"``, ``"id:desc"`` or ``"-id"``, or a sequence of any of these. A
    2-tuple is a pair only when its second item is a direction, so
    ``("name", "id")`` orders by two fields. Only the
    first entry governs cursor comparisons; the rest only affect ordering.

    Raises:
        InvalidArgumentError: If the order is empty or malformed
    """
    if isinstance(order, (str, SortSpec)):
        entries: Sequence[Any] = [order]
    elif (
        isinstance(order, tuple)
        and len(order) == 2
        and isinstance(order[0], str)
        and _is_direction(order[1])
    ):
        entries = [order]
    elif isinstance(order, (list, tuple)):
        entries = order
    else:
        raise InvalidArgumentError(f"Invalid order specification: {order!r}")

    specs = [_parse_order_entry(entry) for entry in entries]
    if not specs:
        raise InvalidArgumentError("Order must contain at least one sort field")
    for spec in specs:
        if not spec.field:
            raise InvalidArgumentError("Sort field name must not be empty")
    return specs


def build_boundary(direction: SortDirection, side: CursorSide, value: Any) -> Comparison:
    """Build the strict comparison that excludes records up to the cursor.

    ``after`` continues in the sort direction (``<`` for DESC, ``>`` for ASC),
    ``before`` goes against it (``>`` for DESC, ``<`` for ASC). The bound is
    never inclusive, otherwise the boundary record would appear on both pages.
    """
    descending = direction is SortDirection.DESC
    if side is CursorSide.AFTER:
        op = Operator.LT if descending else Operator.GT
    else:
        op = Operator.GT if descending else Operator.LT
    return Comparison(op, value)


def apply_boundary(where: Optional[Filter], field: str, comparison: Comparison) -> Dict[str, Any]:
    """Return a copy of ``where`` with ``field`` constrained by ``comparison``."""
    bounded = dict(where or {})
    bounded[field] = comparison
    return bounded
