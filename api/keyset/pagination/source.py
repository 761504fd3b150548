"""DataSource protocol consumed by the paginator."""

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from .predicates import Filter, SortSpec


@runtime_checkable
class DataSource(Protocol):
    """Read capabilities a record store must provide for keyset pagination.

    Implementations must be safe for concurrent reads: the paginator awaits
    the count and page queries, and the two page-info probes, concurrently.
    """

    async def count(self, where: Filter) -> int:
        """Count records matching ``where``."""
        ...

    async def fetch_page(self, where: Filter, order: Sequence[SortSpec], limit: int) -> Sequence[Any]:
        """Fetch up to ``limit`` records matching ``where`` in ``order``."""
        ...

    async def fetch_one(self, where: Filter, order: Sequence[SortSpec]) -> Optional[Any]:
        """Fetch the first record matching ``where`` in ``order``, or None."""
        ...
