"""Query Catalog port.

Each catalog entry is a pure function from a loaded table to a list of
result rows, identified by a stable id (1..13) and a name.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, ClassVar, Protocol

if TYPE_CHECKING:
    from track_analytics.domain.entities import Row
    from track_analytics.domain.services import TrackTable
    from track_analytics.domain.value_objects import AccessPath, Predicate


class AnalyticalQueryPort(Protocol):
    """Protocol for a catalog query.

    Determinism:
        Given the same table, repeated calls return identical rows in
        identical order.
    """

    query_id: ClassVar[int]
    name: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]

    @abstractmethod
    def access_predicate(self, table: TrackTable) -> Predicate | None:
        """Return the predicate selecting the rows the query reads, if any."""
        ...

    @abstractmethod
    def execute(self, table: TrackTable, access_path: AccessPath) -> list[Row]:
        """Run the query through the given access path."""
        ...


class EmptyDatasetError(Exception):
    """Raised when a global aggregate has no input rows."""

    def __init__(self, operation: str, detail: str = "no matching rows") -> None:
        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.detail = detail


class UnknownQueryError(Exception):
    """Raised when a query id or name is not in the catalog."""

    def __init__(self, query: int | str) -> None:
        super().__init__(f"catalog: unknown query {query!r}")
        self.query = query


class IndexNotApplicableError(Exception):
    """Raised when a query cannot be answered through the requested index."""

    def __init__(self, operation: str, column: str | None) -> None:
        target = f"an index on '{column}'" if column else "an index"
        super().__init__(f"{operation}: cannot use {target}")
        self.operation = operation
        self.column = column
