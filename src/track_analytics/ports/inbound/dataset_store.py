"""Dataset Store port.

This inbound port defines the contract of the in-memory track table:
bulk load, full scan, and explicit single-column hash indexes.

Key responsibilities:
- Validate and load an ordered sequence of track records
- Answer full scans in load order
- Build indexes on demand and answer lookups through them

The table is immutable once loaded. Indexes are never implicit: a lookup
on a column without a built index fails instead of silently scanning, so
the scan vs. index contrast stays observable.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Protocol

from track_analytics.domain.entities import Track


@dataclass
class IndexStats:
    """Statistics for index monitoring."""

    column: str
    num_keys: int
    num_entries: int
    lookup_count: int


class TrackStore(Protocol):
    """Protocol for the loaded track table.

    Thread Safety:
        Read-only after load; concurrent readers need no locking.
    """

    @classmethod
    @abstractmethod
    def load(
        cls,
        records: Iterable[Mapping[str, Any] | Track],
        max_rows: int | None = None,
    ) -> TrackStore:
        """Validate records and build a table.

        Raises:
            MalformedRecordError: If a record fails type coercion.
            DatasetTooLargeError: If more than ``max_rows`` records arrive.
        """
        ...

    @abstractmethod
    def scan(self, predicate: Callable[[Track], bool] | None = None) -> list[Track]:
        """Return all matching tracks in load order (full scan)."""
        ...

    @abstractmethod
    def build_index(self, column: str) -> Any:
        """Build the index on ``column`` if absent and return it.

        Raises:
            UnknownColumnError: If ``column`` is not a track column.
        """
        ...

    @abstractmethod
    def indexed_lookup(self, column: str, value: Any) -> list[Track]:
        """Return tracks whose ``column`` equals ``value``, in load order.

        Raises:
            NoIndexError: If no index was built for ``column``.
        """
        ...


class MalformedRecordError(Exception):
    """Raised when a source record fails type coercion; the load is aborted."""

    def __init__(self, position: int, cause: str) -> None:
        super().__init__(f"load: record {position} is malformed: {cause}")
        self.position = position
        self.cause = cause


class NoIndexError(Exception):
    """Raised when an index lookup targets a column without a built index."""

    def __init__(self, column: str) -> None:
        super().__init__(f"index lookup: no index on column '{column}' (call build_index first)")
        self.column = column


class DatasetTooLargeError(Exception):
    """Raised when a load exceeds the configured row-count guard."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"load: dataset exceeds the limit of {limit} rows")
        self.limit = limit


class UnknownColumnError(Exception):
    """Raised when an operation names a column the table does not have."""

    def __init__(self, column: str, operation: str = "index") -> None:
        super().__init__(f"{operation}: unknown column '{column}'")
        self.column = column
        self.operation = operation
