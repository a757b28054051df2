"""In-memory track table with explicit hash indexes.

This module implements the Dataset Store: a row-oriented, immutable table
of validated tracks plus optional single-column indexes.

Key features:
    - O(n) bulk load with all-or-nothing validation
    - O(n) full scans in load order
    - O(n) one-time index build, O(1) amortized equality lookups
    - Range lookups over an index's lazily sorted key list

Indexes are owned by the table and built only on request. A new load
produces a new table without indexes, which is the only way an index is
invalidated.
"""

from __future__ import annotations

import bisect
import heapq
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from track_analytics.domain.entities import (
    TRACK_COLUMNS,
    Row,
    Track,
    normalize_record,
)
from track_analytics.domain.value_objects import ComparisonOp, Predicate, RowId
from track_analytics.infrastructure.logging import get_logger
from track_analytics.infrastructure.metrics import MetricsRegistry, get_metrics
from track_analytics.infrastructure.tracing import trace_span
from track_analytics.ports.inbound.dataset_store import (
    DatasetTooLargeError,
    IndexStats,
    MalformedRecordError,
    NoIndexError,
    UnknownColumnError,
)

logger = get_logger(__name__)


@dataclass
class HashIndex:
    """Mapping from one column's values to the positions holding them.

    Attributes:
        column: Indexed column.
        entries: Key -> ascending tuple of row positions.
    """

    column: str
    entries: dict[Any, tuple[RowId, ...]]
    _sorted_keys: list[Any] | None = field(default=None, init=False, repr=False, compare=False)
    _lookup_count: int = field(default=0, init=False, repr=False, compare=False)

    @classmethod
    def build(cls, column: str, tracks: Iterable[Track]) -> HashIndex:
        buckets: dict[Any, list[RowId]] = {}
        for position, track in enumerate(tracks):
            buckets.setdefault(track[column], []).append(RowId(position))
        return cls(
            column=column,
            entries={key: tuple(positions) for key, positions in buckets.items()},
        )

    @property
    def num_keys(self) -> int:
        return len(self.entries)

    @property
    def num_entries(self) -> int:
        return sum(len(positions) for positions in self.entries.values())

    def lookup(self, key: Any) -> tuple[RowId, ...]:
        """Return the positions whose value equals ``key``."""
        self._lookup_count += 1
        return self.entries.get(key, ())

    def range(
        self,
        low: Any = None,
        high: Any = None,
        include_low: bool = True,
        include_high: bool = True,
    ) -> tuple[RowId, ...]:
        """Return positions whose value lies within the bounds, ascending.

        Args:
            low: Lower bound (None for unbounded).
            high: Upper bound (None for unbounded).
            include_low: Include the low bound in results.
            include_high: Include the high bound in results.
        """
        self._lookup_count += 1
        if self._sorted_keys is None:
            self._sorted_keys = sorted(self.entries)
        keys = self._sorted_keys

        start = 0
        if low is not None:
            start = (bisect.bisect_left if include_low else bisect.bisect_right)(keys, low)
        stop = len(keys)
        if high is not None:
            stop = (bisect.bisect_right if include_high else bisect.bisect_left)(keys, high)

        return tuple(heapq.merge(*(self.entries[key] for key in keys[start:stop])))

    def stats(self) -> IndexStats:
        return IndexStats(
            column=self.column,
            num_keys=self.num_keys,
            num_entries=self.num_entries,
            lookup_count=self._lookup_count,
        )


class TrackTable:
    """An immutable, loaded table of tracks.

    Tracks are kept in load order together with a ``Row`` view of each
    track for the executor. Use ``TrackTable.load`` to build one.

    Example:
        >>> table = TrackTable.load(records)
        >>> table.build_index("artist")
        >>> table.indexed_lookup("artist", "Gorillaz")
    """

    def __init__(
        self,
        tracks: Iterable[Track],
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self._tracks: tuple[Track, ...] = tuple(tracks)
        self._rows: tuple[Row, ...] = tuple(
            Row(columns=TRACK_COLUMNS, values=tuple(track[c] for c in TRACK_COLUMNS))
            for track in self._tracks
        )
        self._indexes: dict[str, HashIndex] = {}
        self._metrics = metrics or get_metrics()

    @classmethod
    def load(
        cls,
        records: Iterable[Mapping[str, Any] | Track],
        max_rows: int | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> TrackTable:
        """Validate records and build a table.

        Args:
            records: Track instances or raw mappings, in load order.
            max_rows: Optional row-count guard.
            metrics: Metrics registry (global registry when omitted).

        Raises:
            MalformedRecordError: If a record fails type coercion.
            DatasetTooLargeError: If more than ``max_rows`` records arrive.
        """
        metrics = metrics or get_metrics()
        tracks: list[Track] = []

        with trace_span("dataset.load", {"max_rows": max_rows}):
            for position, record in enumerate(records):
                if max_rows is not None and position >= max_rows:
                    metrics.load_failures_total.labels(reason="too_large").inc()
                    logger.error("dataset_too_large", limit=max_rows)
                    raise DatasetTooLargeError(max_rows)
                if isinstance(record, Track):
                    tracks.append(record)
                    continue
                try:
                    tracks.append(Track.model_validate(normalize_record(record)))
                except ValidationError as e:
                    metrics.load_failures_total.labels(reason="malformed").inc()
                    logger.error("malformed_record", position=position, errors=e.error_count())
                    raise MalformedRecordError(position, str(e)) from e

            table = cls(tracks, metrics=metrics)

        metrics.rows_loaded_total.inc(table.row_count)
        metrics.dataset_rows.set(table.row_count)
        logger.info("dataset_loaded", rows=table.row_count)
        return table

    @property
    def row_count(self) -> int:
        return len(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self._tracks

    @property
    def rows(self) -> tuple[Row, ...]:
        """Executor-facing rows, parallel to ``tracks``."""
        return self._rows

    def scan(self, predicate: Callable[[Track], bool] | None = None) -> list[Track]:
        """Return all tracks matching ``predicate`` in load order."""
        if predicate is None:
            return list(self._tracks)
        return [track for track in self._tracks if predicate(track)]

    # -------------------------------------------------------------------------
    # Indexes
    # -------------------------------------------------------------------------

    def build_index(self, column: str) -> HashIndex:
        """Build the index on ``column`` once; later calls return the same index.

        Raises:
            UnknownColumnError: If ``column`` is not a track column.
        """
        if column not in TRACK_COLUMNS:
            raise UnknownColumnError(column, operation="build_index")
        index = self._indexes.get(column)
        if index is not None:
            return index

        with trace_span("dataset.build_index", {"column": column}):
            index = HashIndex.build(column, self._tracks)
        self._indexes[column] = index
        self._metrics.index_builds_total.labels(column=column).inc()
        logger.info("index_built", column=column, keys=index.num_keys, rows=self.row_count)
        return index

    def has_index(self, column: str) -> bool:
        return column in self._indexes

    @property
    def indexed_columns(self) -> list[str]:
        return list(self._indexes)

    def get_index(self, column: str) -> HashIndex:
        """Return the built index on ``column``.

        Raises:
            NoIndexError: If no index was built for ``column``.
        """
        index = self._indexes.get(column)
        if index is None:
            raise NoIndexError(column)
        return index

    def index_stats(self) -> list[IndexStats]:
        return [index.stats() for index in self._indexes.values()]

    def indexed_lookup(self, column: str, value: Any) -> list[Track]:
        """Return tracks whose ``column`` equals ``value``, in load order.

        ``value`` is coerced to the column type first, so ``"single"`` and
        ``"TRUE"`` match enum and boolean columns.

        Raises:
            NoIndexError: If no index was built for ``column``.
        """
        positions = self.positions_for(Predicate(column, ComparisonOp.EQ, value))
        return [self._tracks[pos] for pos in positions]

    def indexed_range(
        self,
        column: str,
        low: Any = None,
        high: Any = None,
        include_low: bool = True,
        include_high: bool = True,
    ) -> list[Track]:
        """Return tracks whose ``column`` lies within the bounds, in load order.

        Raises:
            NoIndexError: If no index was built for ``column``.
        """
        index = self.get_index(column)
        self._metrics.index_lookups_total.labels(column=column).inc()
        positions = index.range(
            self._coerce(column, low),
            self._coerce(column, high),
            include_low=include_low,
            include_high=include_high,
        )
        return [self._tracks[pos] for pos in positions]

    def positions_for(self, predicate: Predicate) -> tuple[RowId, ...]:
        """Resolve a predicate through the index on its column.

        Raises:
            NoIndexError: If no index was built for the predicate column.
            ValueError: If the operator cannot be answered by an index.
        """
        index = self.get_index(predicate.column)
        if not (predicate.is_equality or predicate.is_range):
            raise ValueError(f"Operator {predicate.op.value} cannot use an index")
        self._metrics.index_lookups_total.labels(column=predicate.column).inc()
        value = self._coerce(predicate.column, predicate.value)

        if predicate.is_equality:
            return index.lookup(value)
        if predicate.op == ComparisonOp.GT:
            return index.range(low=value, include_low=False)
        if predicate.op == ComparisonOp.GE:
            return index.range(low=value)
        if predicate.op == ComparisonOp.LT:
            return index.range(high=value, include_high=False)
        return index.range(high=value)

    def coerce_predicate(self, predicate: Predicate) -> Predicate:
        """Return ``predicate`` with its value coerced to the column type."""
        return Predicate(
            predicate.column, predicate.op, self._coerce(predicate.column, predicate.value)
        )

    def _coerce(self, column: str, value: Any) -> Any:
        if value is None:
            return None
        try:
            return Track.coerce(column, value)
        except ValidationError as e:
            raise ValueError(f"Cannot compare column '{column}' with {value!r}") from e
