"""Plan/Timing Reporter: sequential scan vs. index lookup.

Runs one catalog query twice against the same table, once through a full
sequential scan and once through the index on a chosen column, and
reports wall-clock durations with a descriptor of each access path. This
reproduces an EXPLAIN ANALYZE before/after experiment; it does not pick a
plan on its own.

Index build time is measured separately and never counted in the index
run. Runs are sequential so the two measurements cannot overlap.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from track_analytics.application.query_catalog import AnalyticalQuery
from track_analytics.domain.entities import TRACK_COLUMNS, Row
from track_analytics.domain.services import TrackTable
from track_analytics.domain.value_objects import AccessPath
from track_analytics.infrastructure.logging import get_logger
from track_analytics.infrastructure.tracing import trace_span
from track_analytics.ports.inbound.dataset_store import UnknownColumnError
from track_analytics.ports.inbound.query_catalog import (
    EmptyDatasetError,
    IndexNotApplicableError,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComparisonReport:
    """Timings and access-path descriptors of one comparison."""

    query_id: int
    query_name: str
    indexed_column: str
    scan_time: float
    index_time: float
    index_build_time: float
    scan_descriptor: str
    index_descriptor: str
    row_count: int
    rows_match: bool

    @property
    def speedup(self) -> float | None:
        """Scan time divided by index time, when the index run was measurable."""
        if self.index_time <= 0:
            return None
        return self.scan_time / self.index_time

    def as_dict(self) -> dict[str, float | str]:
        return {
            "scan_time": self.scan_time,
            "index_time": self.index_time,
            "scan_descriptor": self.scan_descriptor,
            "index_descriptor": self.index_descriptor,
        }


class PlanReporter:
    """Compares the two access paths of a catalog query."""

    def __init__(self, repeat: int = 1) -> None:
        if repeat < 1:
            raise ValueError(f"repeat must be at least 1, got {repeat}")
        self._repeat = repeat

    def compare(
        self,
        query: AnalyticalQuery,
        table: TrackTable,
        indexed_column: str,
    ) -> ComparisonReport:
        """Run ``query`` through a sequential scan and through an index.

        Args:
            query: Catalog query to run.
            table: Loaded table; an index on ``indexed_column`` is built if absent.
            indexed_column: Column whose index the second run must use.

        Returns:
            ComparisonReport with the fastest of ``repeat`` runs per path.

        Raises:
            IndexNotApplicableError: If the query does not read its rows
                through a predicate on ``indexed_column``.
            UnknownColumnError: If ``indexed_column`` is not a track column.
            EmptyDatasetError: If the access predicate needs an aggregate over
                an empty table.
        """
        with trace_span(
            "reporter.compare",
            {"query.id": query.query_id, "indexed_column": indexed_column},
        ):
            if indexed_column not in TRACK_COLUMNS:
                raise UnknownColumnError(indexed_column, operation="compare")
            try:
                predicate = query.access_predicate(table)
            except EmptyDatasetError as e:
                raise EmptyDatasetError(query.operation, e.detail) from e
            if predicate is None or predicate.column != indexed_column:
                raise IndexNotApplicableError(query.operation, indexed_column)

            index_build_time = 0.0
            if not table.has_index(indexed_column):
                start = time.perf_counter()
                table.build_index(indexed_column)
                index_build_time = time.perf_counter() - start

            scan_time, scan_rows = self._timed(
                lambda: query.execute(table, AccessPath.SEQ_SCAN)
            )
            index_time, index_rows = self._timed(
                lambda: query.execute(table, AccessPath.INDEX_LOOKUP)
            )

        report = ComparisonReport(
            query_id=query.query_id,
            query_name=query.name,
            indexed_column=indexed_column,
            scan_time=scan_time,
            index_time=index_time,
            index_build_time=index_build_time,
            scan_descriptor=f"sequential scan over {table.row_count} rows",
            index_descriptor=f"index lookup on {indexed_column}",
            row_count=len(scan_rows),
            rows_match=scan_rows == index_rows,
        )
        if not report.rows_match:
            logger.warning(
                "access_paths_disagree",
                query_id=query.query_id,
                scan_rows=len(scan_rows),
                index_rows=len(index_rows),
            )
        logger.info(
            "comparison_finished",
            query_id=query.query_id,
            indexed_column=indexed_column,
            scan_time=scan_time,
            index_time=index_time,
        )
        return report

    def _timed(self, run: Callable[[], list[Row]]) -> tuple[float, list[Row]]:
        best = float("inf")
        rows: list[Row] = []
        for _ in range(self._repeat):
            start = time.perf_counter()
            rows = run()
            best = min(best, time.perf_counter() - start)
        return best, rows


def compare(
    query: AnalyticalQuery,
    table: TrackTable,
    indexed_column: str,
    repeat: int = 1,
) -> ComparisonReport:
    """Compare a query's scan and index paths; see ``PlanReporter.compare``."""
    return PlanReporter(repeat=repeat).compare(query, table, indexed_column)
