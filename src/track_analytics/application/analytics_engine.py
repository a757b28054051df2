"""Analytics Engine - unified entry point for the analytics tool.

This module provides the TrackAnalytics class that ties a fixture source,
the loaded table, the query catalog and the plan reporter together.

Usage:
    from track_analytics.application import TrackAnalytics
    from track_analytics.adapters.outbound import FileTrackSource

    engine = TrackAnalytics()
    table = engine.load(FileTrackSource("tracks.csv"))
    query, rows = engine.run(11)
    report = engine.compare(4, "album_type")

Each engine owns exactly one table handle; loading again replaces the
table and with it every index built on the previous one.
"""

from __future__ import annotations

from track_analytics.application.plan_reporter import ComparisonReport, PlanReporter
from track_analytics.application.query_catalog import AnalyticalQuery, QueryCatalog
from track_analytics.domain.entities import Row
from track_analytics.domain.services import TrackTable
from track_analytics.infrastructure.config import Config
from track_analytics.infrastructure.logging import get_logger
from track_analytics.infrastructure.metrics import MetricsRegistry
from track_analytics.ports.outbound import TrackSource

logger = get_logger(__name__)


class TrackAnalytics:
    """Loads a dataset and runs catalog queries and comparisons against it."""

    def __init__(
        self,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration; defaults are used when omitted.
            metrics: Metrics registry; the global registry when omitted.
        """
        self._config = config or Config()
        self._metrics = metrics
        self._catalog = QueryCatalog.default(self._config.catalog)
        self._table: TrackTable | None = None

    @property
    def config(self) -> Config:
        return self._config

    @property
    def catalog(self) -> QueryCatalog:
        return self._catalog

    @property
    def table(self) -> TrackTable:
        """The loaded table.

        Raises:
            RuntimeError: If no dataset has been loaded.
        """
        if self._table is None:
            raise RuntimeError("No dataset loaded")
        return self._table

    @property
    def is_loaded(self) -> bool:
        return self._table is not None

    def load(self, source: TrackSource) -> TrackTable:
        """Load ``source`` into a new table, replacing any previous one.

        Raises:
            MalformedRecordError: If a record fails validation.
            DatasetTooLargeError: If the source exceeds the row guard.
            FixtureFormatError: If the source cannot be read.
        """
        logger.info("loading_dataset", source=source.describe())
        self._table = TrackTable.load(
            source.records(),
            max_rows=self._config.dataset.max_rows,
            metrics=self._metrics,
        )
        return self._table

    def run(self, query_id: int) -> tuple[AnalyticalQuery, list[Row]]:
        """Run catalog query ``query_id`` over a sequential scan."""
        query = self._catalog.get(query_id)
        return query, query(self.table)

    def compare(
        self,
        query_id: int,
        indexed_column: str,
        repeat: int | None = None,
    ) -> ComparisonReport:
        """Compare the scan and index paths of catalog query ``query_id``."""
        query = self._catalog.get(query_id)
        reporter = PlanReporter(repeat=repeat or self._config.reporter.repeat)
        return reporter.compare(query, self.table, indexed_column)
