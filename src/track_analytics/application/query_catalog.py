"""Query catalog: the thirteen reference analyses over the tracks table.

Every query is a small frozen dataclass whose fields are its parameters.
A query splits into two parts:

    access_predicate(table)  the rows it reads (``None`` reads everything)
    plan(source, table)      the operator pipeline on top of that access

``execute`` wires the access operator for the requested path (sequential
scan + filter, or index lookup) under the pipeline, so the same logical
query can run through either path with identical results.

Usage:
    catalog = QueryCatalog.default()
    rows = catalog.get(11)(table)
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Iterator

from track_analytics.application.executor import (
    AggregateFunc,
    AggregateSpec,
    ComputeOperator,
    DenseRankOperator,
    DistinctOperator,
    FilterOperator,
    HashAggregateOperator,
    LimitOperator,
    Operator,
    ProjectOperator,
    SeqScanOperator,
    SortKey,
    SortOperator,
    build_access_operator,
)
from track_analytics.domain.entities import TRACK_COLUMNS, AlbumType, MostPlayedOn, Row
from track_analytics.domain.services import TrackTable
from track_analytics.domain.value_objects import AccessPath, ComparisonOp, Predicate
from track_analytics.infrastructure.config import CatalogConfig
from track_analytics.infrastructure.logging import get_logger
from track_analytics.infrastructure.metrics import get_metrics
from track_analytics.infrastructure.tracing import trace_span
from track_analytics.ports.inbound.query_catalog import EmptyDatasetError, UnknownQueryError

logger = get_logger(__name__)


@dataclass(frozen=True)
class AnalyticalQuery(ABC):
    """Base class for catalog queries."""

    query_id: ClassVar[int]
    name: ClassVar[str]
    description: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]

    def access_predicate(self, table: TrackTable) -> Predicate | None:
        """Return the predicate selecting the rows the query reads, if any."""
        return None

    @abstractmethod
    def plan(self, source: Operator, table: TrackTable) -> Operator:
        """Build the operator pipeline on top of ``source``."""

    @property
    def operation(self) -> str:
        return f"query {self.query_id} ({self.name})"

    def execute(
        self,
        table: TrackTable,
        access_path: AccessPath = AccessPath.SEQ_SCAN,
    ) -> list[Row]:
        """Run the query through the given access path.

        Raises:
            EmptyDatasetError: If a global aggregate sees no rows.
            NoIndexError: If the index path is requested but not built.
        """
        metrics = get_metrics()
        attributes = {"query.id": self.query_id, "access_path": access_path.value}
        start = time.perf_counter()
        try:
            with trace_span("query.execute", attributes):
                predicate = self.access_predicate(table)
                source = build_access_operator(table, predicate, access_path, self.operation)
                rows = list(self.plan(source, table))
        except EmptyDatasetError as e:
            metrics.queries_total.labels(query=self.name, status="error").inc()
            raise EmptyDatasetError(self.operation, e.detail) from e
        except Exception:
            metrics.queries_total.labels(query=self.name, status="error").inc()
            raise

        elapsed = time.perf_counter() - start
        metrics.queries_total.labels(query=self.name, status="success").inc()
        metrics.query_latency_seconds.labels(access_path=access_path.value).observe(elapsed)
        logger.debug(
            "query_executed",
            query_id=self.query_id,
            access_path=access_path.value,
            predicate=str(predicate) if predicate is not None else None,
            rows=len(rows),
            elapsed_seconds=elapsed,
        )
        return rows

    def __call__(self, table: TrackTable) -> list[Row]:
        return self.execute(table)


# =============================================================================
# Catalog entries
# =============================================================================


@dataclass(frozen=True)
class StreamsAboveThreshold(AnalyticalQuery):
    query_id: ClassVar[int] = 1
    name: ClassVar[str] = "streams_above_threshold"
    description: ClassVar[str] = "Tracks streamed more than the threshold (default 1 billion)"
    columns: ClassVar[tuple[str, ...]] = ("track", "stream")

    threshold: int = 1_000_000_000

    def access_predicate(self, table: TrackTable) -> Predicate | None:
        return Predicate("stream", ComparisonOp.GT, self.threshold)

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        return ProjectOperator(source, self.columns)


@dataclass(frozen=True)
class DistinctAlbumArtists(AnalyticalQuery):
    query_id: ClassVar[int] = 2
    name: ClassVar[str] = "distinct_album_artists"
    description: ClassVar[str] = "Distinct album/artist pairs ordered by album"
    columns: ClassVar[tuple[str, ...]] = ("album", "artist")

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        distinct = DistinctOperator(ProjectOperator(source, self.columns))
        return SortOperator(distinct, [SortKey("album")])


@dataclass(frozen=True)
class LicensedCommentTotal(AnalyticalQuery):
    query_id: ClassVar[int] = 3
    name: ClassVar[str] = "licensed_comment_total"
    description: ClassVar[str] = "Total comments on licensed tracks"
    columns: ClassVar[tuple[str, ...]] = ("total_comments",)

    def access_predicate(self, table: TrackTable) -> Predicate | None:
        return Predicate("licensed", ComparisonOp.EQ, True)

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        return HashAggregateOperator(
            source,
            group_by=[],
            aggregates=[AggregateSpec(AggregateFunc.SUM, "comments", "total_comments")],
        )


@dataclass(frozen=True)
class TracksByAlbumType(AnalyticalQuery):
    query_id: ClassVar[int] = 4
    name: ClassVar[str] = "tracks_by_album_type"
    description: ClassVar[str] = "All tracks released as singles (album_type parameter)"
    columns: ClassVar[tuple[str, ...]] = TRACK_COLUMNS

    album_type: AlbumType = AlbumType.SINGLE

    def access_predicate(self, table: TrackTable) -> Predicate | None:
        return Predicate("album_type", ComparisonOp.EQ, self.album_type)

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        return source


@dataclass(frozen=True)
class TracksPerArtist(AnalyticalQuery):
    query_id: ClassVar[int] = 5
    name: ClassVar[str] = "tracks_per_artist"
    description: ClassVar[str] = "Number of tracks per artist, fewest first"
    columns: ClassVar[tuple[str, ...]] = ("artist", "total_tracks")

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        counts = HashAggregateOperator(
            source,
            group_by=["artist"],
            aggregates=[AggregateSpec(AggregateFunc.COUNT, None, "total_tracks")],
        )
        return SortOperator(counts, [SortKey("total_tracks")])


@dataclass(frozen=True)
class AlbumDanceability(AnalyticalQuery):
    query_id: ClassVar[int] = 6
    name: ClassVar[str] = "album_danceability"
    description: ClassVar[str] = "Average danceability per album, highest first"
    columns: ClassVar[tuple[str, ...]] = ("album", "avg_danceability")

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        averages = HashAggregateOperator(
            source,
            group_by=["album"],
            aggregates=[AggregateSpec(AggregateFunc.AVG, "danceability", "avg_danceability")],
        )
        return SortOperator(averages, [SortKey("avg_danceability", ascending=False)])


@dataclass(frozen=True)
class TopEnergyTracks(AnalyticalQuery):
    query_id: ClassVar[int] = 7
    name: ClassVar[str] = "top_energy_tracks"
    description: ClassVar[str] = "Top tracks by maximum energy"
    columns: ClassVar[tuple[str, ...]] = ("track", "max_energy")

    limit: int = 5

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        energies = HashAggregateOperator(
            source,
            group_by=["track"],
            aggregates=[AggregateSpec(AggregateFunc.MAX, "energy", "max_energy")],
        )
        ordered = SortOperator(energies, [SortKey("max_energy", ascending=False)])
        return LimitOperator(ordered, self.limit)


@dataclass(frozen=True)
class OfficialVideoEngagement(AnalyticalQuery):
    query_id: ClassVar[int] = 8
    name: ClassVar[str] = "official_video_engagement"
    description: ClassVar[str] = "Total views and likes per track with an official video"
    columns: ClassVar[tuple[str, ...]] = ("track", "total_views", "total_likes")

    def access_predicate(self, table: TrackTable) -> Predicate | None:
        return Predicate("official_video", ComparisonOp.EQ, True)

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        totals = HashAggregateOperator(
            source,
            group_by=["track"],
            aggregates=[
                AggregateSpec(AggregateFunc.SUM, "views", "total_views"),
                AggregateSpec(AggregateFunc.SUM, "likes", "total_likes"),
            ],
        )
        return SortOperator(totals, [SortKey("total_views", ascending=False)])


@dataclass(frozen=True)
class AlbumTrackViews(AnalyticalQuery):
    query_id: ClassVar[int] = 9
    name: ClassVar[str] = "album_track_views"
    description: ClassVar[str] = "Total views per album and track, most viewed first"
    columns: ClassVar[tuple[str, ...]] = ("album", "track", "total_views")

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        totals = HashAggregateOperator(
            source,
            group_by=["album", "track"],
            aggregates=[AggregateSpec(AggregateFunc.SUM, "views", "total_views")],
        )
        return SortOperator(totals, [SortKey("total_views", ascending=False)])


def _played_on(platform: MostPlayedOn):
    return lambda row: row["most_played_on"] == platform


@dataclass(frozen=True)
class SpotifyDominantTracks(AnalyticalQuery):
    query_id: ClassVar[int] = 10
    name: ClassVar[str] = "spotify_dominant_tracks"
    description: ClassVar[str] = "Tracks streamed more on Spotify than on Youtube"
    columns: ClassVar[tuple[str, ...]] = (
        "track",
        "streamed_on_spotify",
        "streamed_on_youtube",
    )

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        totals = HashAggregateOperator(
            source,
            group_by=["track"],
            aggregates=[
                AggregateSpec(
                    AggregateFunc.SUM,
                    "stream",
                    "streamed_on_spotify",
                    where=_played_on(MostPlayedOn.SPOTIFY),
                ),
                AggregateSpec(
                    AggregateFunc.SUM,
                    "stream",
                    "streamed_on_youtube",
                    where=_played_on(MostPlayedOn.YOUTUBE),
                ),
            ],
        )
        return FilterOperator(
            totals,
            lambda row: (
                row["streamed_on_youtube"] != 0
                and row["streamed_on_spotify"] > row["streamed_on_youtube"]
            ),
        )


@dataclass(frozen=True)
class TopTracksPerArtist(AnalyticalQuery):
    query_id: ClassVar[int] = 11
    name: ClassVar[str] = "top_tracks_per_artist"
    description: ClassVar[str] = "Top tracks per artist by total views (dense rank)"
    columns: ClassVar[tuple[str, ...]] = ("artist", "track", "total_views", "rank")

    top_n: int = 3

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        totals = HashAggregateOperator(
            source,
            group_by=["artist", "track"],
            aggregates=[AggregateSpec(AggregateFunc.SUM, "views", "total_views")],
        )
        ranked = DenseRankOperator(totals, partition_by=["artist"], order_by="total_views")
        kept = FilterOperator(ranked, lambda row: row["rank"] <= self.top_n)
        return SortOperator(kept, [SortKey("artist")])


@dataclass(frozen=True)
class AboveAverageLiveness(AnalyticalQuery):
    query_id: ClassVar[int] = 12
    name: ClassVar[str] = "above_average_liveness"
    description: ClassVar[str] = "Tracks livelier than the dataset-wide average"
    columns: ClassVar[tuple[str, ...]] = ("track", "artist", "liveness")

    def access_predicate(self, table: TrackTable) -> Predicate | None:
        average = HashAggregateOperator(
            SeqScanOperator(table),
            group_by=[],
            aggregates=[AggregateSpec(AggregateFunc.AVG, "liveness", "avg_liveness")],
        )
        (row,) = list(average)
        return Predicate("liveness", ComparisonOp.GT, row["avg_liveness"])

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        return ProjectOperator(source, self.columns)


@dataclass(frozen=True)
class AlbumEnergySpread(AnalyticalQuery):
    query_id: ClassVar[int] = 13
    name: ClassVar[str] = "album_energy_spread"
    description: ClassVar[str] = "Difference between highest and lowest energy per album"
    columns: ClassVar[tuple[str, ...]] = (
        "album",
        "highest_energy",
        "lowest_energy",
        "energy_diff",
    )

    def plan(self, source: Operator, table: TrackTable) -> Operator:
        extremes = HashAggregateOperator(
            source,
            group_by=["album"],
            aggregates=[
                AggregateSpec(AggregateFunc.MAX, "energy", "highest_energy"),
                AggregateSpec(AggregateFunc.MIN, "energy", "lowest_energy"),
            ],
        )
        spread = ComputeOperator(
            extremes,
            "energy_diff",
            lambda row: row["highest_energy"] - row["lowest_energy"],
        )
        return SortOperator(spread, [SortKey("energy_diff", ascending=False)])


# =============================================================================
# Catalog
# =============================================================================


class QueryCatalog:
    """Ordered registry of catalog queries, addressable by id or name."""

    def __init__(self, queries: list[AnalyticalQuery]) -> None:
        self._by_id: dict[int, AnalyticalQuery] = {}
        for query in sorted(queries, key=lambda q: q.query_id):
            if query.query_id in self._by_id:
                raise ValueError(f"Duplicate query id {query.query_id}")
            self._by_id[query.query_id] = query
        self._by_name = {query.name: query for query in self._by_id.values()}

    @classmethod
    def default(cls, config: CatalogConfig | None = None) -> QueryCatalog:
        """Build the thirteen reference queries with configured parameters."""
        config = config or CatalogConfig()
        return cls(
            [
                StreamsAboveThreshold(threshold=config.stream_threshold),
                DistinctAlbumArtists(),
                LicensedCommentTotal(),
                TracksByAlbumType(),
                TracksPerArtist(),
                AlbumDanceability(),
                TopEnergyTracks(limit=config.top_energy_limit),
                OfficialVideoEngagement(),
                AlbumTrackViews(),
                SpotifyDominantTracks(),
                TopTracksPerArtist(top_n=config.top_tracks_per_artist),
                AboveAverageLiveness(),
                AlbumEnergySpread(),
            ]
        )

    def get(self, query_id: int) -> AnalyticalQuery:
        """Return the query with the given id.

        Raises:
            UnknownQueryError: If no query has that id.
        """
        query = self._by_id.get(query_id)
        if query is None:
            raise UnknownQueryError(query_id)
        return query

    def by_name(self, name: str) -> AnalyticalQuery:
        query = self._by_name.get(name)
        if query is None:
            raise UnknownQueryError(name)
        return query

    @property
    def ids(self) -> list[int]:
        return list(self._by_id)

    def describe(self) -> list[tuple[int, str, str]]:
        return [(q.query_id, q.name, q.description) for q in self._by_id.values()]

    def __iter__(self) -> Iterator[AnalyticalQuery]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)
