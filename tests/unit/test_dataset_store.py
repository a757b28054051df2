"""Unit tests for the in-memory track table and its indexes."""

from __future__ import annotations

from typing import Any

import pytest

from track_analytics.domain.entities import TRACK_COLUMNS, AlbumType, Track
from track_analytics.domain.services import HashIndex, TrackTable
from track_analytics.domain.value_objects import ComparisonOp, Predicate
from track_analytics.infrastructure.metrics import MetricsRegistry
from track_analytics.ports import (
    DatasetTooLargeError,
    MalformedRecordError,
    NoIndexError,
    UnknownColumnError,
)


@pytest.mark.unit
class TestLoad:
    """Tests for TrackTable.load."""

    def test_load_preserves_order(self, table: TrackTable) -> None:
        assert table.row_count == 6
        assert len(table) == 6
        assert [t.track for t in table.tracks][:2] == ["Feel Good Inc.", "DARE"]

    def test_load_accepts_tracks(self, table: TrackTable, metrics_registry: MetricsRegistry) -> None:
        copy = TrackTable.load(table.tracks, metrics=metrics_registry)

        assert copy.tracks == table.tracks

    def test_load_empty(self, empty_table: TrackTable) -> None:
        assert empty_table.row_count == 0
        assert empty_table.scan() == []

    def test_malformed_record_aborts_load(
        self, record_factory, metrics_registry: MetricsRegistry
    ) -> None:
        records = [record_factory(), record_factory(views="lots"), record_factory()]

        with pytest.raises(MalformedRecordError) as exc_info:
            TrackTable.load(records, metrics=metrics_registry)

        assert exc_info.value.position == 1
        assert "record 1" in str(exc_info.value)

    def test_unknown_enum_is_malformed(
        self, record_factory, metrics_registry: MetricsRegistry
    ) -> None:
        with pytest.raises(MalformedRecordError):
            TrackTable.load([record_factory(album_type="mixtape")], metrics=metrics_registry)

    def test_dataset_too_large(self, record_factory, metrics_registry: MetricsRegistry) -> None:
        records = [record_factory() for _ in range(4)]

        with pytest.raises(DatasetTooLargeError):
            TrackTable.load(records, max_rows=3, metrics=metrics_registry)

    def test_dataset_at_limit(self, record_factory, metrics_registry: MetricsRegistry) -> None:
        records = [record_factory() for _ in range(3)]

        table = TrackTable.load(records, max_rows=3, metrics=metrics_registry)

        assert table.row_count == 3

    def test_duplicates_are_kept(self, record_factory, metrics_registry: MetricsRegistry) -> None:
        table = TrackTable.load([record_factory(), record_factory()], metrics=metrics_registry)

        assert table.row_count == 2

    def test_load_updates_metrics(
        self, table: TrackTable, metrics_registry: MetricsRegistry
    ) -> None:
        assert metrics_registry.dataset_rows._value.get() == 6

    def test_rows_parallel_tracks(self, table: TrackTable) -> None:
        for row, track in zip(table.rows, table.tracks):
            assert row.columns == TRACK_COLUMNS
            assert row["artist"] == track.artist
            assert row["views"] == track.views


@pytest.mark.unit
class TestScan:
    """Tests for full scans."""

    def test_scan_all(self, table: TrackTable) -> None:
        assert table.scan() == list(table.tracks)

    def test_scan_with_predicate(self, table: TrackTable) -> None:
        gorillaz = table.scan(lambda t: t.artist == "Gorillaz")

        assert [t.track for t in gorillaz] == ["Feel Good Inc.", "DARE", "On Melancholy Hill"]

    def test_scan_with_column_predicate(self, table: TrackTable) -> None:
        loud = table.scan(Predicate("views", ComparisonOp.GE, 900))

        assert [t.track for t in loud] == ["Feel Good Inc.", "Get Lucky", "Hello"]


@pytest.mark.unit
class TestBuildIndex:
    """Tests for index construction."""

    def test_build_index_is_idempotent(self, table: TrackTable) -> None:
        first = table.build_index("artist")
        second = table.build_index("artist")

        assert first is second
        assert first == HashIndex.build("artist", table.tracks)

    def test_index_contents(self, table: TrackTable) -> None:
        index = table.build_index("artist")

        assert index.entries == {"Gorillaz": (0, 1, 2), "Daft Punk": (3, 4), "Adele": (5,)}
        assert index.num_keys == 3
        assert index.num_entries == table.row_count

    def test_unknown_column(self, table: TrackTable) -> None:
        with pytest.raises(UnknownColumnError):
            table.build_index("popularity")

    def test_indexed_columns(self, table: TrackTable) -> None:
        assert not table.has_index("album")

        table.build_index("album")
        table.build_index("licensed")

        assert table.has_index("album")
        assert table.indexed_columns == ["album", "licensed"]
        assert [s.column for s in table.index_stats()] == ["album", "licensed"]

    def test_index_on_empty_table(self, empty_table: TrackTable) -> None:
        index = empty_table.build_index("artist")

        assert index.num_keys == 0
        assert empty_table.indexed_lookup("artist", "Adele") == []

    def test_new_load_has_no_indexes(
        self, table: TrackTable, metrics_registry: MetricsRegistry
    ) -> None:
        table.build_index("artist")

        reloaded = TrackTable.load(table.tracks, metrics=metrics_registry)

        assert reloaded.indexed_columns == []


@pytest.mark.unit
class TestIndexedLookup:
    """Tests for equality and range lookups through an index."""

    def test_requires_index(self, table: TrackTable) -> None:
        with pytest.raises(NoIndexError):
            table.indexed_lookup("artist", "Gorillaz")

    @pytest.mark.parametrize("column", ["artist", "album", "album_type", "licensed", "views"])
    def test_lookup_matches_scan(self, table: TrackTable, column: str) -> None:
        table.build_index(column)

        for value in {track[column] for track in table.tracks}:
            expected = table.scan(lambda t: t[column] == value)
            assert table.indexed_lookup(column, value) == expected

    def test_missing_value(self, table: TrackTable) -> None:
        table.build_index("artist")

        assert table.indexed_lookup("artist", "Blur") == []

    @pytest.mark.parametrize(
        ("column", "raw", "expected"),
        [
            ("album_type", "single", ["On Melancholy Hill", "Get Lucky"]),
            ("album_type", "SINGLE", ["On Melancholy Hill", "Get Lucky"]),
            ("album_type", AlbumType.SINGLE, ["On Melancholy Hill", "Get Lucky"]),
            ("licensed", "FALSE", ["On Melancholy Hill", "Hello"]),
            ("views", "500", ["DARE", "On Melancholy Hill"]),
        ],
    )
    def test_lookup_coerces_value(
        self, table: TrackTable, column: str, raw: Any, expected: list[str]
    ) -> None:
        table.build_index(column)

        assert [t.track for t in table.indexed_lookup(column, raw)] == expected

    def test_uncoercible_value(self, table: TrackTable) -> None:
        table.build_index("views")

        with pytest.raises(ValueError):
            table.indexed_lookup("views", "many")

    def test_range_lookup(self, table: TrackTable) -> None:
        table.build_index("views")

        tracks = table.indexed_range("views", 800, 1000)

        assert [t.track for t in tracks] == ["Feel Good Inc.", "One More Time", "Get Lucky"]

    def test_range_lookup_exclusive(self, table: TrackTable) -> None:
        table.build_index("views")

        tracks = table.indexed_range("views", 800, 1000, include_low=False, include_high=False)

        assert [t.track for t in tracks] == ["Feel Good Inc."]

    @pytest.mark.parametrize(
        "op", [ComparisonOp.GT, ComparisonOp.GE, ComparisonOp.LT, ComparisonOp.LE]
    )
    def test_range_predicates_match_scan(self, table: TrackTable, op: ComparisonOp) -> None:
        table.build_index("liveness")
        predicate = Predicate("liveness", op, 0.2)

        positions = table.positions_for(predicate)

        assert [table.tracks[p] for p in positions] == table.scan(predicate)

    def test_not_equal_cannot_use_index(self, table: TrackTable) -> None:
        table.build_index("artist")

        with pytest.raises(ValueError):
            table.positions_for(Predicate("artist", ComparisonOp.NE, "Adele"))

    def test_lookup_stats(self, table: TrackTable) -> None:
        table.build_index("artist")
        table.indexed_lookup("artist", "Adele")
        table.indexed_lookup("artist", "Blur")

        (stats,) = table.index_stats()

        assert stats.lookup_count == 2
        assert stats.num_entries == 6


@pytest.mark.unit
class TestHashIndex:
    """Tests for HashIndex."""

    def test_range_unbounded(self, record_factory) -> None:
        tracks = [Track.model_validate(record_factory(views=v)) for v in (30, 10, 20, 10)]
        index = HashIndex.build("views", tracks)

        assert index.range() == (0, 1, 2, 3)
        assert index.range(low=20) == (0, 2)
        assert index.range(high=10) == (1, 3)
