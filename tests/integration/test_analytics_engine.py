"""Integration tests for TrackAnalytics."""

import pytest

from track_analytics.adapters.outbound import FileTrackSource, SyntheticTrackSource
from track_analytics.application import TrackAnalytics
from track_analytics.infrastructure.config import Config, DatasetConfig
from track_analytics.ports import DatasetTooLargeError, EmptyDatasetError, IndexNotApplicableError


class TestTrackAnalytics:
    """Test cases for TrackAnalytics."""

    def test_requires_load(self, test_config):
        """Test that queries need a loaded dataset."""
        engine = TrackAnalytics(test_config)
        assert not engine.is_loaded

        with pytest.raises(RuntimeError):
            engine.run(1)

    def test_run_every_query(self, test_config, metrics_registry):
        """Test running the whole catalog over synthetic data."""
        engine = TrackAnalytics(test_config, metrics=metrics_registry)
        table = engine.load(SyntheticTrackSource(200, seed=7))
        assert engine.is_loaded
        assert table.row_count == 200

        for query_id in engine.catalog.ids:
            query, rows = engine.run(query_id)
            assert query.query_id == query_id
            for row in rows:
                assert row.columns == query.columns

    def test_query_counts_cover_table(self, test_config, metrics_registry):
        """Test that per-artist counts add up to the row count."""
        engine = TrackAnalytics(test_config, metrics=metrics_registry)
        engine.load(SyntheticTrackSource(300, seed=11))

        _, rows = engine.run(5)
        assert sum(row["total_tracks"] for row in rows) == 300

    @pytest.mark.parametrize(
        "query_id, column",
        [(1, "stream"), (3, "licensed"), (4, "album_type"), (8, "official_video"), (12, "liveness")],
    )
    def test_compare_paths_agree(self, test_config, metrics_registry, query_id, column):
        """Test that scan and index paths return the same rows."""
        engine = TrackAnalytics(test_config, metrics=metrics_registry)
        engine.load(SyntheticTrackSource(500, seed=5))

        report = engine.compare(query_id, column, repeat=2)

        assert report.rows_match
        assert report.scan_descriptor == "sequential scan over 500 rows"
        assert engine.table.has_index(column)

    def test_compare_not_applicable(self, test_config, metrics_registry):
        """Test comparing a query that reads the whole table."""
        engine = TrackAnalytics(test_config, metrics=metrics_registry)
        engine.load(SyntheticTrackSource(20))

        with pytest.raises(IndexNotApplicableError):
            engine.compare(9, "album")

    def test_reload_drops_indexes(self, test_config, metrics_registry):
        """Test that loading again replaces the table and its indexes."""
        engine = TrackAnalytics(test_config, metrics=metrics_registry)
        first = engine.load(SyntheticTrackSource(20))
        engine.compare(4, "album_type")
        assert first.has_index("album_type")

        second = engine.load(SyntheticTrackSource(30))

        assert engine.table is second
        assert second.row_count == 30
        assert second.indexed_columns == []

    def test_row_guard(self, metrics_registry):
        """Test the configured maximum row count."""
        config = Config(dataset=DatasetConfig(max_rows=10))
        engine = TrackAnalytics(config, metrics=metrics_registry)

        with pytest.raises(DatasetTooLargeError):
            engine.load(SyntheticTrackSource(11))
        assert not engine.is_loaded

    def test_empty_dataset(self, test_config, metrics_registry):
        """Test a global aggregate over an empty dataset."""
        engine = TrackAnalytics(test_config, metrics=metrics_registry)
        engine.load(SyntheticTrackSource(0))

        with pytest.raises(EmptyDatasetError):
            engine.run(3)
        _, rows = engine.run(4)
        assert rows == []

    def test_load_json_fixture(self, test_config, metrics_registry, temp_dir, sample_records):
        """Test loading a JSON fixture file."""
        import json

        path = temp_dir / "tracks.json"
        path.write_text(json.dumps({"tracks": sample_records}))

        engine = TrackAnalytics(test_config, metrics=metrics_registry)
        engine.load(FileTrackSource(path))

        _, rows = engine.run(3)
        assert rows[0]["total_comments"] == 140
