"""Unit tests for configuration module."""

from __future__ import annotations

from pathlib import Path

import pytest

from track_analytics.infrastructure.config import (
    CatalogConfig,
    Config,
    DatasetConfig,
    ReporterConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.dataset.source is None
        assert config.dataset.max_rows == 1_000_000
        assert config.catalog.stream_threshold == 1_000_000_000
        assert config.catalog.top_energy_limit == 5
        assert config.catalog.top_tracks_per_artist == 3
        assert config.reporter.repeat == 3
        assert config.observability.metrics_port is None

    def test_custom_dataset_config(self, temp_dir: Path) -> None:
        """Test custom dataset configuration."""
        dataset = DatasetConfig(source=temp_dir / "tracks.csv", max_rows=500)

        assert dataset.source == temp_dir / "tracks.csv"
        assert dataset.max_rows == 500

    def test_invalid_max_rows(self) -> None:
        """Test that a zero row guard raises validation error."""
        with pytest.raises(ValueError):
            DatasetConfig(max_rows=0)

    def test_invalid_repeat(self) -> None:
        """Test that a zero repeat count raises validation error."""
        with pytest.raises(ValueError):
            ReporterConfig(repeat=0)

    def test_invalid_top_n(self) -> None:
        with pytest.raises(ValueError):
            CatalogConfig(top_tracks_per_artist=0)

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested settings can be overridden from the environment."""
        monkeypatch.setenv("TRACK_ANALYTICS_CATALOG__STREAM_THRESHOLD", "500")
        monkeypatch.setenv("TRACK_ANALYTICS_OBSERVABILITY__LOG_LEVEL", "DEBUG")

        config = Config()

        assert config.catalog.stream_threshold == 500
        assert config.observability.log_level == "DEBUG"


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
