"""Pytest configuration and fixtures for track_analytics tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from track_analytics.domain.services import TrackTable
from track_analytics.infrastructure.config import CatalogConfig, Config, DatasetConfig, ReporterConfig
from track_analytics.infrastructure.metrics import MetricsRegistry

RecordFactory = Callable[..., dict[str, Any]]


def make_record(**overrides: Any) -> dict[str, Any]:
    """Build a valid raw track record; keyword arguments override fields."""
    record: dict[str, Any] = {
        "artist": "Gorillaz",
        "track": "Feel Good Inc.",
        "album": "Demon Days",
        "album_type": "album",
        "danceability": 0.818,
        "energy": 0.705,
        "loudness": -6.679,
        "speechiness": 0.177,
        "acousticness": 0.00836,
        "instrumentalness": 0.00233,
        "liveness": 0.613,
        "valence": 0.772,
        "tempo": 138.559,
        "duration_min": 3.715,
        "title": "Gorillaz - Feel Good Inc. (Official Video)",
        "channel": "Gorillaz",
        "views": 693_555_221,
        "likes": 6_220_896,
        "comments": 169_907,
        "stream": 1_040_234_854,
        "licensed": True,
        "official_video": True,
        "most_played_on": "Spotify",
        "energy_liveness": 1.150,
    }
    record.update(overrides)
    return record


@pytest.fixture
def record_factory() -> RecordFactory:
    """Provide the raw record builder."""
    return make_record


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    """A small dataset covering every catalog query."""
    return [
        make_record(
            artist="Gorillaz", track="Feel Good Inc.", album="Demon Days",
            views=900, likes=90, comments=40, stream=2_000_000_000,
            energy=0.70, liveness=0.60, danceability=0.80,
        ),
        make_record(
            artist="Gorillaz", track="DARE", album="Demon Days",
            views=500, likes=50, comments=20, stream=400_000_000,
            energy=0.90, liveness=0.10, danceability=0.70, official_video=False,
        ),
        make_record(
            artist="Gorillaz", track="On Melancholy Hill", album="Plastic Beach",
            views=500, likes=40, comments=10, stream=700_000_000,
            energy=0.50, liveness=0.20, danceability=0.60, licensed=False,
            album_type="single",
        ),
        make_record(
            artist="Daft Punk", track="One More Time", album="Discovery",
            views=800, likes=80, comments=30, stream=1_500_000_000,
            energy=0.95, liveness=0.30, danceability=0.65,
            most_played_on="Youtube",
        ),
        make_record(
            artist="Daft Punk", track="Get Lucky", album="Random Access Memories",
            views=1000, likes=100, comments=50, stream=1_200_000_000,
            energy=0.80, liveness=0.05, danceability=0.90, album_type="single",
        ),
        make_record(
            artist="Adele", track="Hello", album="25",
            views=2000, likes=200, comments=70, stream=900_000_000,
            energy=0.40, liveness=0.09, danceability=0.45,
            album_type="compilation", licensed=False, official_video=False,
        ),
    ]


@pytest.fixture
def table(sample_records: list[dict[str, Any]], metrics_registry: MetricsRegistry) -> TrackTable:
    """Provide a loaded table over ``sample_records``."""
    return TrackTable.load(sample_records, metrics=metrics_registry)


@pytest.fixture
def empty_table(metrics_registry: MetricsRegistry) -> TrackTable:
    """Provide a loaded table with no rows."""
    return TrackTable.load([], metrics=metrics_registry)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration with small, fast settings."""
    return Config(
        dataset=DatasetConfig(max_rows=10_000, synthetic_rows=200, seed=7),
        catalog=CatalogConfig(),
        reporter=ReporterConfig(repeat=1),
    )


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
