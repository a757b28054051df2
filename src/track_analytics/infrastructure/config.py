"""Configuration management for the analytics engine."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatasetConfig(BaseModel):
    """Dataset loading configuration."""

    source: Path | None = Field(
        default=None, description="Fixture file (CSV or JSON); synthetic data when unset"
    )
    max_rows: int = Field(
        default=1_000_000, ge=1, description="Row-count guard applied while loading"
    )
    synthetic_rows: int = Field(
        default=10_000, ge=0, description="Rows produced by the synthetic generator"
    )
    seed: int = Field(default=42, description="Seed for the synthetic generator")


class CatalogConfig(BaseModel):
    """Default parameters for the query catalog."""

    stream_threshold: int = Field(
        default=1_000_000_000, ge=0, description="Stream count threshold for query 1"
    )
    top_energy_limit: int = Field(
        default=5, ge=1, description="Number of tracks returned by query 7"
    )
    top_tracks_per_artist: int = Field(
        default=3, ge=1, description="Highest dense rank kept by query 11"
    )


class ReporterConfig(BaseModel):
    """Plan/timing reporter configuration."""

    repeat: int = Field(
        default=3, ge=1, le=1000, description="Timed runs per access path (fastest wins)"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus metrics port (disabled when unset)"
    )
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(
        default="track_analytics", description="Service name for tracing"
    )


class Config(BaseSettings):
    """Main configuration for the analytics engine."""

    model_config = SettingsConfigDict(
        env_prefix="TRACK_ANALYTICS_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    reporter: ReporterConfig = Field(default_factory=ReporterConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
