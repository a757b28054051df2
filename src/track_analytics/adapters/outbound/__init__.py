"""Outbound adapters - concrete track sources."""

from track_analytics.adapters.outbound.file_source import FileTrackSource
from track_analytics.adapters.outbound.synthetic_source import SyntheticTrackSource

__all__ = [
    "FileTrackSource",
    "SyntheticTrackSource",
]
