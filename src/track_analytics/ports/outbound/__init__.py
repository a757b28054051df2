"""Outbound ports - dependencies on external fixture sources."""

from track_analytics.ports.outbound.track_source import FixtureFormatError, TrackSource

__all__ = [
    "FixtureFormatError",
    "TrackSource",
]
