"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (TrackStore, catalog queries)
- Outbound ports: Dependencies on external systems (TrackSource)

Adapters implement these ports with concrete functionality.
"""

from track_analytics.ports.inbound import (
    AnalyticalQueryPort,
    DatasetTooLargeError,
    EmptyDatasetError,
    IndexNotApplicableError,
    IndexStats,
    MalformedRecordError,
    NoIndexError,
    TrackStore,
    UnknownColumnError,
    UnknownQueryError,
)
from track_analytics.ports.outbound import FixtureFormatError, TrackSource

__all__ = [
    # Inbound ports
    "AnalyticalQueryPort",
    "DatasetTooLargeError",
    "EmptyDatasetError",
    "IndexNotApplicableError",
    "IndexStats",
    "MalformedRecordError",
    "NoIndexError",
    "TrackStore",
    "UnknownColumnError",
    "UnknownQueryError",
    # Outbound ports
    "FixtureFormatError",
    "TrackSource",
]
