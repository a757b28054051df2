"""Inbound ports - API contracts for the analytics engine.

Inbound ports define the interfaces that the CLI and upper layers
use to interact with the dataset store and the query catalog.
"""

from track_analytics.ports.inbound.dataset_store import (
    DatasetTooLargeError,
    IndexStats,
    MalformedRecordError,
    NoIndexError,
    TrackStore,
    UnknownColumnError,
)
from track_analytics.ports.inbound.query_catalog import (
    AnalyticalQueryPort,
    EmptyDatasetError,
    IndexNotApplicableError,
    UnknownQueryError,
)

__all__ = [
    # Dataset Store
    "DatasetTooLargeError",
    "IndexStats",
    "MalformedRecordError",
    "NoIndexError",
    "TrackStore",
    "UnknownColumnError",
    # Query Catalog
    "AnalyticalQueryPort",
    "EmptyDatasetError",
    "IndexNotApplicableError",
    "UnknownQueryError",
]
