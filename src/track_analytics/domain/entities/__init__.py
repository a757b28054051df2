"""Domain entities for the analytics engine.

Exports:
    - Track: Validated, immutable track record
    - AlbumType, MostPlayedOn: Enumerated track domains
    - TRACK_COLUMNS: Track column names in declaration order
    - Row: Operator-facing row (column names + values)
"""

from track_analytics.domain.entities.row import Row
from track_analytics.domain.entities.track import (
    TRACK_COLUMNS,
    AlbumType,
    MostPlayedOn,
    Track,
    normalize_column_name,
    normalize_record,
)

__all__ = [
    "AlbumType",
    "MostPlayedOn",
    "Row",
    "TRACK_COLUMNS",
    "Track",
    "normalize_column_name",
    "normalize_record",
]
