"""Domain services for business logic.

Exports:
    - TrackTable: Immutable in-memory table of tracks
    - HashIndex: Single-column index owned by a table
"""

from track_analytics.domain.services.dataset_store import HashIndex, TrackTable

__all__ = [
    "HashIndex",
    "TrackTable",
]
