"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (CLI)
- Outbound adapters: Implement external dependencies (fixture files, generators)
"""

from track_analytics.adapters.outbound import (
    FileTrackSource,
    SyntheticTrackSource,
)

__all__ = [
    # Outbound adapters
    "FileTrackSource",
    "SyntheticTrackSource",
]
