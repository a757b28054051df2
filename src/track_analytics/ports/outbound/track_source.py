"""Track Source port for fixture input.

A track source yields raw records (mappings of column name to value) in a
stable order. Records are validated by the store, not by the source.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Iterator, Mapping, Protocol


class TrackSource(Protocol):
    """Protocol for fixture sources (files, generators)."""

    @abstractmethod
    def records(self) -> Iterator[Mapping[str, Any]]:
        """Yield raw records in source order.

        Raises:
            FixtureFormatError: If the source cannot be read.
        """
        ...

    @abstractmethod
    def describe(self) -> str:
        """Return a short human-readable description of the source."""
        ...


class FixtureFormatError(Exception):
    """Raised when a fixture file is unreadable or in an unsupported format."""

    def __init__(self, source: str, cause: str) -> None:
        super().__init__(f"load: cannot read {source}: {cause}")
        self.source = source
        self.cause = cause
