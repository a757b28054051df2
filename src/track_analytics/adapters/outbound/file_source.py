"""File-backed track source.

Reads fixture files in one of two layouts:

    .csv   header row + one record per line (dataset export format)
    .json  an array of objects, or {"tracks": [...]}

Values are yielded as read; type coercion happens in the store.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Iterator, Mapping

from track_analytics.ports.outbound.track_source import FixtureFormatError


class FileTrackSource:
    """Track source backed by a CSV or JSON file."""

    SUPPORTED_SUFFIXES = (".csv", ".json")

    def __init__(self, path: str | Path, delimiter: str = ",") -> None:
        self._path = Path(path)
        self._delimiter = delimiter

    @property
    def path(self) -> Path:
        return self._path

    def describe(self) -> str:
        return str(self._path)

    def records(self) -> Iterator[Mapping[str, Any]]:
        suffix = self._path.suffix.lower()
        if suffix not in self.SUPPORTED_SUFFIXES:
            raise FixtureFormatError(
                str(self._path), f"unsupported file type '{suffix or '(none)'}'"
            )
        try:
            if suffix == ".csv":
                yield from self._read_csv()
            else:
                yield from self._read_json()
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise FixtureFormatError(str(self._path), str(e)) from e

    def _read_csv(self) -> Iterator[Mapping[str, Any]]:
        with self._path.open(newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f, delimiter=self._delimiter)
            if reader.fieldnames is None:
                return
            for record in reader:
                # Leading unnamed index column of spreadsheet exports
                record.pop("", None)
                yield record

    def _read_json(self) -> Iterator[Mapping[str, Any]]:
        with self._path.open(encoding="utf-8") as f:
            try:
                document = json.load(f)
            except json.JSONDecodeError as e:
                raise FixtureFormatError(str(self._path), f"invalid JSON: {e}") from e

        if isinstance(document, dict):
            document = document.get("tracks")
        if not isinstance(document, list):
            raise FixtureFormatError(
                str(self._path), "expected an array of records or {\"tracks\": [...]}"
            )
        for position, record in enumerate(document):
            if not isinstance(record, dict):
                raise FixtureFormatError(str(self._path), f"record {position} is not an object")
            yield record
