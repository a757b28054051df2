"""Row entity returned by executor operators."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping


@lru_cache(maxsize=256)
def _positions(columns: tuple[str, ...]) -> dict[str, int]:
    return {name: i for i, name in enumerate(columns)}


@dataclass(frozen=True)
class Row:
    """A row of data flowing between operators.

    Rows are immutable tuples that can be accessed by column name or index.
    """

    columns: tuple[str, ...]
    values: tuple[Any, ...]

    def __getitem__(self, key: str | int) -> Any:
        if isinstance(key, int):
            return self.values[key]
        try:
            return self.values[_positions(self.columns)[key]]
        except KeyError as e:
            raise KeyError(f"Column '{key}' not found") from e

    def as_dict(self) -> dict[str, Any]:
        return dict(zip(self.columns, self.values))

    def extend(self, column: str, value: Any) -> Row:
        """Return a copy of this row with one more column appended."""
        return Row(columns=self.columns + (column,), values=self.values + (value,))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Row:
        return cls(columns=tuple(mapping), values=tuple(mapping.values()))

    def __repr__(self) -> str:
        pairs = ", ".join(f"{c}={v!r}" for c, v in zip(self.columns, self.values))
        return f"Row({pairs})"
