"""Query executor using the Volcano iterator model.

This module implements the relational operators the query catalog is
composed from. Each operator is an iterator with open(), next(), close()
methods and pulls rows from its child on demand.

Operators:
    - SeqScanOperator / IndexLookupOperator: access paths over a table
    - FilterOperator, ProjectOperator, ComputeOperator: row-at-a-time
    - HashAggregateOperator, DistinctOperator: grouping
    - SortOperator, LimitOperator: ordering
    - DenseRankOperator: window function (DENSE_RANK over a partition)

Ordering guarantees:
    Groups are emitted in first-seen order and every sort is stable, so
    ties keep their input order and results are deterministic.

References:
    - Graefe, "Volcano" (1994)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterator, Sequence

from track_analytics.domain.entities import Row
from track_analytics.domain.value_objects import AccessPath, Predicate
from track_analytics.ports.inbound.query_catalog import (
    EmptyDatasetError,
    IndexNotApplicableError,
)

if TYPE_CHECKING:
    from track_analytics.domain.services import TrackTable


class AggregateFunc(Enum):
    """Aggregate functions."""

    COUNT = "COUNT"
    SUM = "SUM"
    AVG = "AVG"
    MIN = "MIN"
    MAX = "MAX"


@dataclass(frozen=True)
class AggregateSpec:
    """One aggregate output column.

    Attributes:
        func: Aggregate function.
        column: Input column (None for COUNT(*)).
        alias: Output column name.
        where: Optional per-row condition (SQL ``FILTER (WHERE ...)``).
    """

    func: AggregateFunc
    column: str | None
    alias: str
    where: Callable[[Row], bool] | None = None


@dataclass(frozen=True)
class SortKey:
    """Sort key for SortOperator."""

    column: str
    ascending: bool = True


class Operator(ABC):
    """Base class for executor operators (Volcano model)."""

    @abstractmethod
    def open(self) -> None:
        """Initialize the operator."""
        pass

    @abstractmethod
    def next(self) -> Row | None:
        """Return the next row or None if exhausted."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Clean up resources."""
        pass

    def __iter__(self) -> Iterator[Row]:
        """Allow iteration over operator results."""
        self.open()
        try:
            while True:
                row = self.next()
                if row is None:
                    break
                yield row
        finally:
            self.close()


class _MaterializedOperator(Operator):
    """Operator that computes its full output on open() and replays it."""

    def __init__(self, child: Operator) -> None:
        self._child = child
        self._output: list[Row] = []
        self._current_idx = 0

    def open(self) -> None:
        self._child.open()
        rows = []
        while True:
            row = self._child.next()
            if row is None:
                break
            rows.append(row)
        self._output = self._materialize(rows)
        self._current_idx = 0

    @abstractmethod
    def _materialize(self, rows: list[Row]) -> list[Row]:
        pass

    def next(self) -> Row | None:
        if self._current_idx >= len(self._output):
            return None
        row = self._output[self._current_idx]
        self._current_idx += 1
        return row

    def close(self) -> None:
        self._child.close()
        self._output = []
        self._current_idx = 0


class SeqScanOperator(Operator):
    """Sequential scan operator.

    Reads every row of the table in load order.
    """

    def __init__(self, table: TrackTable) -> None:
        self._table = table
        self._rows: Sequence[Row] = ()
        self._current_row = 0

    def open(self) -> None:
        self._rows = self._table.rows
        self._current_row = 0

    def next(self) -> Row | None:
        if self._current_row >= len(self._rows):
            return None
        row = self._rows[self._current_row]
        self._current_row += 1
        return row

    def close(self) -> None:
        self._rows = ()
        self._current_row = 0


class IndexLookupOperator(Operator):
    """Index lookup operator.

    Resolves a predicate through the table's index on the predicate
    column and reads only the matching rows, in load order.
    """

    def __init__(self, table: TrackTable, predicate: Predicate) -> None:
        self._table = table
        self._predicate = predicate
        self._positions: Sequence[int] = ()
        self._current_idx = 0

    def open(self) -> None:
        self._positions = self._table.positions_for(self._predicate)
        self._current_idx = 0

    def next(self) -> Row | None:
        if self._current_idx >= len(self._positions):
            return None
        row = self._table.rows[self._positions[self._current_idx]]
        self._current_idx += 1
        return row

    def close(self) -> None:
        self._positions = ()
        self._current_idx = 0


class FilterOperator(Operator):
    """Filter operator that applies a predicate."""

    def __init__(self, child: Operator, predicate: Callable[[Row], bool]) -> None:
        self._child = child
        self._predicate = predicate

    def open(self) -> None:
        self._child.open()

    def next(self) -> Row | None:
        while True:
            row = self._child.next()
            if row is None:
                return None
            if self._predicate(row):
                return row

    def close(self) -> None:
        self._child.close()


class ProjectOperator(Operator):
    """Project operator that selects specific columns."""

    def __init__(
        self,
        child: Operator,
        columns: Sequence[str],
        aliases: Sequence[str | None] | None = None,
    ) -> None:
        self._child = child
        self._columns = tuple(columns)
        aliases = aliases or [None] * len(self._columns)
        self._output_columns = tuple(
            alias or column for column, alias in zip(self._columns, aliases)
        )

    def open(self) -> None:
        self._child.open()

    def next(self) -> Row | None:
        row = self._child.next()
        if row is None:
            return None
        return Row(
            columns=self._output_columns,
            values=tuple(row[column] for column in self._columns),
        )

    def close(self) -> None:
        self._child.close()


class ComputeOperator(Operator):
    """Appends a column computed from each input row."""

    def __init__(self, child: Operator, alias: str, func: Callable[[Row], Any]) -> None:
        self._child = child
        self._alias = alias
        self._func = func

    def open(self) -> None:
        self._child.open()

    def next(self) -> Row | None:
        row = self._child.next()
        if row is None:
            return None
        return row.extend(self._alias, self._func(row))

    def close(self) -> None:
        self._child.close()


class _Accumulator:
    """Running state for one aggregate within one group."""

    __slots__ = ("func", "count", "total", "extreme")

    def __init__(self, func: AggregateFunc) -> None:
        self.func = func
        self.count = 0
        self.total: Any = 0
        self.extreme: Any = None

    def add(self, value: Any) -> None:
        if value is None:
            return
        self.count += 1
        if self.func in (AggregateFunc.SUM, AggregateFunc.AVG):
            self.total += value
        elif self.func == AggregateFunc.MIN:
            if self.extreme is None or value < self.extreme:
                self.extreme = value
        elif self.func == AggregateFunc.MAX:
            if self.extreme is None or value > self.extreme:
                self.extreme = value

    def result(self) -> Any:
        if self.func == AggregateFunc.COUNT:
            return self.count
        if self.func == AggregateFunc.SUM:
            return self.total
        if self.func == AggregateFunc.AVG:
            return self.total / self.count if self.count else None
        return self.extreme


class HashAggregateOperator(_MaterializedOperator):
    """Groups rows and computes aggregates per group.

    With no grouping columns the operator computes a single global row;
    a global aggregate over zero input rows raises EmptyDatasetError
    instead of producing a zero or a NULL.
    """

    def __init__(
        self,
        child: Operator,
        group_by: Sequence[str],
        aggregates: Sequence[AggregateSpec],
    ) -> None:
        super().__init__(child)
        self._group_by = tuple(group_by)
        self._aggregates = tuple(aggregates)
        self._output_columns = self._group_by + tuple(spec.alias for spec in self._aggregates)

    def _materialize(self, rows: list[Row]) -> list[Row]:
        if not self._group_by and not rows:
            funcs = ", ".join(
                f"{spec.func.value}({spec.column or '*'})" for spec in self._aggregates
            )
            raise EmptyDatasetError(f"aggregate {funcs}")

        groups: dict[tuple, list[_Accumulator]] = {}
        for row in rows:
            key = tuple(row[column] for column in self._group_by)
            accumulators = groups.get(key)
            if accumulators is None:
                accumulators = [_Accumulator(spec.func) for spec in self._aggregates]
                groups[key] = accumulators
            for spec, accumulator in zip(self._aggregates, accumulators):
                if spec.where is not None and not spec.where(row):
                    continue
                accumulator.add(1 if spec.column is None else row[spec.column])

        return [
            Row(
                columns=self._output_columns,
                values=key + tuple(accumulator.result() for accumulator in accumulators),
            )
            for key, accumulators in groups.items()
        ]


class DistinctOperator(_MaterializedOperator):
    """Removes duplicate rows, keeping the first occurrence."""

    def _materialize(self, rows: list[Row]) -> list[Row]:
        seen: set[tuple] = set()
        output = []
        for row in rows:
            if row.values in seen:
                continue
            seen.add(row.values)
            output.append(row)
        return output


class SortOperator(_MaterializedOperator):
    """Stable sort over one or more keys."""

    def __init__(self, child: Operator, keys: Sequence[SortKey]) -> None:
        super().__init__(child)
        self._keys = tuple(keys)

    def _materialize(self, rows: list[Row]) -> list[Row]:
        # Least significant key first; list.sort is stable, reverse included.
        for key in reversed(self._keys):
            rows.sort(key=lambda row, c=key.column: row[c], reverse=not key.ascending)
        return rows


class LimitOperator(Operator):
    """Limit operator that restricts row count."""

    def __init__(self, child: Operator, limit: int) -> None:
        self._child = child
        self._limit = limit
        self._returned = 0

    def open(self) -> None:
        self._child.open()
        self._returned = 0

    def next(self) -> Row | None:
        if self._returned >= self._limit:
            return None
        row = self._child.next()
        if row is None:
            return None
        self._returned += 1
        return row

    def close(self) -> None:
        self._child.close()


class DenseRankOperator(_MaterializedOperator):
    """DENSE_RANK() OVER (PARTITION BY ... ORDER BY <column>).

    Rows with equal order values share a rank and the next distinct value
    gets the previous rank + 1, so ranks within a partition have no gaps.
    Partitions are emitted in first-seen order, each sorted by the order
    column (stable), with the rank appended as a new column.
    """

    def __init__(
        self,
        child: Operator,
        partition_by: Sequence[str],
        order_by: str,
        descending: bool = True,
        alias: str = "rank",
    ) -> None:
        super().__init__(child)
        self._partition_by = tuple(partition_by)
        self._order_by = order_by
        self._descending = descending
        self._alias = alias

    def _materialize(self, rows: list[Row]) -> list[Row]:
        partitions: dict[tuple, list[Row]] = {}
        for row in rows:
            key = tuple(row[column] for column in self._partition_by)
            partitions.setdefault(key, []).append(row)

        output = []
        for members in partitions.values():
            members.sort(key=lambda row: row[self._order_by], reverse=self._descending)
            rank = 0
            previous: Any = object()
            for row in members:
                value = row[self._order_by]
                if rank == 0 or value != previous:
                    rank += 1
                    previous = value
                output.append(row.extend(self._alias, rank))
        return output


def build_access_operator(
    table: TrackTable,
    predicate: Predicate | None,
    access_path: AccessPath,
    operation: str = "query",
) -> Operator:
    """Build the leaf of an operator tree for the given access path.

    The sequential path scans every row and filters by the predicate; the
    index path resolves the predicate through the index on its column.

    Raises:
        IndexNotApplicableError: If the index path is requested without a
            predicate to resolve.
    """
    if access_path == AccessPath.INDEX_LOOKUP:
        if predicate is None:
            raise IndexNotApplicableError(operation, None)
        return IndexLookupOperator(table, predicate)

    scan = SeqScanOperator(table)
    if predicate is None:
        return scan
    return FilterOperator(scan, table.coerce_predicate(predicate))
