"""Predicates and access paths.

A ``Predicate`` compares one column against a constant. It is the unit
both access paths understand: the sequential path evaluates it row by row,
the index path resolves it against a hash index (equality) or the index's
sorted key list (ranges).
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class ComparisonOp(Enum):
    """Comparison operators for predicates."""

    EQ = "="
    NE = "<>"
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


_EVALUATORS: dict[ComparisonOp, Callable[[Any, Any], bool]] = {
    ComparisonOp.EQ: operator.eq,
    ComparisonOp.NE: operator.ne,
    ComparisonOp.LT: operator.lt,
    ComparisonOp.LE: operator.le,
    ComparisonOp.GT: operator.gt,
    ComparisonOp.GE: operator.ge,
}


class AccessPath(Enum):
    """How an operator tree reads rows from the table."""

    SEQ_SCAN = "seq_scan"
    INDEX_LOOKUP = "index_lookup"


@dataclass(frozen=True)
class Predicate:
    """``column <op> value``, evaluated against tracks or rows."""

    column: str
    op: ComparisonOp
    value: Any

    def __call__(self, record: Any) -> bool:
        left = record[self.column]
        if left is None or self.value is None:
            return False
        return _EVALUATORS[self.op](left, self.value)

    @property
    def is_equality(self) -> bool:
        return self.op == ComparisonOp.EQ

    @property
    def is_range(self) -> bool:
        return self.op in (ComparisonOp.LT, ComparisonOp.LE, ComparisonOp.GT, ComparisonOp.GE)

    def __str__(self) -> str:
        value = self.value.value if isinstance(self.value, Enum) else self.value
        return f"{self.column} {self.op.value} {value!r}"
