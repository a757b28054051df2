"""Value objects for the analytics domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    - RowId: Position of a row within a loaded table
    - ComparisonOp: Comparison operators for predicates
    - Predicate: Single-column comparison against a constant
    - AccessPath: Sequential scan or index lookup
"""

from track_analytics.domain.value_objects.identifiers import RowId
from track_analytics.domain.value_objects.predicates import (
    AccessPath,
    ComparisonOp,
    Predicate,
)

__all__ = [
    "AccessPath",
    "ComparisonOp",
    "Predicate",
    "RowId",
]
