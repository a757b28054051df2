"""Application layer for the analytics engine.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    Engine:
        - TrackAnalytics: Main entry point (load, run, compare)
    Executor:
        - Operator: Base class for executor operators
        - SeqScanOperator, IndexLookupOperator: Access paths
        - FilterOperator, ProjectOperator, ComputeOperator
        - HashAggregateOperator, DistinctOperator, DenseRankOperator
        - SortOperator, LimitOperator
    Catalog:
        - AnalyticalQuery: Base class for catalog queries
        - QueryCatalog: Registry of the thirteen reference queries
    Reporter:
        - PlanReporter, ComparisonReport, compare
"""

from track_analytics.application.analytics_engine import TrackAnalytics
from track_analytics.application.executor import (
    AggregateFunc,
    AggregateSpec,
    ComputeOperator,
    DenseRankOperator,
    DistinctOperator,
    FilterOperator,
    HashAggregateOperator,
    IndexLookupOperator,
    LimitOperator,
    Operator,
    ProjectOperator,
    SeqScanOperator,
    SortKey,
    SortOperator,
    build_access_operator,
)
from track_analytics.application.plan_reporter import (
    ComparisonReport,
    PlanReporter,
    compare,
)
from track_analytics.application.query_catalog import AnalyticalQuery, QueryCatalog

__all__ = [
    "TrackAnalytics",
    "AggregateFunc",
    "AggregateSpec",
    "ComputeOperator",
    "DenseRankOperator",
    "DistinctOperator",
    "FilterOperator",
    "HashAggregateOperator",
    "IndexLookupOperator",
    "LimitOperator",
    "Operator",
    "ProjectOperator",
    "SeqScanOperator",
    "SortKey",
    "SortOperator",
    "build_access_operator",
    "AnalyticalQuery",
    "QueryCatalog",
    "ComparisonReport",
    "PlanReporter",
    "compare",
]
