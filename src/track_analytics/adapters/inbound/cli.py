"""
Track Analytics CLI - entry point

Commands:
    run <query-id>                 print a query's result rows as a delimited table
    compare <query-id> --index C   time the query through a scan and through an index
    list                           list the catalog

Exit codes:
    0  success
    1  malformed or unreadable input
    2  query/index errors (no index, empty dataset, dataset too large, ...)
"""

from __future__ import annotations

import argparse
import csv
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Sequence, TextIO

from track_analytics import __version__
from track_analytics.adapters.outbound import FileTrackSource, SyntheticTrackSource
from track_analytics.application import ComparisonReport, TrackAnalytics
from track_analytics.domain.entities import Row
from track_analytics.infrastructure.config import Config, get_config
from track_analytics.infrastructure.logging import (
    bind_run_context,
    clear_run_context,
    get_logger,
    setup_logging,
)
from track_analytics.infrastructure.metrics import setup_metrics
from track_analytics.infrastructure.tracing import setup_tracing
from track_analytics.ports import (
    DatasetTooLargeError,
    EmptyDatasetError,
    FixtureFormatError,
    IndexNotApplicableError,
    MalformedRecordError,
    NoIndexError,
    UnknownColumnError,
    UnknownQueryError,
)
from track_analytics.ports.outbound import TrackSource

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_MALFORMED_INPUT = 1
EXIT_QUERY_ERROR = 2

_INPUT_ERRORS = (MalformedRecordError, FixtureFormatError)
_QUERY_ERRORS = (
    NoIndexError,
    EmptyDatasetError,
    DatasetTooLargeError,
    UnknownQueryError,
    UnknownColumnError,
    IndexNotApplicableError,
)


def _count(minimum: int):
    def parse(text: str) -> int:
        value = int(text)
        if value < minimum:
            raise argparse.ArgumentTypeError(f"must be at least {minimum}, got {value}")
        return value

    return parse


def _delimiter(text: str) -> str:
    if len(text) != 1:
        raise argparse.ArgumentTypeError(f"must be a single character, got {text!r}")
    return text


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    source = argparse.ArgumentParser(add_help=False)
    source.add_argument(
        "--source",
        type=Path,
        default=None,
        help="Fixture file (.csv or .json); synthetic data when omitted",
    )
    source.add_argument(
        "--synthetic-rows",
        type=_count(0),
        default=None,
        help="Rows to generate when no source file is given",
    )
    source.add_argument("--seed", type=int, default=None, help="Synthetic generator seed")

    parser = argparse.ArgumentParser(
        prog="track-analytics",
        description="Analytical queries over a tracks dataset",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured log level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", parents=[source], help="Run a catalog query")
    run.add_argument("query_id", type=int, help="Query id (1-13)")
    run.add_argument("--delimiter", type=_delimiter, default=",", help="Output column delimiter")

    compare = subparsers.add_parser(
        "compare", parents=[source], help="Compare scan and index access paths"
    )
    compare.add_argument("query_id", type=int, help="Query id (1-13)")
    compare.add_argument("--index", required=True, dest="column", help="Column to index")
    compare.add_argument("--repeat", type=_count(1), default=None, help="Timed runs per path")

    subparsers.add_parser("list", help="List catalog queries")

    return parser


def format_value(value: Any) -> str:
    """Render a result value for delimited output."""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(round(value, 6))
    return str(value)


def write_table(
    rows: Sequence[Row],
    columns: Sequence[str],
    out: TextIO,
    delimiter: str = ",",
) -> None:
    """Write a header plus one delimited line per row."""
    writer = csv.writer(out, delimiter=delimiter, lineterminator="\n")
    writer.writerow(columns)
    for row in rows:
        writer.writerow([format_value(row[column]) for column in columns])


def write_report(report: ComparisonReport, out: TextIO) -> None:
    """Write the two timing/descriptor pairs of a comparison."""
    out.write(f"query {report.query_id} ({report.query_name})\n")
    out.write(f"scan:  {report.scan_descriptor}: {report.scan_time:.6f} s\n")
    out.write(f"index: {report.index_descriptor}: {report.index_time:.6f} s\n")
    out.write(f"index build (excluded): {report.index_build_time:.6f} s\n")
    out.write(
        f"rows: {report.row_count} (paths agree: {'yes' if report.rows_match else 'no'})\n"
    )


def _source_for(args: argparse.Namespace, config: Config) -> TrackSource:
    path = args.source or config.dataset.source
    if path is not None:
        return FileTrackSource(path)
    count = args.synthetic_rows if args.synthetic_rows is not None else config.dataset.synthetic_rows
    seed = args.seed if args.seed is not None else config.dataset.seed
    return SyntheticTrackSource(count, seed=seed)


def _configure_observability(config: Config, log_level: str | None) -> None:
    observability = config.observability
    setup_logging(log_level or observability.log_level, observability.log_format)
    if observability.metrics_port is not None:
        setup_metrics(observability.metrics_port)
    if observability.otel_endpoint:
        setup_tracing(observability.otel_service_name, observability.otel_endpoint)


def main(argv: Sequence[str] | None = None, config: Config | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = config or get_config()
    _configure_observability(config, args.log_level)

    engine = TrackAnalytics(config)
    out = sys.stdout

    if args.command == "list":
        for query_id, name, description in engine.catalog.describe():
            out.write(f"{query_id:>2}  {name:<28} {description}\n")
        return EXIT_OK

    source = _source_for(args, config)
    bind_run_context(
        command=args.command,
        query_id=args.query_id,
        indexed_column=getattr(args, "column", None),
        source=source.describe(),
    )
    try:
        engine.load(source)
        if args.command == "run":
            query, rows = engine.run(args.query_id)
            write_table(rows, query.columns, out, delimiter=args.delimiter)
        else:
            report = engine.compare(args.query_id, args.column, repeat=args.repeat)
            write_report(report, out)
    except _INPUT_ERRORS as e:
        logger.error("input_error", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_MALFORMED_INPUT
    except _QUERY_ERRORS as e:
        logger.error("query_error", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_QUERY_ERROR
    finally:
        clear_run_context()

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
