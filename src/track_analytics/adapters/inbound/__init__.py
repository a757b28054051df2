"""Inbound adapters for the analytics engine.

Inbound adapters handle incoming requests and convert them to
internal operations.

Exports:
    CLI:
        - main: Command-line entry point
        - build_parser: Argument parser
"""

from track_analytics.adapters.inbound.cli import build_parser, main

__all__ = [
    "build_parser",
    "main",
]
