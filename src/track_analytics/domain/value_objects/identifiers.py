"""Identifiers for rows of the in-memory table."""

from __future__ import annotations

from typing import NewType


RowId = NewType("RowId", int)
"""Zero-based position of a row in load order. Stable for the life of a table."""
