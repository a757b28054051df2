"""
Track Analytics - In-memory analytical query engine over a tracks dataset

Loads a single denormalized table of music tracks, runs a fixed catalog of
analytical queries as composable relational operators, and compares
sequential-scan vs. index-lookup access paths.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
