"""
Maven console log parsing.

This module converts raw log lines into an immutable per-build summary.
"""

from .parser import (
    DEFAULT_TEST_OUTPUT_MARKER,
    detect_parallel_build,
    parse_build_log,
    parse_module_metrics,
    parse_reactor_summary,
    parse_total_time,
)
from .patterns import to_seconds

__all__ = [
    "DEFAULT_TEST_OUTPUT_MARKER",
    "detect_parallel_build",
    "parse_build_log",
    "parse_module_metrics",
    "parse_reactor_summary",
    "parse_total_time",
    "to_seconds",
]
