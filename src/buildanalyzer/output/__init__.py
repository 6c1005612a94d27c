"""
Report rendering for the buildanalyzer package.

Text Reports:
- Single-build report (serial and degraded parallel views)
- Aggregated multi-build report

JSON:
- Compact or pretty documents for single and aggregated results
"""

from .json_writer import (
    aggregated_payload,
    format_aggregated_json,
    format_single_build_json,
    single_build_payload,
)
from .text_printer import (
    format_aggregated,
    format_health_hints,
    format_plugin_timings,
    format_single_build,
)

__all__ = [
    # Text
    "format_single_build",
    "format_aggregated",
    "format_health_hints",
    "format_plugin_timings",
    # JSON
    "single_build_payload",
    "aggregated_payload",
    "format_single_build_json",
    "format_aggregated_json",
]
