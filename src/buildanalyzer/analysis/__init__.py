"""
Single-build analysis.

Plugin Timing:
- Line-count based estimate of the time spent in each plugin goal

Health:
- Fixed, ordered set of threshold rules producing diagnostic hints
"""

from .health import HEALTH_RULES, evaluate_health
from .plugin_timing import analyze_plugin_timings, analyze_plugin_timings_for_summary

__all__ = [
    # Plugin timing
    "analyze_plugin_timings",
    "analyze_plugin_timings_for_summary",
    # Health
    "HEALTH_RULES",
    "evaluate_health",
]
