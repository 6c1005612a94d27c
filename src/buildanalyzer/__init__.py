"""
Build Analyzer - Maven build log analysis.

Extracts per-module timings, test results and compile workload from Maven
console logs, aggregates them across builds, estimates plugin time and
evaluates build health.
"""

__version__ = "1.0.0"

from .aggregation import aggregate_builds
from .analysis import analyze_plugin_timings, analyze_plugin_timings_for_summary, evaluate_health
from .models import (
    AggregatedSummary,
    BuildSummary,
    HealthHint,
    HealthSeverity,
    ModuleRecord,
    ModuleStats,
    PluginTiming,
)
from .parsing import parse_build_log
from .validation import EmptyAggregationInput, MissingTotalTime, NoReactorSummaryModules, ParseError

__all__ = [
    "__version__",
    # Operations
    "parse_build_log",
    "aggregate_builds",
    "analyze_plugin_timings",
    "analyze_plugin_timings_for_summary",
    "evaluate_health",
    # Models
    "AggregatedSummary",
    "BuildSummary",
    "HealthHint",
    "HealthSeverity",
    "ModuleRecord",
    "ModuleStats",
    "PluginTiming",
    # Errors
    "EmptyAggregationInput",
    "MissingTotalTime",
    "NoReactorSummaryModules",
    "ParseError",
]
