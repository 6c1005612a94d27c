"""
Data models for the analyzer.

Build Models:
- Per-module metrics and the per-build summary produced by the parser

Aggregate Models:
- Cross-build statistics produced by the aggregator

Analysis Models:
- Heuristic plugin-time estimates and build health hints

Configuration Models:
- Parser markers, health thresholds, output, storage and clean-install settings

All result models are frozen dataclasses: once returned to a caller they
are never mutated.
"""

from .aggregate import AggregatedSummary, ModuleStats
from .analysis import BUILD_SCOPE, HealthHint, HealthSeverity, PluginTiming
from .build import BuildSummary, ModuleRecord
from .config import (
    AppConfig,
    CleanInstallConfig,
    HealthThresholds,
    OutputConfig,
    ParserConfig,
    StorageConfig,
)

__all__ = [
    # Build
    "BuildSummary",
    "ModuleRecord",
    # Aggregate
    "AggregatedSummary",
    "ModuleStats",
    # Analysis
    "BUILD_SCOPE",
    "HealthHint",
    "HealthSeverity",
    "PluginTiming",
    # Configuration
    "AppConfig",
    "CleanInstallConfig",
    "HealthThresholds",
    "OutputConfig",
    "ParserConfig",
    "StorageConfig",
]
