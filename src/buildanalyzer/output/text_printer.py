"""
Human-readable text reports.

Every ``format_*`` function returns the complete report as a string; the
CLI decides where to print it.
"""

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from ..models.aggregate import AggregatedSummary
from ..models.analysis import HealthHint, PluginTiming
from ..models.build import BuildSummary, ModuleRecord

logger = logging.getLogger(__name__)

EPS = 1e-9

# Modules within this share of the slowest one are critical-path candidates.
CRITICAL_PATH_SHARE = 0.95
MAX_CRITICAL_PATH_CANDIDATES = 5


def _share(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole > EPS else 0.0


def _by_seconds(modules: Sequence[ModuleRecord]) -> List[ModuleRecord]:
    return sorted(modules, key=lambda m: m.seconds, reverse=True)


def format_single_build(
    log_path: Path,
    summary: BuildSummary,
    hints: Sequence[HealthHint] = (),
    plugin_timings: Optional[Mapping[str, Sequence[PluginTiming]]] = None,
    parallel: bool = False,
) -> str:
    """Render the report for one build.

    Args:
        log_path: Log file the summary was parsed from.
        summary: Parsed build summary.
        hints: Health hints; ignored for parallel builds.
        plugin_timings: Optional plugin-time estimates to append.
        parallel: Render the degraded view for interleaved parallel logs.
    """
    lines = ["=== Build Analyzer CLI ===", f"Log file : {log_path}", ""]

    if parallel:
        lines.extend(_parallel_section(summary))
        if plugin_timings is not None:
            lines.append("")
            lines.append("Plugin time estimates are not available for parallel builds.")
    else:
        lines.extend(_serial_section(summary))
        lines.append("")
        lines.extend(format_health_hints(hints))
        if plugin_timings is not None:
            lines.append("")
            lines.extend(format_plugin_timings(plugin_timings))

    return "\n".join(lines)


def _serial_section(summary: BuildSummary) -> List[str]:
    total = summary.total_seconds
    modules_total = summary.modules_seconds
    overhead = summary.overhead_seconds

    lines = [f"Total build time   : {total:.3f} s"]
    if total > EPS:
        lines.append(f"Modules total time : {modules_total:.3f} s ({_share(modules_total, total):.1f}% of build)")
        lines.append(f"Other / overhead   : {overhead:.3f} s ({_share(overhead, total):.1f}% of build)")
    else:
        lines.append(f"Modules total time : {modules_total:.3f} s")
        lines.append(f"Other / overhead   : {overhead:.3f} s")
    lines.append("")

    lines.append("Modules by time (share of whole build):")
    for index, module in enumerate(_by_seconds(summary.modules), start=1):
        lines.append(
            f"  {index}) {module.name:<15} {module.seconds:6.3f} s  "
            f"({_share(module.seconds, total):4.1f}% of build)"
        )
    lines.append("")

    slowest = max(summary.modules, key=lambda m: m.seconds, default=None)
    if slowest is not None:
        lines.append(
            f"Slowest module: {slowest.name} ({slowest.seconds:.3f} s, "
            f"{_share(slowest.seconds, total):.1f}% of build)"
        )

    lines.append("")
    lines.append("Test breakdown per module:")
    for module in summary.modules:
        if module.tests_run == 0 and module.test_seconds <= 0.0:
            lines.append(f"  {module.name}: no tests detected")
        else:
            lines.append(
                f"  {module.name}: tests {module.tests_run} (F:{module.failures}, "
                f"E:{module.errors}, S:{module.skipped}) in {module.test_seconds:.3f} s "
                f"({_share(module.test_seconds, module.seconds):.1f}% of module time)"
            )

    lines.append("")
    lines.append("Compilation workload (source files):")
    for module in summary.modules:
        lines.append(f"  {module.name}: main {module.main_source_files}, test {module.test_source_files}")

    return lines


def _parallel_section(summary: BuildSummary) -> List[str]:
    """Degraded view: module times overlap, so only build-wide figures are safe."""
    wall = summary.total_seconds
    work = summary.modules_seconds
    max_module = max((m.seconds for m in summary.modules), default=0.0)
    overlap = max(0.0, work - wall)

    lines = [
        "NOTE: Parallel build detected (MultiThreadedBuilder / -T).",
        "      In parallel builds, module times overlap, so some per-module metrics are disabled.",
        "",
        f"Wall clock total time : {wall:.3f} s",
    ]
    if wall > EPS:
        lines.append(f"Module work (sum of module durations): {work:.3f} s  ({work / wall:.2f}x wall clock)")
        lines.append(
            f"Critical-path estimate (max module)  : {max_module:.3f} s  "
            f"({_share(max_module, wall):.1f}% of wall clock)"
        )
    else:
        lines.append(f"Module work (sum of module durations): {work:.3f} s")
        lines.append(f"Critical-path estimate (max module)  : {max_module:.3f} s")
    lines.append(f"Estimated overlap / parallelism gain : {overlap:.3f} s  (work - wall)")
    lines.append("")

    ordered = _by_seconds(summary.modules)
    lines.append("Modules by duration (Reactor Summary):")
    for index, module in enumerate(ordered, start=1):
        lines.append(
            f"  {index}) {module.name:<15} {module.seconds:6.3f} s   "
            f"({_share(module.seconds, wall):4.1f}% of wall, {_share(module.seconds, work):4.1f}% of work)"
        )
    lines.append("")

    if ordered:
        slowest = [m.name for m in ordered if abs(m.seconds - max_module) < 1e-6]
        if len(slowest) == 1:
            lines.append(f"Slowest module: {slowest[0]} ({max_module:.3f} s)")
        else:
            lines.append(f"Slowest module(s): {', '.join(slowest)} ({max_module:.3f} s each)")

    tests = sum(m.tests_run for m in summary.modules)
    failures = sum(m.failures for m in summary.modules)
    errors = sum(m.errors for m in summary.modules)
    skipped = sum(m.skipped for m in summary.modules)
    test_seconds = sum(m.test_seconds for m in summary.modules)

    lines.append("")
    lines.append("Tests (build-wide, not per module):")
    if tests == 0 and test_seconds <= EPS:
        lines.append("  (no tests detected)")
    else:
        lines.append(f"  tests {tests} (F:{failures}, E:{errors}, S:{skipped}) in {test_seconds:.3f} s")

    main_sources = sum(m.main_source_files for m in summary.modules)
    test_sources = sum(m.test_source_files for m in summary.modules)
    lines.append("")
    lines.append("Compilation workload (build-wide, not per module):")
    lines.append(f"  main {main_sources}, test {test_sources}")

    lines.append("")
    lines.append("Build health hints:")
    lines.append(
        "  [INFO] Parallel build detected. Per-module test/compile attribution "
        "is disabled to avoid incorrect data."
    )
    threshold = max_module * CRITICAL_PATH_SHARE
    candidates = [m.name for m in ordered if m.seconds + 1e-6 >= threshold]
    if candidates:
        lines.append(
            f"  [WARN] Critical-path candidates: {', '.join(candidates[:MAX_CRITICAL_PATH_CANDIDATES])} "
            f"(~{max_module:.3f} s). Speeding up any of them may reduce wall time."
        )

    return lines


def format_health_hints(hints: Sequence[HealthHint]) -> List[str]:
    lines = ["Build health hints:"]
    if not hints:
        lines.append("  (no issues detected by current rules)")
        return lines

    for hint in hints:
        if hint.is_build_wide or not hint.scope.strip():
            lines.append(f"  {hint.severity.label} {hint.message}")
        else:
            lines.append(f"  {hint.severity.label} [{hint.scope}] {hint.message}")
    return lines


def format_plugin_timings(plugin_timings: Mapping[str, Sequence[PluginTiming]]) -> List[str]:
    """Render plugin-time estimates with an explicit heuristic disclaimer."""
    lines = [
        "Estimated plugin time per module:",
        "  (heuristic: each module's time split by the share of log lines per plugin block;",
        "   these are estimates, not measured durations)",
    ]
    if not plugin_timings:
        lines.append("  (no plugin blocks found)")
        return lines

    for module, timings in plugin_timings.items():
        lines.append(f"  {module}:")
        for timing in timings:
            lines.append(
                f"    {timing.plugin_key:<30} ~{timing.estimated_seconds:6.3f} s  "
                f"({timing.line_count} lines)"
            )
    return lines


def format_aggregated(mode_label: str, log_files: Sequence[Path], summary: AggregatedSummary) -> str:
    """Render the report for an aggregated set of builds."""
    lines = [
        f"=== Build Analyzer CLI (aggregate: {mode_label.lower()}) ===",
        f"Log files ({len(log_files)}):",
    ]
    lines.extend(f"  - {path}" for path in log_files)
    lines.append("")

    lines.append(f"Builds analyzed      : {summary.build_count}")
    lines.append(
        f"Total time (seconds) : avg {summary.average_total_seconds:.3f}, "
        f"min {summary.min_total_seconds:.3f}, max {summary.max_total_seconds:.3f}"
    )
    lines.append("")

    lines.append("Modules by average total time:")
    for index, module in enumerate(summary.modules, start=1):
        lines.append(
            f"  {index}) {module.name:<15} avg {module.average_seconds:6.3f} s  "
            f"(min {module.min_seconds:6.3f} s, max {module.max_seconds:6.3f} s, builds {module.build_count})"
        )

    lines.append("")
    lines.append("Modules by average test time (seconds):")
    with_tests = sorted(
        (m for m in summary.modules if m.average_test_seconds > 0.0),
        key=lambda m: m.average_test_seconds,
        reverse=True,
    )
    if not with_tests:
        lines.append("  (no tests detected in any module)")
    for index, module in enumerate(with_tests, start=1):
        lines.append(
            f"  {index}) {module.name:<15} avg {module.average_test_seconds:6.3f} s  "
            f"(min {module.min_test_seconds:6.3f} s, max {module.max_test_seconds:6.3f} s, "
            f"builds {module.build_count}, total tests {module.total_tests_run}, "
            f"failures {module.total_failures})"
        )

    lines.append("")
    lines.append("Average compilation workload per build (source files):")
    for module in summary.modules:
        lines.append(
            f"  {module.name}: main ~{module.average_main_source_files:.1f}, "
            f"test ~{module.average_test_source_files:.1f}"
        )

    return "\n".join(lines)
