"""
Rule-based build health evaluation.

Each rule is a pure function ``(summary, thresholds) -> list of hints``.
The rules run in the fixed order of ``HEALTH_RULES`` and their hints are
concatenated. No rule raises; a rule whose condition is not met simply
contributes nothing. All threshold comparisons are inclusive.
"""

import logging
from typing import Callable, List, Optional, Tuple

from ..models.analysis import BUILD_SCOPE, HealthHint, HealthSeverity
from ..models.build import BuildSummary
from ..models.config import HealthThresholds

logger = logging.getLogger(__name__)

HealthRule = Callable[[BuildSummary, HealthThresholds], List[HealthHint]]


def total_time_rule(summary: BuildSummary, thresholds: HealthThresholds) -> List[HealthHint]:
    total = summary.total_seconds
    minutes = total / 60.0

    if total >= thresholds.total_time_warn_seconds:
        return [
            HealthHint(
                HealthSeverity.WARN,
                BUILD_SCOPE,
                f"Total build time is {total:.1f} s ({minutes:.1f} min). Consider optimizing hotspots.",
            )
        ]
    if total >= thresholds.total_time_info_seconds:
        return [
            HealthHint(
                HealthSeverity.INFO,
                BUILD_SCOPE,
                f"Total build time is {total:.1f} s ({minutes:.1f} min). Might be worth watching over time.",
            )
        ]
    return []


def overhead_rule(summary: BuildSummary, thresholds: HealthThresholds) -> List[HealthHint]:
    total = summary.total_seconds
    if total <= 0.0:
        return []

    overhead = summary.overhead_seconds
    share = overhead / total

    if share >= thresholds.overhead_warn_share:
        return [
            HealthHint(
                HealthSeverity.WARN,
                BUILD_SCOPE,
                f"Non-module overhead is {overhead:.3f} s ({share * 100.0:.1f}% of build). "
                "Dependency resolution or lifecycle setup may be significant.",
            )
        ]
    if share >= thresholds.overhead_info_share:
        return [
            HealthHint(
                HealthSeverity.INFO,
                BUILD_SCOPE,
                f"Non-module overhead is {overhead:.3f} s ({share * 100.0:.1f}% of build).",
            )
        ]
    return []


def hot_module_rule(summary: BuildSummary, thresholds: HealthThresholds) -> List[HealthHint]:
    """Flag every module taking a large share of the build, slowest first."""
    total = summary.total_seconds
    if total <= 0.0:
        return []

    hints = []
    for module in sorted(summary.modules, key=lambda m: m.seconds, reverse=True):
        share = module.seconds / total
        message = (
            f"Module '{module.name}' takes {share * 100.0:.1f}% of total build time "
            f"({module.seconds:.3f} s)."
        )
        if share >= thresholds.hot_module_warn_share:
            hints.append(HealthHint(HealthSeverity.WARN, module.name, f"{message} It is a clear hotspot."))
        elif share >= thresholds.hot_module_info_share:
            hints.append(HealthHint(HealthSeverity.INFO, module.name, message))
    return hints


def failing_tests_rule(summary: BuildSummary, thresholds: HealthThresholds) -> List[HealthHint]:
    return [
        HealthHint(
            HealthSeverity.CRITICAL,
            module.name,
            f"Tests in module '{module.name}' have {module.failures} failures and {module.errors} errors.",
        )
        for module in summary.modules
        if module.failures > 0 or module.errors > 0
    ]


def slow_tests_rule(summary: BuildSummary, thresholds: HealthThresholds) -> List[HealthHint]:
    hints = []
    for module in summary.modules:
        if module.seconds <= 0.0 or module.test_seconds <= 0.0:
            continue

        share = module.test_seconds / module.seconds
        message = (
            f"Tests account for {share * 100.0:.1f}% of module '{module.name}' time "
            f"({module.test_seconds:.3f} s out of {module.seconds:.3f} s)."
        )
        if share >= thresholds.test_ratio_warn_share:
            hints.append(
                HealthHint(
                    HealthSeverity.WARN,
                    module.name,
                    f"{message} Consider speeding up or splitting tests.",
                )
            )
        elif share >= thresholds.test_ratio_info_share:
            hints.append(HealthHint(HealthSeverity.INFO, module.name, message))
    return hints


def untested_large_module_rule(summary: BuildSummary, thresholds: HealthThresholds) -> List[HealthHint]:
    hints = []
    for module in summary.modules:
        sources = module.main_source_files
        # Only the first matching branch fires for a module.
        if sources >= thresholds.untested_warn_main_sources and module.tests_run == 0:
            hints.append(
                HealthHint(
                    HealthSeverity.WARN,
                    module.name,
                    f"Module '{module.name}' has {sources} main source files but no tests were executed.",
                )
            )
        elif sources >= thresholds.untested_info_main_sources and module.test_source_files == 0:
            hints.append(
                HealthHint(
                    HealthSeverity.INFO,
                    module.name,
                    f"Module '{module.name}' has {sources} main source files but no test sources were compiled.",
                )
            )
    return hints


HEALTH_RULES: Tuple[HealthRule, ...] = (
    total_time_rule,
    overhead_rule,
    hot_module_rule,
    failing_tests_rule,
    slow_tests_rule,
    untested_large_module_rule,
)


def evaluate_health(
    summary: BuildSummary, thresholds: Optional[HealthThresholds] = None
) -> List[HealthHint]:
    """Apply every health rule to a build summary.

    Args:
        summary: Parsed build summary.
        thresholds: Rule thresholds; the built-in defaults when omitted.

    Returns:
        Hints in rule order. An empty list means no issue was found.
    """
    if thresholds is None:
        thresholds = HealthThresholds()

    hints: List[HealthHint] = []
    for rule in HEALTH_RULES:
        hints.extend(rule(summary, thresholds))

    logger.debug(f"Health evaluation produced {len(hints)} hints")
    return hints
