"""
Maven console log parser.

This module turns the lines of one Maven build log into a ``BuildSummary``.
Parsing happens in three independent steps over the same lines:

1. The wall-clock total is read from the last "Total time" line.
2. A forward pass tracks the module currently being built (from the
   "Building <module> ... [i/n]" headers) and attributes plugin steps,
   compiled source files and test results to it.
3. The Reactor Summary table supplies each module's duration and the
   final module order; the metrics from step 2 are merged in.

Lines that match none of the recognized patterns are ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..models.build import BuildSummary, ModuleRecord
from ..validation.exceptions import MissingTotalTime, NoReactorSummaryModules
from . import patterns

logger = logging.getLogger(__name__)

DEFAULT_TEST_OUTPUT_MARKER = "test-classes"


@dataclass
class _ModuleMetrics:
    """Mutable per-module accumulator, local to a single parse call."""

    name: str
    seconds: float = 0.0
    tests_run: int = 0
    failures: int = 0
    errors: int = 0
    skipped: int = 0
    test_seconds: float = 0.0
    main_source_files: int = 0
    test_source_files: int = 0
    pipeline_steps: List[str] = field(default_factory=list)

    def add_test_stats(self, run: int, failures: int, errors: int, skipped: int, seconds: float) -> None:
        self.tests_run += run
        self.failures += failures
        self.errors += errors
        self.skipped += skipped
        self.test_seconds += seconds

    def to_record(self) -> ModuleRecord:
        return ModuleRecord(
            name=self.name,
            seconds=self.seconds,
            tests_run=self.tests_run,
            failures=self.failures,
            errors=self.errors,
            skipped=self.skipped,
            test_seconds=self.test_seconds,
            main_source_files=self.main_source_files,
            test_source_files=self.test_source_files,
            pipeline_steps=tuple(self.pipeline_steps),
        )


def parse_build_log(
    lines: Sequence[str],
    test_output_marker: str = DEFAULT_TEST_OUTPUT_MARKER,
    source: Optional[str] = None,
) -> BuildSummary:
    """Parse the lines of a Maven build log into a BuildSummary.

    Args:
        lines: Log lines in file order, without line terminators.
        test_output_marker: Compile targets containing this text are counted
            as test sources.
        source: Optional description of where the lines came from, attached
            to parse errors.

    Returns:
        An immutable BuildSummary with modules in Reactor Summary order.

    Raises:
        MissingTotalTime: If no "Total time" line is present. This is checked
            before, and independently of, the module data.
        NoReactorSummaryModules: If the Reactor Summary lists no modules.
    """
    total_seconds = parse_total_time(lines, source=source)
    metrics = parse_module_metrics(lines, test_output_marker=test_output_marker)
    modules = parse_reactor_summary(lines, metrics, source=source)

    logger.debug(
        f"Parsed build log{f' {source}' if source else ''}: "
        f"total {total_seconds:.3f} s, {len(modules)} modules"
    )
    return BuildSummary(total_seconds=total_seconds, modules=tuple(modules))


def parse_total_time(lines: Sequence[str], source: Optional[str] = None) -> float:
    """Return the build's total time in seconds.

    The log is scanned backwards so the last "Total time" line wins.

    Raises:
        MissingTotalTime: If no line carries a parsable total time.
    """
    for line in reversed(lines):
        if patterns.TOTAL_TIME_MARKER not in line:
            continue
        match = patterns.TOTAL_TIME_PATTERN.search(line)
        if match:
            return patterns.to_seconds(float(match.group(1)), match.group(2))
    raise MissingTotalTime(source=source)


def parse_module_metrics(
    lines: Sequence[str],
    test_output_marker: str = DEFAULT_TEST_OUTPUT_MARKER,
) -> Dict[str, _ModuleMetrics]:
    """Collect plugin steps, compile counts and test results per module.

    Lines before the first "Building ..." header have no module context and
    are skipped. Each remaining line is classified as at most one of plugin
    header, compile line or test result line.
    """
    metrics: Dict[str, _ModuleMetrics] = {}
    current: Optional[_ModuleMetrics] = None

    for line in lines:
        building = patterns.BUILDING_MODULE_PATTERN.search(line)
        if building:
            name = building.group(1).strip()
            current = metrics.setdefault(name, _ModuleMetrics(name))
            continue

        if current is None:
            continue

        header = patterns.match_plugin_header(line)
        if header:
            plugin_key, _module = header
            current.pipeline_steps.append(plugin_key)
            continue

        compile_match = patterns.COMPILE_PATTERN.search(line)
        if compile_match:
            files = int(compile_match.group(1))
            target = compile_match.group(2)
            if test_output_marker in target:
                current.test_source_files += files
            else:
                current.main_source_files += files
            continue

        test_match = patterns.TEST_RESULT_PATTERN.search(line)
        if test_match:
            run, failures, errors, skipped = (int(g) for g in test_match.groups()[:4])
            current.add_test_stats(run, failures, errors, skipped, float(test_match.group(5)))

    return metrics


def parse_reactor_summary(
    lines: Sequence[str],
    metrics: Optional[Dict[str, _ModuleMetrics]] = None,
    source: Optional[str] = None,
) -> List[ModuleRecord]:
    """Read module durations from the Reactor Summary table.

    Scanning starts after the "Reactor Summary" marker and stops at the
    first BUILD SUCCESS / BUILD FAILURE line. A divider line is skipped only
    when it is the first divider seen and no module has been parsed yet;
    any other divider ends the table.

    Args:
        lines: Log lines.
        metrics: Per-module accumulators from ``parse_module_metrics``.
            Modules missing from it get an empty accumulator.
        source: Optional log description attached to the error.

    Returns:
        Module records in table order.

    Raises:
        NoReactorSummaryModules: If the table yields no module.
    """
    if metrics is None:
        metrics = {}

    modules: List[ModuleRecord] = []
    in_summary = False
    seen_divider = False

    for line in lines:
        if not in_summary:
            if patterns.REACTOR_SUMMARY_MARKER in line:
                in_summary = True
            continue

        if patterns.is_build_terminal(line):
            break

        if patterns.is_divider(line):
            if not modules and not seen_divider:
                seen_divider = True
                continue
            break

        match = patterns.REACTOR_MODULE_PATTERN.search(line)
        if match:
            name = match.group(1).strip()
            accumulator = metrics.setdefault(name, _ModuleMetrics(name))
            accumulator.seconds = float(match.group(2))
            modules.append(accumulator.to_record())

    if not modules:
        raise NoReactorSummaryModules(source=source)

    return modules


def detect_parallel_build(lines: Sequence[str], marker: str = "MultiThreadedBuilder") -> bool:
    """Return True if the log comes from a parallel (-T) Maven build.

    Parallel builds interleave module output, which breaks per-module
    attribution of tests, compile counts and plugin blocks.
    """
    return any(marker in line for line in lines)
