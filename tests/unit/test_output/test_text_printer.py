"""
Unit tests for the human-readable reports.
"""

from pathlib import Path

import pytest

from buildanalyzer.aggregation import aggregate_builds
from buildanalyzer.analysis import analyze_plugin_timings_for_summary, evaluate_health
from buildanalyzer.models import BuildSummary, HealthHint, HealthSeverity, ModuleRecord
from buildanalyzer.output import format_aggregated, format_health_hints, format_single_build
from buildanalyzer.parsing import parse_build_log


@pytest.fixture
def sample_summary(sample_log_lines):
    return parse_build_log(sample_log_lines)


@pytest.mark.unit
class TestSingleBuildReport:

    def test_sequential_report(self, sample_summary):
        report = format_single_build(Path("build.log"), sample_summary, evaluate_health(sample_summary))

        assert report.startswith("=== Build Analyzer CLI ===\nLog file : build.log")
        assert "Total build time   : 7.512 s" in report
        assert "1) core" in report
        assert "(61.7% of build)" in report
        assert "Slowest module: core (4.637 s, 61.7% of build)" in report
        assert "  core: tests 6 (F:0, E:0, S:1) in 0.200 s" in report
        assert "  webapp: no tests detected" in report
        assert "  webapp: main 60, test 0" in report
        assert "  [WARN] [core] Module 'core' takes 61.7% of total build time (4.637 s). It is a clear hotspot." in report

    def test_modules_listed_slowest_first(self, sample_summary):
        report = format_single_build(Path("build.log"), sample_summary)

        assert report.index("1) core") < report.index("2) webapp") < report.index("3) demo-parent")

    def test_plugin_estimates_are_labelled(self, sample_log_lines, sample_summary):
        timings = analyze_plugin_timings_for_summary(sample_log_lines, sample_summary)

        report = format_single_build(Path("build.log"), sample_summary, plugin_timings=timings)

        assert "Estimated plugin time per module:" in report
        assert "not measured durations" in report
        assert "surefire:test" in report

    def test_zero_total_build(self):
        summary = BuildSummary(total_seconds=0.0, modules=(ModuleRecord("core", 0.0),))

        report = format_single_build(Path("empty.log"), summary)

        assert "Modules total time : 0.000 s\n" in report
        assert "(no issues detected by current rules)" in report

    def test_parallel_report(self, sample_summary):
        report = format_single_build(Path("build.log"), sample_summary, parallel=True, plugin_timings={})

        assert "NOTE: Parallel build detected" in report
        assert "Wall clock total time : 7.512 s" in report
        assert "Slowest module: core (4.637 s)" in report
        assert "tests 6 (F:0, E:0, S:1) in 0.200 s" in report
        assert "main 72, test 3" in report
        assert "[WARN] Critical-path candidates: core" in report
        assert "Plugin time estimates are not available for parallel builds." in report
        assert "Test breakdown per module" not in report

    def test_parallel_report_with_tied_modules(self):
        summary = BuildSummary(
            total_seconds=3.0,
            modules=(ModuleRecord("a", 2.0), ModuleRecord("b", 2.0), ModuleRecord("c", 1.0)),
        )

        report = format_single_build(Path("p.log"), summary, parallel=True)

        assert "Slowest module(s): a, b (2.000 s each)" in report
        assert "Critical-path candidates: a, b (" in report
        assert "Estimated overlap / parallelism gain : 2.000 s" in report


@pytest.mark.unit
class TestHealthHintsSection:

    def test_build_wide_hint_has_no_scope(self):
        hints = [HealthHint(HealthSeverity.INFO, "build", "Slow build.")]
        assert format_health_hints(hints) == ["Build health hints:", "  [INFO] Slow build."]

    def test_module_hint_has_scope(self):
        hints = [HealthHint(HealthSeverity.CRITICAL, "core", "Broken.")]
        assert format_health_hints(hints)[1] == "  [CRITICAL] [core] Broken."


@pytest.mark.unit
class TestAggregatedReport:

    def test_aggregated_report(self, sample_summary):
        files = [Path("a.log"), Path("b.log")]
        summary = aggregate_builds([sample_summary, sample_summary])

        report = format_aggregated("DIRECTORY", files, summary)

        assert report.startswith("=== Build Analyzer CLI (aggregate: directory) ===")
        assert "Log files (2):\n  - a.log\n  - b.log" in report
        assert "Builds analyzed      : 2" in report
        assert "avg 7.512, min 7.512, max 7.512" in report
        assert "1) core" in report
        assert "avg  4.637 s  (min  4.637 s, max  4.637 s, builds 2)" in report
        assert "failures 0" in report
        assert "  webapp: main ~60.0, test ~0.0" in report

    def test_aggregated_without_tests(self):
        summary = aggregate_builds([BuildSummary(1.0, (ModuleRecord("docs", 1.0),))])

        assert "(no tests detected in any module)" in format_aggregated("PATTERN", [Path("x.log")], summary)
