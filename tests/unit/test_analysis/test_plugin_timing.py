"""
Unit tests for the line-count plugin time heuristic.
"""

import pytest

from buildanalyzer.analysis import analyze_plugin_timings, analyze_plugin_timings_for_summary
from buildanalyzer.models import PluginTiming
from buildanalyzer.parsing import parse_build_log

COMPILE_HEADER = "[INFO] --- compiler:3.13.0:compile (default-compile) @ core ---"
TEST_HEADER = "[INFO] --- surefire:3.2.5:test (default-test) @ core ---"


@pytest.mark.unit
class TestAnalyzePluginTimings:
    """Splitting module durations over plugin blocks."""

    def test_proportional_split(self):
        lines = [COMPILE_HEADER, "a", "b", "c", TEST_HEADER, "x"]

        result = analyze_plugin_timings(lines, {"core": 8.0})

        assert result == {
            "core": [
                PluginTiming("compiler:compile", 3, 6.0),
                PluginTiming("surefire:test", 1, 2.0),
            ]
        }

    def test_recurring_blocks_accumulate(self):
        lines = [COMPILE_HEADER, "a", TEST_HEADER, "x", "y", "z", COMPILE_HEADER, "b", "c", "d", "e"]

        timings = analyze_plugin_timings(lines, {"core": 9.0})["core"]

        assert [t.plugin_key for t in timings] == ["compiler:compile", "surefire:test"]
        assert [t.line_count for t in timings] == [5, 3]
        assert timings[0].estimated_seconds == pytest.approx(5.625)

    def test_unknown_module_gets_zero_estimates(self):
        lines = [COMPILE_HEADER, "a", "b"]

        timings = analyze_plugin_timings(lines, {})["core"]

        assert timings == [PluginTiming("compiler:compile", 2, 0.0)]

    def test_non_positive_duration_gets_zero_estimates(self):
        lines = [COMPILE_HEADER, "a"]

        assert analyze_plugin_timings(lines, {"core": 0.0})["core"][0].estimated_seconds == 0.0
        assert analyze_plugin_timings(lines, {"core": -1.0})["core"][0].estimated_seconds == 0.0

    def test_empty_blocks(self):
        lines = [COMPILE_HEADER, TEST_HEADER]

        timings = analyze_plugin_timings(lines, {"core": 5.0})["core"]

        assert all(t.line_count == 0 and t.estimated_seconds == 0.0 for t in timings)

    def test_no_plugin_headers(self):
        assert analyze_plugin_timings(["[INFO] BUILD SUCCESS"], {"core": 1.0}) == {}

    def test_estimates_sum_to_module_duration(self, sample_log_lines):
        summary = parse_build_log(sample_log_lines)

        result = analyze_plugin_timings_for_summary(sample_log_lines, summary)

        assert list(result) == ["demo-parent", "core", "webapp"]
        for module in summary.modules:
            total = sum(t.estimated_seconds for t in result[module.name])
            assert total == pytest.approx(module.seconds)

    def test_sorted_by_descending_estimate(self, sample_log_lines):
        summary = parse_build_log(sample_log_lines)

        for timings in analyze_plugin_timings_for_summary(sample_log_lines, summary).values():
            estimates = [t.estimated_seconds for t in timings]
            assert estimates == sorted(estimates, reverse=True)

    def test_core_steps_match_pipeline(self, sample_log_lines):
        summary = parse_build_log(sample_log_lines)

        core = analyze_plugin_timings_for_summary(sample_log_lines, summary)["core"]

        assert {t.plugin_key for t in core} == set(summary.modules[1].pipeline_steps)
