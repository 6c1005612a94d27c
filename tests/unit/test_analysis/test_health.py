"""
Unit tests for build health rules.
"""

import pytest

from buildanalyzer.analysis import HEALTH_RULES, evaluate_health
from buildanalyzer.analysis.health import (
    failing_tests_rule,
    hot_module_rule,
    overhead_rule,
    slow_tests_rule,
    total_time_rule,
    untested_large_module_rule,
)
from buildanalyzer.models import BUILD_SCOPE, BuildSummary, HealthSeverity, HealthThresholds, ModuleRecord
from buildanalyzer.parsing import parse_build_log

DEFAULTS = HealthThresholds()


def _summary(total, *modules):
    return BuildSummary(total_seconds=total, modules=modules)


@pytest.mark.unit
class TestTotalTimeRule:

    def test_warn_at_threshold(self):
        hints = total_time_rule(_summary(300.0), DEFAULTS)

        assert len(hints) == 1
        assert hints[0].severity is HealthSeverity.WARN
        assert hints[0].scope == BUILD_SCOPE
        assert hints[0].message == "Total build time is 300.0 s (5.0 min). Consider optimizing hotspots."

    def test_info_just_below_warn(self):
        hints = total_time_rule(_summary(299.999), DEFAULTS)

        assert [h.severity for h in hints] == [HealthSeverity.INFO]
        assert "Might be worth watching" in hints[0].message

    def test_fast_build(self):
        assert total_time_rule(_summary(119.0), DEFAULTS) == []


@pytest.mark.unit
class TestOverheadRule:

    def test_skipped_for_zero_total(self):
        assert overhead_rule(_summary(0.0), DEFAULTS) == []

    def test_warn(self):
        hints = overhead_rule(_summary(10.0, ModuleRecord("core", 7.0)), DEFAULTS)

        assert [h.severity for h in hints] == [HealthSeverity.WARN]
        assert "3.000 s (30.0% of build)" in hints[0].message

    def test_info(self):
        hints = overhead_rule(_summary(10.0, ModuleRecord("core", 8.0)), DEFAULTS)

        assert [h.severity for h in hints] == [HealthSeverity.INFO]

    def test_modules_exceeding_total(self):
        assert overhead_rule(_summary(10.0, ModuleRecord("core", 12.0)), DEFAULTS) == []


@pytest.mark.unit
class TestHotModuleRule:

    def test_slowest_first(self):
        summary = _summary(
            10.0,
            ModuleRecord("small", 1.0),
            ModuleRecord("medium", 3.0),
            ModuleRecord("big", 5.0),
        )

        hints = hot_module_rule(summary, DEFAULTS)

        assert [(h.scope, h.severity) for h in hints] == [
            ("big", HealthSeverity.WARN),
            ("medium", HealthSeverity.INFO),
        ]
        assert hints[0].message.endswith("It is a clear hotspot.")

    def test_skipped_for_zero_total(self):
        assert hot_module_rule(_summary(0.0, ModuleRecord("core", 1.0)), DEFAULTS) == []


@pytest.mark.unit
class TestTestRules:

    def test_single_failure_is_one_critical_hint(self):
        summary = _summary(1.0, ModuleRecord("core", 0.1, tests_run=3, failures=1))

        hints = evaluate_health(summary)

        critical = [h for h in hints if h.severity is HealthSeverity.CRITICAL]
        assert len(critical) == 1
        assert critical[0].message == "Tests in module 'core' have 1 failures and 0 errors."

    def test_errors_alone_trigger(self):
        hints = failing_tests_rule(_summary(1.0, ModuleRecord("core", 1.0, errors=2)), DEFAULTS)
        assert [h.scope for h in hints] == ["core"]

    def test_slow_tests(self):
        summary = _summary(
            20.0,
            ModuleRecord("slow", 10.0, tests_run=5, test_seconds=6.0),
            ModuleRecord("some", 10.0, tests_run=5, test_seconds=3.0),
            ModuleRecord("quick", 10.0, tests_run=5, test_seconds=1.0),
        )

        hints = slow_tests_rule(summary, DEFAULTS)

        assert [(h.scope, h.severity) for h in hints] == [
            ("slow", HealthSeverity.WARN),
            ("some", HealthSeverity.INFO),
        ]

    def test_slow_tests_ignores_zero_durations(self):
        summary = _summary(1.0, ModuleRecord("core", 0.0, test_seconds=1.0))
        assert slow_tests_rule(summary, DEFAULTS) == []


@pytest.mark.unit
class TestUntestedLargeModuleRule:

    def test_warn_when_no_tests_ran(self):
        summary = _summary(1.0, ModuleRecord("big", 0.5, main_source_files=50))

        hints = untested_large_module_rule(summary, DEFAULTS)

        assert [h.severity for h in hints] == [HealthSeverity.WARN]

    def test_branches_are_exclusive(self):
        summary = _summary(1.0, ModuleRecord("big", 0.5, main_source_files=80, test_source_files=0))

        assert len(untested_large_module_rule(summary, DEFAULTS)) == 1

    def test_info_when_no_test_sources(self):
        summary = _summary(1.0, ModuleRecord("mid", 0.5, main_source_files=10, tests_run=1))

        hints = untested_large_module_rule(summary, DEFAULTS)

        assert [h.severity for h in hints] == [HealthSeverity.INFO]
        assert "no test sources were compiled" in hints[0].message

    def test_tested_module(self):
        summary = _summary(1.0, ModuleRecord("ok", 0.5, main_source_files=80, tests_run=4, test_source_files=2))
        assert untested_large_module_rule(summary, DEFAULTS) == []


@pytest.mark.unit
class TestEvaluateHealth:

    def test_rule_order_is_fixed(self):
        assert HEALTH_RULES == (
            total_time_rule,
            overhead_rule,
            hot_module_rule,
            failing_tests_rule,
            slow_tests_rule,
            untested_large_module_rule,
        )

    def test_healthy_build(self):
        summary = _summary(
            10.0,
            ModuleRecord("a", 2.0, tests_run=1, test_seconds=0.1, main_source_files=3, test_source_files=1),
            ModuleRecord("b", 2.0),
            ModuleRecord("c", 2.0),
            ModuleRecord("d", 2.0),
            ModuleRecord("e", 1.5),
        )
        assert evaluate_health(summary) == []

    def test_sample_build(self, sample_log_lines):
        hints = evaluate_health(parse_build_log(sample_log_lines))

        assert [(h.severity, h.scope) for h in hints] == [
            (HealthSeverity.WARN, "core"),
            (HealthSeverity.INFO, "webapp"),
            (HealthSeverity.WARN, "webapp"),
        ]
        assert "61.7%" in hints[0].message

    def test_custom_thresholds(self):
        summary = _summary(400.0, ModuleRecord("core", 390.0))
        thresholds = HealthThresholds(
            total_time_warn_seconds=600.0,
            total_time_info_seconds=240.0,
            hot_module_warn_share=1.0,
            hot_module_info_share=0.9,
        )

        hints = evaluate_health(summary, thresholds)

        assert [(h.severity, h.scope) for h in hints] == [
            (HealthSeverity.INFO, BUILD_SCOPE),
            (HealthSeverity.INFO, "core"),
        ]
